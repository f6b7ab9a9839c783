"""
Context aggregation and deterministic report pieces (fallback report, chart descriptors).
"""

from stockresearch.phases.phase2.schemas import ResearchTickerResult, SearchError
from stockresearch.phases.phase3.schemas import ChartDescriptor

RESULTS_PER_SEARCH = 3
DEFAULT_SNIPPET_MAX_CHARS = 300

NO_TICKER_MESSAGE = "No ticker was identified for charting. Provide a ticker (e.g., MSFT) to render charts."


def _truncate(text: str, max_chars: int) -> str:
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    # The ellipsis counts toward max_chars
    return text[: max_chars - 1].rstrip() + "…"


def build_research_context(
    data: list[ResearchTickerResult],
    snippet_max_chars: int = DEFAULT_SNIPPET_MAX_CHARS,
) -> str:
    """Flatten grouped search results into the text block handed to report synthesis."""
    if not data:
        return "Search results:\n(none)"

    lines: list[str] = []
    for ticker_data in data:
        lines.append(f"Ticker: {ticker_data.symbol}")
        for search in ticker_data.searches:
            lines.append(f"Query: {search.query}")
            if search.status:
                lines.append(f"Status: {search.status}")
            results = search.results[:RESULTS_PER_SEARCH]
            if not results:
                lines.append("Results: (none)")
                continue
            for idx, result in enumerate(results, start=1):
                title = result.title or "Untitled"
                content = _truncate(result.content or "", snippet_max_chars)
                snippet = f" - {content}" if content else ""
                lines.append(f"{idx}. {title} ({result.url or ''}){snippet}")
        lines.append("")
    return "\n".join(lines).strip()


def count_total_results(data: list[ResearchTickerResult]) -> int:
    return sum(len(search.results) for item in data for search in item.searches)


def has_missing_credentials(data: list[ResearchTickerResult]) -> bool:
    return any(search.error == SearchError.MISSING_CREDENTIALS for item in data for search in item.searches)


def build_coverage_line(tickers: list[str], subject_label: str) -> str:
    return f"Coverage: {', '.join(tickers) if tickers else subject_label}"


def build_fallback_report(subject_label: str, coverage_line: str, missing_credentials: bool) -> str:
    if missing_credentials:
        reason = "Search is unavailable because CF_ID/CF_SECRET are missing."
    else:
        reason = "Search results were limited. Please refine the request or try again later."
    return f"Research report for {subject_label}\n{coverage_line}\n{reason}"


def build_research_charts(tickers: list[str]) -> list[ChartDescriptor]:
    """One stock chart per ticker, or a single notice when nothing resolved."""
    if not tickers:
        return [ChartDescriptor(kind="notice", title="Research charts", message=NO_TICKER_MESSAGE)]
    return [ChartDescriptor(kind="stock_chart", symbol=ticker, title=ticker) for ticker in tickers]
