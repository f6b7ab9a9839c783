"""
Phase 1: Ticker resolution
- Clean the research subject ("deep dive on Microsoft" -> "Microsoft")
- Classify it to a ticker with one small model call
- Fall back to regex extraction, then to discovery through web search

Resolution never raises: an unresolvable subject comes back with base == "".
"""
import logging
import re
from typing import Awaitable, Callable, Optional

from stockresearch.config import Settings
from stockresearch.phases.phase1.llm_utils import TextCompleter, extract_json_object
from stockresearch.phases.phase1.schemas import ResearchTickers
from stockresearch.phases.phase1.tickers import (
    extract_explicit_ticker,
    extract_ticker_from_text,
    find_ticker_candidates,
    is_plausible_ticker,
    normalize_ticker,
    unique_tickers,
)
from stockresearch.phases.phase2.schemas import SearchOutcome
from stockresearch.phases.phase2.search_router import search_web

logger = logging.getLogger(__name__)

TICKER_MAX_OUTPUT_TOKENS = 200

TICKER_SYSTEM = """You are a market research assistant.

Task:
Given a company name or ticker, return JSON only in the format:
{"base":"TICKER"}

Rules:
- base must be a valid US stock ticker.
- Always use uppercase tickers.
- Return JSON only. No explanations. No extra text.

These are some common company tickers for your reference.
Microsoft / Microsoft's -> MSFT
Apple / Apple Inc -> AAPL
Google -> GOOGL
Alphabet -> GOOGL
Amazon -> AMZN
Meta -> META
Facebook -> META
Nvidia -> NVDA
Tesla -> TSLA
Morgan Stanley -> MS
Goldman Sachs -> GS
JPMorgan -> JPM

If the user does not name a company, use an index:
- If query contains "stock market" -> SPY
- If query contains "market" (general, no company) -> SPY
- If query contains "tech" -> QQQ
- If query contains "ai" -> QQQ

Final rules:
- If multiple matches exist, prioritize company mapping.
- If you don't know ticker, default to SPY.

Output example:
{"base":"NVDA"}"""

_COMMAND_PREFIX = re.compile(r"^(research|deep\s*dive|full\s*report|report)\b\s*", re.IGNORECASE)
_SUBJECT_CLAUSE = re.compile(r"\b(?:about|on|for|regarding|of)\s+([^?!.]+)$", re.IGNORECASE)
_LEADING_ARTICLE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)

SearchFn = Callable[[str], Awaitable[SearchOutcome]]
ProgressFn = Callable[[str], None]


def clean_research_target(text: str) -> str:
    """
    Reduce a research request to its subject: drop a leading command word, prefer the
    object of a trailing "about/on/for/regarding/of X" clause, drop a leading article
    and trailing punctuation. Falls back to the trimmed input.
    """
    trimmed = (text or "").strip()
    stripped = _COMMAND_PREFIX.sub("", trimmed).rstrip("?!. ")
    match = _SUBJECT_CLAUSE.search(stripped)
    candidate = match.group(1) if match else stripped
    cleaned = _LEADING_ARTICLE.sub("", candidate.strip())
    return cleaned.rstrip("?!. ").strip() or trimmed


def parse_research_tickers(raw: str, fallback_symbol: str) -> ResearchTickers:
    """
    Parse the classification response. Uses the first JSON object when there is one,
    otherwise scans the raw text for ticker-shaped tokens (first = base).
    """
    fallback_candidate = normalize_ticker(fallback_symbol)
    fallback = fallback_candidate if is_plausible_ticker(fallback_candidate) else ""

    data = extract_json_object(raw)
    if data is not None:
        base_candidate = normalize_ticker(str(data.get("base") or fallback))
        base = base_candidate if is_plausible_ticker(base_candidate) else fallback
        related_raw = data.get("related")
        related = unique_tickers(str(item) for item in related_raw) if isinstance(related_raw, list) else []
        return ResearchTickers(base=base, related=[t for t in related if t != base])

    candidates = find_ticker_candidates(raw)
    return ResearchTickers(base=candidates[0] if candidates else fallback, related=candidates[1:])


async def discover_ticker_via_search(
    target: str,
    search: SearchFn,
    notify: Optional[ProgressFn] = None,
) -> str:
    """Search '<target> stock ticker' and take the first ticker mentioned in a result."""
    notify = notify or (lambda message: None)
    notify(f'Trying to resolve ticker for "{target}"...')
    try:
        outcome = await search(f"{target} stock ticker")
    except Exception as e:
        logger.warning("Ticker discovery search failed for '%s': %s", target, e)
        return ""

    for result in outcome.results:
        combined = f"{result.title or ''} {result.content or ''}".strip()
        candidate = extract_ticker_from_text(combined)
        if candidate:
            notify(f"Resolved ticker: {candidate}")
            return candidate
    return ""


async def resolve_tickers(
    subject: str,
    *,
    completer: TextCompleter,
    settings: Settings | None = None,
    search: Optional[SearchFn] = None,
    notify: Optional[ProgressFn] = None,
) -> ResearchTickers:
    """
    Resolve a free-text research subject to a base ticker (plus related ones).

    Order: model classification, explicit ticker in the subject, search discovery.
    """
    settings = settings or Settings()
    search = search or (lambda q: search_web(q, settings))
    target = clean_research_target(subject)
    explicit = extract_explicit_ticker(target)

    related: list[str] = []
    try:
        raw = await completer.complete(
            TICKER_SYSTEM,
            [{"role": "user", "content": target}],
            TICKER_MAX_OUTPUT_TOKENS,
            model=settings.model_ticker,
        )
        parsed = parse_research_tickers(raw, target)
        base = parsed.base or explicit
        related = parsed.related
    except Exception as e:
        logger.warning("Ticker classification failed for '%s', using fallbacks: %s", target, e)
        base = explicit

    if not base:
        base = await discover_ticker_via_search(target, search, notify)

    return ResearchTickers(
        target=target,
        base=base,
        related=[t for t in related if t != base] if base else [],
    )
