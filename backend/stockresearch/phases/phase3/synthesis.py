"""
Phase 3: Report synthesis. One model call turns the research context into a cited report.
"""
import logging

from stockresearch.config import Settings
from stockresearch.phases.phase1.llm_utils import TextCompleter
from stockresearch.phases.phase2.search_orchestrator import RESEARCH_TOPICS

logger = logging.getLogger(__name__)

REPORT_MAX_OUTPUT_TOKENS = 1000

REPORT_SYSTEM = r"""You are an equity research analyst. Use the search results to write a concise, visually rich report in English.
Cover: news, fundamentals, earnings, valuation, and risks. Mention source domains when citing facts.
If data is missing, say so explicitly.

Required format:
# Research Report: <Ticker or Company>
Coverage: <comma-separated tickers or company>

## Highlights
- 4-6 bullets with specific facts and sources

## Risks
- 3-5 bullets

## Flow
```mermaid
flowchart TD
  A[Driver] --> B[Impact]
  B --> C[Revenue]
  C --> D[Margin]
```

## Valuation Math
Include at least one LaTeX block formula, even if symbolic.
Example:
$$
\text{P/E} = \frac{\text{Price}}{\text{EPS}}
$$

## Conclusion
2-3 sentences.

Keep under 2600 characters."""


def build_report_user_message(subject_label: str, coverage_line: str, context: str) -> str:
    return f"Base: {subject_label}\n{coverage_line}\nTopics: {', '.join(RESEARCH_TOPICS)}\n{context}"


async def synthesize_report(
    completer: TextCompleter,
    *,
    subject_label: str,
    coverage_line: str,
    context: str,
    fallback: str,
    settings: Settings | None = None,
) -> str:
    """Draft the report. Any model failure or an empty reply yields `fallback`."""
    settings = settings or Settings()
    try:
        text = await completer.complete(
            REPORT_SYSTEM,
            [{"role": "user", "content": build_report_user_message(subject_label, coverage_line, context)}],
            REPORT_MAX_OUTPUT_TOKENS,
            model=settings.model_report,
        )
    except Exception as e:
        logger.warning("Report synthesis failed for %s: %s", subject_label, e)
        return fallback
    return (text or "").strip() or fallback
