"""
Research pipeline: resolve tickers → multi-topic search fan-out → aggregate → draft report.

Orchestrates: Phase 1 (ticker resolution) → Phase 2 (bounded, rate-limited search
across targets x topics) → Phase 3 (context aggregation and report synthesis).
Single entry point: run_research(subject, progress).
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from stockresearch.config import Settings
from stockresearch.phases.phase1.llm_utils import TextCompleter, get_completer
from stockresearch.phases.phase1.ticker_resolver import resolve_tickers
from stockresearch.phases.phase1.tickers import unique_tickers
from stockresearch.phases.phase2.schemas import SearchOutcome
from stockresearch.phases.phase2.search_orchestrator import RESEARCH_TOPICS, run_research_searches
from stockresearch.phases.phase2.search_router import search_web
from stockresearch.phases.phase3.report import (
    build_coverage_line,
    build_fallback_report,
    build_research_charts,
    build_research_context,
    count_total_results,
    has_missing_credentials,
)
from stockresearch.phases.phase3.schemas import ResearchOutput
from stockresearch.phases.phase3.synthesis import synthesize_report
from stockresearch.state import ConversationState, Message, research_tool_call

logger = logging.getLogger(__name__)

ProgressFn = Callable[[str], None]
SearchFn = Callable[[str], Awaitable[SearchOutcome]]


class ResearchStage(str, Enum):
    RESOLVING = "resolving"
    SEARCHING = "searching"
    ANALYZING = "analyzing"
    DRAFTING = "drafting"
    DONE = "done"


STAGE_MESSAGES = {
    ResearchStage.RESOLVING: "Identifying relevant tickers...",
    ResearchStage.SEARCHING: "Searching news, fundamentals, earnings, valuation, and risks...",
    ResearchStage.ANALYZING: "Analyzing search results...",
    ResearchStage.DRAFTING: "Drafting the research report...",
    ResearchStage.DONE: "Done.",
}


def _progress_sink(progress: Optional[ProgressFn]) -> ProgressFn:
    """Wrap the caller's callback so it can observe the run but never break it."""

    def notify(message: str) -> None:
        if progress is None:
            return
        try:
            progress(message)
        except Exception:
            logger.exception("Progress callback raised; ignoring")

    return notify


async def run_research(
    subject: str,
    progress: Optional[ProgressFn] = None,
    *,
    settings: Settings | None = None,
    completer: Optional[TextCompleter] = None,
    search: Optional[SearchFn] = None,
    state: Optional[ConversationState] = None,
) -> ResearchOutput:
    """
    Run one research invocation for a free-text subject ("research NVDA").

    Always returns a complete ResearchOutput; search, parse and model failures
    degrade to fallbacks. The only exception that escapes is ConfigurationError,
    raised when no model API key is configured and no completer was supplied.

    Args:
        subject: Free-text research request.
        progress: Optional callback receiving one human-readable line per step.
        settings: Settings override (defaults to env).
        completer: Text completion backend (defaults to the configured OpenAI-compatible endpoint).
        search: Search function override (defaults to the provider fallback chain).
        state: Optional conversation state; receives the tool call and report, then is committed.
    """
    settings = settings or Settings()
    completer = completer or get_completer(settings)
    search = search or (lambda q: search_web(q, settings))
    notify = _progress_sink(progress)

    if state is not None:
        for message in research_tool_call(subject):
            state.update(message)

    # Resolving
    logger.info("Research started for '%s'", subject)
    notify(STAGE_MESSAGES[ResearchStage.RESOLVING])
    resolved = await resolve_tickers(subject, completer=completer, settings=settings, search=search, notify=notify)
    related = resolved.related[: max(settings.max_related_tickers, 0)]
    tickers = unique_tickers([resolved.base, *related]) if resolved.base else []
    subject_label = resolved.base or resolved.target
    coverage_line = build_coverage_line(tickers, subject_label)
    notify(f"Identified tickers: {', '.join(tickers) or subject_label}")

    # Without a ticker the cleaned subject itself is searched
    targets = tickers or [resolved.target]

    # Searching
    notify(
        f"Running {len(targets) * len(RESEARCH_TOPICS)} searches with max concurrency "
        f"{settings.research_search_concurrency} and {settings.research_search_delay_seconds:g}s delay."
    )
    notify(STAGE_MESSAGES[ResearchStage.SEARCHING])
    research_results = await run_research_searches(targets, settings, search=search, notify=notify)

    # Analyzing
    notify(STAGE_MESSAGES[ResearchStage.ANALYZING])
    total_results = count_total_results(research_results)
    missing_credentials = has_missing_credentials(research_results)
    fallback_report = build_fallback_report(subject_label, coverage_line, missing_credentials)
    logger.info(
        "Research for %s: %d targets, %d results, missing credentials=%s",
        subject_label,
        len(targets),
        total_results,
        missing_credentials,
    )

    # Drafting
    notify(STAGE_MESSAGES[ResearchStage.DRAFTING])
    if missing_credentials or total_results == 0:
        report = fallback_report
    else:
        report = await synthesize_report(
            completer,
            subject_label=subject_label,
            coverage_line=coverage_line,
            context=build_research_context(research_results, settings.research_snippet_max_chars),
            fallback=fallback_report,
            settings=settings,
        )

    output = ResearchOutput(tickers=tickers, report=report, charts=build_research_charts(tickers))

    if state is not None:
        state.update(Message(role="assistant", content=report))
        state.commit()

    notify(STAGE_MESSAGES[ResearchStage.DONE])
    return output


def run_research_sync(subject: str, progress: Optional[ProgressFn] = None, **kwargs: Any) -> ResearchOutput:
    """Blocking wrapper around run_research for callers without an event loop."""
    return asyncio.run(run_research(subject, progress, **kwargs))
