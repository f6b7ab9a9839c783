"""
Search orchestrator: fan out the fixed research topics across every target with
bounded concurrency and a per-task delay, then regroup results by target.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from stockresearch.config import Settings
from stockresearch.phases.phase2.schemas import (
    ResearchTaskResult,
    ResearchTickerResult,
    SearchError,
    SearchOutcome,
)
from stockresearch.phases.phase2.search_router import search_web
from stockresearch.phases.phase2.support import build_search_status, run_with_concurrency

logger = logging.getLogger(__name__)

RESEARCH_TOPICS = [
    "news",
    "company fundamentals",
    "earnings",
    "valuation",
    "risks",
]

SearchFn = Callable[[str], Awaitable[SearchOutcome]]
ProgressFn = Callable[[str], None]


@dataclass
class ResearchTask:
    target: str
    topic: str
    topic_index: int
    query: str


def build_research_tasks(targets: list[str], topics: Optional[list[str]] = None) -> list[ResearchTask]:
    """Cartesian product targets x topics, target-major, topics in their fixed order."""
    topics = RESEARCH_TOPICS if topics is None else topics
    return [
        ResearchTask(target=target, topic=topic, topic_index=idx, query=f"{target} {topic}".strip())
        for target in targets
        for idx, topic in enumerate(topics)
    ]


def group_by_target(targets: list[str], task_results: list[ResearchTaskResult]) -> list[ResearchTickerResult]:
    """One entry per target in target order; each target's searches sorted by topic index."""
    by_target: dict[str, list[ResearchTaskResult]] = defaultdict(list)
    for result in task_results:
        by_target[result.target].append(result)
    return [
        ResearchTickerResult(
            symbol=target,
            searches=sorted(by_target.get(target, []), key=lambda r: r.topic_index),
        )
        for target in targets
    ]


async def run_research_searches(
    targets: list[str],
    settings: Settings,
    *,
    search: Optional[SearchFn] = None,
    notify: Optional[ProgressFn] = None,
    topics: Optional[list[str]] = None,
) -> list[ResearchTickerResult]:
    """
    Run every (target, topic) search and return results grouped per target.

    A failing task never aborts the run: any exception from the search call is
    recorded as a request_failed result for that task.
    """
    search = search or (lambda q: search_web(q, settings))
    notify = notify or (lambda message: None)
    tasks = build_research_tasks(targets, topics)
    delay = max(settings.research_search_delay_seconds, 0.0)

    async def _run_task(task: ResearchTask, index: int) -> ResearchTaskResult:
        notify(f"Searching: {task.query}")
        try:
            outcome = await search(task.query)
        except Exception as e:
            logger.warning("Search task '%s' failed: %s", task.query, e)
            outcome = SearchOutcome.failure(SearchError.REQUEST_FAILED)
        logger.debug("Task %d '%s': %d results, error=%s", index, task.query, outcome.result_count, outcome.error)
        notify(f"Finished: {task.query} ({outcome.result_count} results)")
        if delay > 0:
            await asyncio.sleep(delay)
        return ResearchTaskResult(
            target=task.target,
            query=task.query,
            topic_index=task.topic_index,
            status=build_search_status(outcome),
            results=outcome.results,
            error=outcome.error,
        )

    task_results = await run_with_concurrency(tasks, settings.research_search_concurrency, _run_task)
    return group_by_target(targets, task_results)
