"""
Phase 2 support: bounded concurrency runner and search status/formatting helpers in one module.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from stockresearch.phases.phase2.schemas import SearchError, SearchOutcome

T = TypeVar("T")
R = TypeVar("R")

# ----- Bounded concurrency -----


async def run_with_concurrency(
    items: Sequence[T],
    limit: int,
    worker: Callable[[T, int], Awaitable[R]],
) -> list[R]:
    """
    Run `worker(item, index)` for every item with at most `limit` in flight.

    Workers share one cursor and keep claiming the next index until the items run
    out, so results[i] always belongs to items[i] whatever the completion order.
    Exceptions from `worker` propagate; callers that need partial-failure
    tolerance must pass a worker that never raises.
    """
    results: list[Optional[R]] = [None] * len(items)
    next_index = 0

    async def _run_worker() -> None:
        nonlocal next_index
        while next_index < len(items):
            current = next_index
            next_index += 1
            results[current] = await worker(items[current], current)

    worker_count = min(max(limit, 1), len(items))
    await asyncio.gather(*(_run_worker() for _ in range(worker_count)))
    return results  # type: ignore[return-value]


# ----- Search status -----

MISSING_CREDENTIALS_STATUS = "Search skipped: missing CF_ID/CF_SECRET."

_ERROR_STATUS = {
    SearchError.MISSING_CREDENTIALS: MISSING_CREDENTIALS_STATUS,
    SearchError.REQUEST_FAILED: "Search failed: request error from search provider.",
    SearchError.INVALID_RESPONSE: "Search failed: unexpected search provider response.",
}


def build_search_status(outcome: Optional[SearchOutcome]) -> Optional[str]:
    """Human-readable status line, or None when the outcome has results and no error."""
    if outcome is None:
        return "Search failed: no response."
    if outcome.error is not None:
        return _ERROR_STATUS[outcome.error]
    if not outcome.has_results:
        return "Search completed: no results."
    return None


# ----- Formatting -----


def format_search_results(outcome: Optional[SearchOutcome], limit: int = 10) -> str:
    """Numbered 'title (url) - snippet' block; empty string when there is nothing to show."""
    if outcome is None or not outcome.has_results:
        return ""
    lines = []
    for idx, result in enumerate(outcome.results[:limit], start=1):
        title = result.title or "Untitled"
        snippet = f" - {result.content}" if result.content else ""
        lines.append(f"{idx}. {title} ({result.url or ''}){snippet}")
    return "Search results:\n" + "\n".join(lines)
