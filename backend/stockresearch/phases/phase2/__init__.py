"""Phase 2: Web Search & Retrieval."""

from .clients import search_google, search_searxng
from .schemas import (
    ResearchTaskResult,
    ResearchTickerResult,
    SearchError,
    SearchOutcome,
    SearchResult,
)
from .search_orchestrator import (
    RESEARCH_TOPICS,
    ResearchTask,
    build_research_tasks,
    group_by_target,
    run_research_searches,
)
from .search_router import compose_query, search_web
from .support import (
    MISSING_CREDENTIALS_STATUS,
    build_search_status,
    format_search_results,
    run_with_concurrency,
)

__all__ = [
    "build_research_tasks",
    "build_search_status",
    "compose_query",
    "format_search_results",
    "group_by_target",
    "run_research_searches",
    "run_with_concurrency",
    "search_google",
    "search_searxng",
    "search_web",
    "MISSING_CREDENTIALS_STATUS",
    "RESEARCH_TOPICS",
    "ResearchTask",
    "ResearchTaskResult",
    "ResearchTickerResult",
    "SearchError",
    "SearchOutcome",
    "SearchResult",
]
