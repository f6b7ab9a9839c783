"""
Provider fallback chain: Google Custom Search first (when configured), then SearXNG.

SearXNG queries carry an exclusion clause to cut noise. For sparse long-tail tickers
the clause can remove everything relevant, so a zero-result filtered query is
retried once with the plain phrasing before giving up.
"""

import logging
from typing import Optional

from stockresearch.config import Settings
from stockresearch.phases.phase2.clients import search_google, search_searxng
from stockresearch.phases.phase2.schemas import SearchError, SearchOutcome

logger = logging.getLogger(__name__)


def compose_query(query: str, exclude: str) -> str:
    return f"{query} {exclude}".strip()


async def _search_filtered_then_plain(
    query: str,
    settings: Settings,
    engine: Optional[str] = None,
) -> SearchOutcome:
    """
    Filtered phrasing first, plain retry only after a clean zero-result reply.
    Returns the plain outcome when it has results, otherwise the filtered one.
    """
    exclude = settings.searxng_query_exclude.strip()
    primary = await search_searxng(compose_query(query, exclude), settings, engine=engine)
    if primary.has_results or primary.error or not exclude:
        return primary

    logger.debug("No results for filtered query '%s'%s, retrying plain", query, f" on {engine}" if engine else "")
    plain = await search_searxng(query.strip(), settings, engine=engine)
    return plain if plain.has_results else primary


async def _search_searxng_chain(query: str, settings: Settings) -> SearchOutcome:
    engines = settings.engine_list
    if not engines:
        return await _search_filtered_then_plain(query, settings)

    last_response: Optional[SearchOutcome] = None
    last_error: Optional[SearchOutcome] = None
    for engine in engines:
        candidate = await _search_filtered_then_plain(query, settings, engine)
        if candidate.has_results:
            return candidate
        if candidate.error:
            last_error = candidate
            if candidate.error == SearchError.MISSING_CREDENTIALS:
                break
        else:
            last_response = candidate

    # Zero-result success outranks an error from another engine
    if last_response is not None:
        return last_response
    return last_error if last_error is not None else SearchOutcome()


async def search_web(query: str, settings: Optional[Settings] = None) -> SearchOutcome:
    """
    One logical web search through the provider chain. Never raises for provider
    failures; they come back as SearchOutcome.error.
    """
    settings = settings or Settings()

    if settings.has_google_search:
        google = await search_google(query, settings)
        if google.has_results or not settings.googlesearch_fallback_searx:
            return google
        logger.info("Google returned no results for '%s', falling back to SearXNG", query)

    return await _search_searxng_chain(query, settings)
