"""
Google Custom Search JSON API client. Uses GOOGLESEARCH_API_KEY and GOOGLESEARCH_CX.
"""

import asyncio
import logging
from typing import Optional

import requests

from stockresearch.config import Settings
from stockresearch.phases.phase2.schemas import SearchError, SearchOutcome, SearchResult

logger = logging.getLogger(__name__)

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"

# Reuse session for connection pooling
_session: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _fetch(query: str, settings: Settings) -> SearchOutcome:
    params = {
        "q": query,
        "key": settings.google_search_api_key,
        "cx": settings.google_search_cx,
        "hl": settings.google_language,
        "num": "10",
    }
    headers = {"accept": "application/json", "user-agent": settings.searxng_user_agent}
    try:
        response = _get_session().get(
            GOOGLE_SEARCH_URL,
            params=params,
            headers=headers,
            timeout=settings.search_timeout_seconds,
        )
    except requests.exceptions.RequestException as e:
        logger.warning("Google search error for query '%s': %s", query, e)
        return SearchOutcome.failure(SearchError.REQUEST_FAILED)

    if not response.ok:
        logger.warning("Google search returned HTTP %s for query '%s'", response.status_code, query)
        return SearchOutcome.failure(SearchError.REQUEST_FAILED)

    try:
        data = response.json()
    except ValueError:
        logger.warning("Google search returned a non-JSON body for query '%s'", query)
        return SearchOutcome.failure(SearchError.INVALID_RESPONSE)

    if not isinstance(data, dict):
        return SearchOutcome.failure(SearchError.INVALID_RESPONSE)
    if data.get("error"):
        error = data["error"]
        message = error.get("message") if isinstance(error, dict) else error
        logger.warning("Google search reported an error for query '%s': %s", query, message)
        return SearchOutcome.failure(SearchError.REQUEST_FAILED)

    # No "items" key is how the API reports zero hits
    items = data.get("items", [])
    if not isinstance(items, list):
        return SearchOutcome.failure(SearchError.INVALID_RESPONSE)

    results = []
    for item in items:
        if not isinstance(item, dict):
            continue
        result = SearchResult.from_fields(item.get("title"), item.get("link"), item.get("snippet"))
        if result is not None:
            results.append(result)
    return SearchOutcome(results=results)


async def search_google(query: str, settings: Settings) -> SearchOutcome:
    if not settings.has_google_search:
        return SearchOutcome.failure(SearchError.MISSING_CREDENTIALS)
    return await asyncio.to_thread(_fetch, query, settings)
