"""
SearXNG client for the self-hosted aggregator behind Cloudflare Access. Uses CF_ID / CF_SECRET.
Reuses a single requests.Session; the blocking call runs in a worker thread.
"""

import asyncio
import logging
from typing import Optional

import requests

from stockresearch.config import Settings
from stockresearch.phases.phase2.schemas import SearchError, SearchOutcome, SearchResult

logger = logging.getLogger(__name__)

_session: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _parse_results(data: object) -> Optional[list[SearchResult]]:
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        return None
    results = []
    for item in data["results"]:
        if not isinstance(item, dict):
            continue
        result = SearchResult.from_fields(item.get("title"), item.get("url"), item.get("content"))
        if result is not None:
            results.append(result)
    return results


def _fetch(query: str, settings: Settings, engine: Optional[str]) -> SearchOutcome:
    params = {"q": query, "format": "json", "language": settings.searxng_language}
    if engine:
        params["engines"] = engine
    headers = {
        "accept": "application/json",
        "user-agent": settings.searxng_user_agent,
        "CF-Access-Client-Id": settings.cf_id,
        "CF-Access-Client-Secret": settings.cf_secret,
    }
    try:
        response = _get_session().get(
            settings.searxng_url,
            params=params,
            headers=headers,
            timeout=settings.search_timeout_seconds,
        )
    except requests.exceptions.RequestException as e:
        logger.warning("SearXNG request error for query '%s': %s", query, e)
        return SearchOutcome.failure(SearchError.REQUEST_FAILED)

    if not response.ok:
        logger.warning("SearXNG returned HTTP %s for query '%s'", response.status_code, query)
        return SearchOutcome.failure(SearchError.REQUEST_FAILED)

    try:
        data = response.json()
    except ValueError:
        logger.warning("SearXNG returned a non-JSON body for query '%s'", query)
        return SearchOutcome.failure(SearchError.INVALID_RESPONSE)

    results = _parse_results(data)
    if results is None:
        logger.warning("SearXNG response for query '%s' has no results field", query)
        return SearchOutcome.failure(SearchError.INVALID_RESPONSE)
    return SearchOutcome(results=results)


async def search_searxng(
    query: str,
    settings: Settings,
    *,
    engine: Optional[str] = None,
) -> SearchOutcome:
    """
    Run one SearXNG query. `query` is sent as-is; exclusion clauses are the caller's job.

    Missing access credentials return missing_credentials without touching the network.
    """
    if not settings.has_searxng_credentials:
        return SearchOutcome.failure(SearchError.MISSING_CREDENTIALS)
    return await asyncio.to_thread(_fetch, query, settings, engine)
