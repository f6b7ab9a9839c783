"""Pytest fixtures shared by the research engine tests."""

from typing import Optional
from unittest.mock import MagicMock

import pytest

from stockresearch.config import Settings
from stockresearch.phases.phase1.ticker_resolver import TICKER_SYSTEM
from stockresearch.phases.phase2.schemas import SearchOutcome, SearchResult


def build_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env and search-related env vars."""
    values = dict(
        llm_api_key="test-key",
        google_search_api_key="",
        google_search_cx="",
        google_search_language="",
        googlesearch_fallback_searx=False,
        searxng_url="https://searx.example.com/search",
        searxng_language="en",
        searxng_query_exclude="-site:*.cn",
        searxng_engines="",
        cf_id="client-id",
        cf_secret="client-secret",
        research_search_concurrency=2,
        research_search_delay_seconds=0,
        research_snippet_max_chars=300,
        max_related_tickers=0,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeCompleter:
    """TextCompleter double that answers the ticker and report prompts separately."""

    def __init__(
        self,
        ticker_reply: str = '{"base":"NVDA"}',
        report_reply: str = "# Research Report: NVDA\nCoverage: NVDA\n\n## Highlights\n- Data-center revenue grew (reuters.com)",
        ticker_error: Optional[Exception] = None,
        report_error: Optional[Exception] = None,
    ):
        self.ticker_reply = ticker_reply
        self.report_reply = report_reply
        self.ticker_error = ticker_error
        self.report_error = report_error
        self.ticker_calls: list[dict] = []
        self.report_calls: list[dict] = []

    async def complete(self, system_prompt, messages, max_output_tokens, *, model=None):
        call = {"system": system_prompt, "messages": messages, "max_output_tokens": max_output_tokens, "model": model}
        if system_prompt == TICKER_SYSTEM:
            self.ticker_calls.append(call)
            if self.ticker_error:
                raise self.ticker_error
            return self.ticker_reply
        self.report_calls.append(call)
        if self.report_error:
            raise self.report_error
        return self.report_reply


class RecordingSearch:
    """Async search double: records queries and returns a canned outcome per query."""

    def __init__(self, outcome_for=None):
        self.outcome_for = outcome_for or (lambda query: outcome_with(query))
        self.queries: list[str] = []

    async def __call__(self, query: str) -> SearchOutcome:
        self.queries.append(query)
        return self.outcome_for(query)


def outcome_with(*titles: str) -> SearchOutcome:
    return SearchOutcome(
        results=[
            SearchResult(title=t, url=f"https://example.com/{i}", content=f"snippet about {t}")
            for i, t in enumerate(titles)
        ]
    )


def make_response(payload=None, status_code: int = 200, json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def settings():
    return build_settings()


@pytest.fixture
def fake_completer():
    return FakeCompleter()
