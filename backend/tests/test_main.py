"""Tests for the HTTP API."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import build_settings, outcome_with
from stockresearch.exceptions import ConfigurationError
from stockresearch.main import app
from stockresearch.phases.phase2.schemas import SearchError, SearchOutcome
from stockresearch.phases.phase3.report import build_research_charts
from stockresearch.phases.phase3.schemas import ResearchOutput


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_missing_keys(client):
    with patch("stockresearch.main.settings", build_settings(llm_api_key="", cf_id="")):
        resp = client.get("/api/v1/config/missing-keys")
    assert resp.status_code == 200
    assert resp.json() == {"missing_keys": ["GROQ_API_KEY", "CF_ID"]}


def test_search_endpoint(client):
    with patch("stockresearch.main.search_web", AsyncMock(return_value=outcome_with("Nvidia beats"))):
        resp = client.post("/api/v1/search", json={"query": "NVDA news"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["status"] is None
    assert body["outcome"]["results"][0]["title"] == "Nvidia beats"
    assert body["formatted"].startswith("Search results:\n1. Nvidia beats")


def test_search_endpoint_reports_error_status(client):
    failed = SearchOutcome.failure(SearchError.MISSING_CREDENTIALS)
    with patch("stockresearch.main.search_web", AsyncMock(return_value=failed)):
        body = client.post("/api/v1/search", json={"query": "NVDA news"}).json()

    assert body["outcome"]["error"] == "missing_credentials"
    assert body["status"] == "Search skipped: missing CF_ID/CF_SECRET."
    assert body["formatted"] == ""


def test_research_endpoint_collects_progress(client):
    async def fake_run(subject, progress, settings=None):
        progress("Identifying relevant tickers...")
        progress("Done.")
        return ResearchOutput(tickers=["NVDA"], report="# Research Report: NVDA", charts=build_research_charts(["NVDA"]))

    with patch("stockresearch.main.run_research", side_effect=fake_run) as run:
        resp = client.post("/api/v1/research", json={"subject": "research NVDA"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["tickers"] == ["NVDA"]
    assert body["report"] == "# Research Report: NVDA"
    assert body["charts"][0]["symbol"] == "NVDA"
    assert body["progress"] == ["Identifying relevant tickers...", "Done."]
    assert run.call_args[0][0] == "research NVDA"


def test_research_endpoint_configuration_error_is_503(client):
    with patch("stockresearch.main.run_research", AsyncMock(side_effect=ConfigurationError("GROQ_API_KEY environment variable is required"))):
        resp = client.post("/api/v1/research", json={"subject": "research NVDA"})

    assert resp.status_code == 503
    assert "GROQ_API_KEY" in resp.json()["detail"]
