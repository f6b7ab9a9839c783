"""
Stock research API: ticker resolution, multi-topic search fan-out, report synthesis.
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from stockresearch.config import Settings, missing_keys
from stockresearch.phases.phase2 import (
    SearchOutcome,
    build_search_status,
    format_search_results,
    search_web,
)
from stockresearch.phases.phase3.schemas import ResearchOutput
from stockresearch.pipeline import run_research

settings = Settings()
logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title="StockResearch", version="0.1.0")


class ResearchRequest(BaseModel):
    subject: str


class ResearchResponse(ResearchOutput):
    progress: list[str] = Field(default_factory=list)


class SearchRequest(BaseModel):
    query: str


class SearchResponse(BaseModel):
    query: str
    status: Optional[str] = None
    outcome: SearchOutcome
    formatted: str = ""


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/v1/config/missing-keys")
def config_missing_keys():
    """Required env keys that are unset (GROQ_API_KEY, and CF_ID/CF_SECRET unless Google search is configured)."""
    return {"missing_keys": missing_keys(settings)}


@app.post("/api/v1/search", response_model=SearchResponse)
async def search(body: SearchRequest):
    """Single web search through the provider fallback chain."""
    outcome = await search_web(body.query, settings)
    return SearchResponse(
        query=body.query,
        status=build_search_status(outcome),
        outcome=outcome,
        formatted=format_search_results(outcome),
    )


@app.post("/api/v1/research", response_model=ResearchResponse)
async def research(body: ResearchRequest):
    """
    Full research run: resolve tickers → search news, fundamentals, earnings,
    valuation and risks → draft report.

    Returns: tickers, report, charts, and the progress lines emitted along the way.
    """
    progress: list[str] = []
    try:
        output = await run_research(body.subject, progress.append, settings=settings)
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ResearchResponse(**output.model_dump(), progress=progress)
