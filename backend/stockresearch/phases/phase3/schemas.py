"""
Phase 3 — Report: Pydantic schemas for the research output.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class ChartDescriptor(BaseModel):
    """Renderable chart slot. The UI decides how to draw it; this only says what."""

    kind: Literal["stock_chart", "notice"] = "stock_chart"
    symbol: Optional[str] = None
    title: str = ""
    message: Optional[str] = Field(default=None, description="Text for notice entries")
    height: int = 360
    comparison_symbols: list[str] = Field(default_factory=list)


class ResearchOutput(BaseModel):
    """Terminal artifact of one research run."""

    tickers: list[str] = Field(default_factory=list)
    report: str
    charts: list[ChartDescriptor] = Field(default_factory=list)
