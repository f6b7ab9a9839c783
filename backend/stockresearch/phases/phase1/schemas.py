"""
Phase 1 — Ticker resolution: Pydantic schemas.
"""

from pydantic import BaseModel, Field


class ResearchTickers(BaseModel):
    """Resolved tickers for a research subject. base == "" means nothing resolved."""

    target: str = Field(default="", description="Cleaned research subject the tickers were resolved from")
    base: str = Field(default="", description="Primary ticker, e.g. 'NVDA'")
    related: list[str] = Field(default_factory=list, description="Other tickers mentioned alongside the base")

    @property
    def resolved(self) -> bool:
        return bool(self.base)
