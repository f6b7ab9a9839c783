from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SearchError(str, Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    REQUEST_FAILED = "request_failed"
    INVALID_RESPONSE = "invalid_response"


def _clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class SearchResult(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_fields(cls, title: Any, url: Any, content: Any) -> Optional["SearchResult"]:
        """Build from untrusted provider fields; None when nothing usable is left."""
        result = cls(title=_clean_text(title), url=_clean_text(url), content=_clean_text(content))
        if result.title is None and result.url is None and result.content is None:
            return None
        return result


class SearchOutcome(BaseModel):
    """Normalized provider response. error set => results empty."""

    results: list[SearchResult] = Field(default_factory=list)
    error: Optional[SearchError] = None

    @classmethod
    def failure(cls, error: SearchError) -> "SearchOutcome":
        return cls(results=[], error=error)

    @property
    def result_count(self) -> int:
        return len(self.results)

    @property
    def has_results(self) -> bool:
        return bool(self.results)


class ResearchTaskResult(BaseModel):
    target: str
    query: str
    topic_index: int
    status: Optional[str] = None
    results: list[SearchResult] = Field(default_factory=list)
    error: Optional[SearchError] = None


class ResearchTickerResult(BaseModel):
    symbol: str
    searches: list[ResearchTaskResult] = Field(default_factory=list)
