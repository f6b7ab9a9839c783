"""Phase 1: Ticker Resolution."""

from .llm_utils import OpenAICompleter, TextCompleter, extract_json_object, get_completer
from .schemas import ResearchTickers
from .ticker_resolver import (
    clean_research_target,
    discover_ticker_via_search,
    parse_research_tickers,
    resolve_tickers,
)
from .tickers import (
    TICKER_STOPLIST,
    extract_explicit_ticker,
    extract_ticker_from_text,
    find_ticker_candidates,
    is_plausible_ticker,
    normalize_ticker,
    unique_tickers,
)

__all__ = [
    "clean_research_target",
    "discover_ticker_via_search",
    "extract_explicit_ticker",
    "extract_json_object",
    "extract_ticker_from_text",
    "find_ticker_candidates",
    "get_completer",
    "is_plausible_ticker",
    "normalize_ticker",
    "parse_research_tickers",
    "resolve_tickers",
    "unique_tickers",
    "OpenAICompleter",
    "ResearchTickers",
    "TextCompleter",
    "TICKER_STOPLIST",
]
