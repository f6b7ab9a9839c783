"""
Ticker normalization and validation.

The shape pattern alone accepts plenty of everyday acronyms (USD, CEO, ETF...);
a false positive there silently sends the whole research run after the wrong
symbol, so every candidate also goes through TICKER_STOPLIST.
"""

import re
from typing import Iterable

TICKER_PATTERN = re.compile(r"^[A-Z0-9]{1,5}(?:[.-][A-Z0-9]{1,2})?$")

TICKER_STOPLIST = frozenset(
    {
        "USD",
        "US",
        "ETF",
        "ETFS",
        "AI",
        "CEO",
        "CFO",
        "EPS",
        "IPO",
        "GDP",
        "SEC",
        "ETN",
    }
)

_CASHTAG = re.compile(r"\$([A-Za-z]{1,5}(?:[.-][A-Za-z]{1,2})?)")
_UPPER_RUN = re.compile(r"\b[A-Z]{1,5}(?:[.-][A-Z]{1,2})?\b")
_PAREN_TICKER = re.compile(r"\(([A-Z]{1,5}(?:[.-][A-Z0-9]{1,2})?)\)")
_EXCHANGE_TICKER = re.compile(r"\b(?:NASDAQ|NYSE|AMEX|LSE|TSX|HKEX)\s*:\s*([A-Z]{1,5}(?:[.-][A-Z0-9]{1,2})?)\b")
_BARE_TICKER = re.compile(r"\b[A-Z]{1,5}(?:[.-][A-Z0-9]{1,2})?\b")


def normalize_ticker(raw: str) -> str:
    """Uppercase, keep only [A-Z0-9.-], drop leading dots. Idempotent."""
    value = re.sub(r"[^A-Z0-9.\-]", "", (raw or "").upper())
    return value.lstrip(".").strip()


def is_plausible_ticker(token: str) -> bool:
    return bool(TICKER_PATTERN.fullmatch(token or "")) and token not in TICKER_STOPLIST


def _first_valid(matches: Iterable[str]) -> str:
    for match in matches:
        candidate = normalize_ticker(match)
        if is_plausible_ticker(candidate):
            return candidate
    return ""


def extract_explicit_ticker(text: str) -> str:
    """$TICKER cash-tag first, then the first valid bare uppercase run. "" when none."""
    text = text or ""
    cashtag = _first_valid(m.group(1) for m in _CASHTAG.finditer(text))
    if cashtag:
        return cashtag
    return _first_valid(m.group(0) for m in _UPPER_RUN.finditer(text))


def extract_ticker_from_text(text: str) -> str:
    """
    Best ticker mention in free text (search titles/snippets), by priority:
    "(NVDA)", then "NASDAQ: NVDA", then a bare ticker-shaped token.
    """
    text = text or ""
    for pattern, group in ((_PAREN_TICKER, 1), (_EXCHANGE_TICKER, 1), (_BARE_TICKER, 0)):
        match = pattern.search(text)
        if match:
            candidate = normalize_ticker(match.group(group))
            if is_plausible_ticker(candidate):
                return candidate
    return ""


def find_ticker_candidates(text: str) -> list[str]:
    """Every valid ticker-shaped uppercase token in first-seen order, without duplicates."""
    return unique_tickers(m.group(0) for m in _UPPER_RUN.finditer(text or ""))


def unique_tickers(tickers: Iterable[str]) -> list[str]:
    normalized = (normalize_ticker(t) for t in tickers)
    return [t for t in dict.fromkeys(normalized) if t and is_plausible_ticker(t)]
