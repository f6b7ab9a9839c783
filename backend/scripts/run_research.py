"""
Run one research invocation end to end: resolve tickers → search fan-out → report.

Run from backend with:
  python scripts/run_research.py
  python scripts/run_research.py "deep dive on Microsoft"

Requires: GROQ_API_KEY, plus CF_ID/CF_SECRET or GOOGLESEARCH_API_KEY/GOOGLESEARCH_CX (env or .env).
Prints progress lines as they happen, then tickers, charts and the report.
"""

import logging
import os
import sys
from textwrap import shorten

# Add backend root so "stockresearch" is importable from scripts/ or from backend/
_backend_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _backend_root not in sys.path:
    sys.path.insert(0, _backend_root)

from stockresearch.config import Settings, missing_keys
from stockresearch.phases.phase1.ticker_resolver import clean_research_target
from stockresearch.pipeline import run_research_sync


def _trunc(s: str, max_len: int = 72) -> str:
    return shorten(s, width=max_len, placeholder="…") if s else ""


def _section(title: str) -> None:
    print()
    print("=" * 80)
    print(f"  {title}")
    print("=" * 80)


def main() -> None:
    subject = (sys.argv[1] if len(sys.argv) > 1 else "research NVDA").strip() or "research NVDA"
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    missing = missing_keys(settings)
    if missing:
        print("Missing env vars (set or use .env):", ", ".join(missing))
        sys.exit(1)

    _section("INPUT")
    print(f"Subject: {subject}")
    print(f"Cleaned target: {clean_research_target(subject)}")
    print(f"Google search: {'on' if settings.has_google_search else 'off'}; SearXNG engines: {settings.engine_list or '(default)'}")

    _section("PROGRESS")
    output = run_research_sync(subject, lambda line: print(f"  {line}"), settings=settings)

    _section("TICKERS & CHARTS")
    print(f"Tickers: {', '.join(output.tickers) or '(none)'}")
    for chart in output.charts:
        label = chart.symbol or chart.message or ""
        print(f"  [{chart.kind}] {_trunc(label)}")

    _section("REPORT")
    print(output.report)
    print()


if __name__ == "__main__":
    main()
