"""Phase 3: Report Assembly & Synthesis."""

from .report import (
    NO_TICKER_MESSAGE,
    build_coverage_line,
    build_fallback_report,
    build_research_charts,
    build_research_context,
    count_total_results,
    has_missing_credentials,
)
from .schemas import ChartDescriptor, ResearchOutput
from .synthesis import REPORT_SYSTEM, synthesize_report

__all__ = [
    "build_coverage_line",
    "build_fallback_report",
    "build_research_charts",
    "build_research_context",
    "count_total_results",
    "has_missing_credentials",
    "synthesize_report",
    "ChartDescriptor",
    "NO_TICKER_MESSAGE",
    "REPORT_SYSTEM",
    "ResearchOutput",
]
