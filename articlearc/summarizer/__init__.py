from articlearc.summarizer.extractive import extract
from articlearc.summarizer.service import (
    EmptySummary,
    SummaryProvider,
    SummaryUnavailable,
    build_summary_provider,
    resolve_summary,
)

__all__ = [
    "EmptySummary",
    "SummaryProvider",
    "SummaryUnavailable",
    "build_summary_provider",
    "extract",
    "resolve_summary",
]
