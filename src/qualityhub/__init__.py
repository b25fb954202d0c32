"""
QualityHub - quality report normalization and deploy risk scoring.

Parses unit-test and coverage reports from different tools into one canonical
record, compares it with the previous run on the same branch, and turns the
comparison into a 0-100 risk score and a PROCEED / CAUTION / BLOCK decision.
"""

__version__ = "1.0.0"

from .analysis import RiskAnalyzer, analyze
from .history import HistoryStore
from .models import (
    AnalysisResult,
    CanonicalRecord,
    Decision,
    HistoryEntry,
    Issue,
    RiskLevel,
    Severity,
)
from .parsers import ReportFormat, get_parser

__all__ = [
    "analyze",
    "RiskAnalyzer",
    "HistoryStore",
    "get_parser",
    "ReportFormat",
    "CanonicalRecord",
    "HistoryEntry",
    "Issue",
    "AnalysisResult",
    "Severity",
    "RiskLevel",
    "Decision",
]
