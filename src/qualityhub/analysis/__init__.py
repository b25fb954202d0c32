"""Issue detection, risk scoring and deploy decision."""

from .engine import RiskAnalyzer, analyze
from .rules import RULES, detect_issues
from .scoring import compute_risk_score, decide, risk_level_for

__all__ = [
    "analyze",
    "RiskAnalyzer",
    "RULES",
    "detect_issues",
    "compute_risk_score",
    "risk_level_for",
    "decide",
]
