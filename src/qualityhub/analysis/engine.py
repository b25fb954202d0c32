"""Analysis engine: current record + previous entry → AnalysisResult.

Flow:
  HistoryStore.most_relevant_entry(branch)
       → detect_issues
       → compute_risk_score
       → risk_level_for / decide
       → HistoryStore.append_entry (optional)
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import HistoryWriteError
from ..history import HistoryStore
from ..logging_config import get_logger
from ..models import AnalysisResult, CanonicalRecord, HistoryEntry
from .rules import detect_issues
from .scoring import compute_risk_score, decide, risk_level_for

logger = get_logger(__name__)


def analyze(current: CanonicalRecord, previous: Optional[HistoryEntry] = None) -> AnalysisResult:
    """Score ``current`` against ``previous`` without touching any storage."""
    issues = detect_issues(current, previous)
    score = compute_risk_score(current, previous, issues)
    result = AnalysisResult(
        current=current,
        previous=previous,
        issues=issues,
        risk_score=score,
        risk_level=risk_level_for(score),
        decision=decide(score, issues),
    )
    logger.info(
        f"Analysis of {current.project.name}@{current.project.branch}: "
        f"score={result.risk_score} level={result.risk_level.value} "
        f"decision={result.decision.value} issues={len(issues)}"
    )
    return result


class RiskAnalyzer:
    """Runs an analysis against a history store and records the run."""

    def __init__(self, store: HistoryStore):
        self.store = store

    def run(self, current: CanonicalRecord, save: bool = True) -> AnalysisResult:
        previous = self.store.most_relevant_entry(current.project.branch)
        if previous is None:
            logger.info("No history found; analyzing without a baseline")
        result = analyze(current, previous)

        if save:
            try:
                self.store.append_entry(current, result.risk_score)
            except HistoryWriteError as e:
                # The result stands even if it cannot be recorded
                logger.error(f"{e}")
        return result
