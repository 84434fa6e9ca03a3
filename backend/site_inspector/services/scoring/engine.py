"""
Scoring Engine - Turns audit results into 0-100 scores.

Weights: pass 100, warning 50, fail 0. A category score is the mean weight,
rounded half-up; the overall score is the half-up mean of both categories.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Sequence

from site_inspector.logger import logger
from site_inspector.services.checks.models import AuditResult, Status


STATUS_WEIGHTS: Dict[Status, int] = {
    Status.PASS: 100,
    Status.WARNING: 50,
    Status.FAIL: 0,
}

# Lower bounds of each score class
GOOD_THRESHOLD = 80
MEDIUM_THRESHOLD = 50


def _round_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) for non-negative integers, .5 rounds up."""
    return (2 * numerator + denominator) // (2 * denominator)


def score(results: Sequence[AuditResult]) -> int:
    """Score a list of results; an empty list scores 0."""
    if not results:
        return 0
    total = sum(STATUS_WEIGHTS[r.status] for r in results)
    return _round_half_up(total, len(results))


def overall_score(performance: int, security: int) -> int:
    return _round_half_up(performance + security, 2)


def score_class(value: int) -> str:
    if value >= GOOD_THRESHOLD:
        return "good"
    if value >= MEDIUM_THRESHOLD:
        return "medium"
    return "poor"


@dataclass
class Scores:
    """All scores."""
    performance: int
    security: int
    overall: int

    def classes(self) -> Dict[str, str]:
        return {
            "performance": score_class(self.performance),
            "security": score_class(self.security),
            "overall": score_class(self.overall),
        }


@dataclass
class AuditReport:
    """Complete audit result for one report generation."""
    site_url: str
    scores: Scores
    performance: List[AuditResult] = field(default_factory=list)
    security: List[AuditResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    duration_seconds: float = 0.0


class ScoringEngine:
    """Combines category results into a report."""

    def score(self, performance: Sequence[AuditResult], security: Sequence[AuditResult]) -> Scores:
        perf_score = score(performance)
        sec_score = score(security)
        scores = Scores(
            performance=perf_score,
            security=sec_score,
            overall=overall_score(perf_score, sec_score),
        )
        logger.info(
            f"Scores: performance={scores.performance}, security={scores.security}, "
            f"overall={scores.overall}"
        )
        return scores

    def build_report(
        self,
        site_url: str,
        performance: List[AuditResult],
        security: List[AuditResult],
        started_at: datetime,
    ) -> AuditReport:
        completed_at = datetime.utcnow()
        return AuditReport(
            site_url=site_url,
            scores=self.score(performance, security),
            performance=performance,
            security=security,
            started_at=started_at,
            duration_seconds=round((completed_at - started_at).total_seconds(), 2),
        )
