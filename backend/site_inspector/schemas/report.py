"""
Pydantic schemas for audit report responses.
"""

from datetime import datetime
from typing import List, Literal
from pydantic import BaseModel, Field

from site_inspector.services.checks.models import AuditResult
from site_inspector.services.scoring.engine import AuditReport


class CheckResult(BaseModel):
    """Individual check result."""
    title: str
    status: Literal["pass", "warning", "fail"]
    message: str
    explanation: str = ""
    fix: str = ""

    @classmethod
    def from_result(cls, result: AuditResult) -> "CheckResult":
        return cls(
            title=result.title,
            status=result.status.value,
            message=result.message,
            explanation=result.explanation,
            fix=result.fix,
        )


class Scores(BaseModel):
    """Score breakdown."""
    performance: int = Field(..., ge=0, le=100)
    security: int = Field(..., ge=0, le=100)
    overall: int = Field(..., ge=0, le=100)


class ScoreClasses(BaseModel):
    """Presentation class of each score."""
    performance: Literal["good", "medium", "poor"]
    security: Literal["good", "medium", "poor"]
    overall: Literal["good", "medium", "poor"]


class ReportResponse(BaseModel):
    """Complete audit report."""
    site_url: str
    started_at: datetime
    duration_seconds: float = 0

    scores: Scores
    score_classes: ScoreClasses

    performance: List[CheckResult] = []
    security: List[CheckResult] = []

    @classmethod
    def from_report(cls, report: AuditReport) -> "ReportResponse":
        return cls(
            site_url=report.site_url,
            started_at=report.started_at,
            duration_seconds=report.duration_seconds,
            scores=Scores(
                performance=report.scores.performance,
                security=report.scores.security,
                overall=report.scores.overall,
            ),
            score_classes=ScoreClasses(**report.scores.classes()),
            performance=[CheckResult.from_result(r) for r in report.performance],
            security=[CheckResult.from_result(r) for r in report.security],
        )

    class Config:
        json_schema_extra = {
            "example": {
                "site_url": "https://example.com",
                "started_at": "2024-01-01T12:00:00Z",
                "duration_seconds": 1.4,
                "scores": {"performance": 75, "security": 88, "overall": 82},
                "score_classes": {"performance": "medium", "security": "good", "overall": "good"},
                "performance": [
                    {
                        "title": "Active Plugins",
                        "status": "pass",
                        "message": "12 active plugins.",
                        "explanation": "Every active plugin adds code, queries and assets to each request.",
                        "fix": ""
                    }
                ]
            }
        }
