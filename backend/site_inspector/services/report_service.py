"""
Report Service - Runs both audit categories and scores them.
"""
from datetime import datetime
from typing import Optional

from site_inspector.config import Settings, settings as default_settings
from site_inspector.logger import logger
from site_inspector.services.audit_runner import AuditRunner
from site_inspector.services.checks.registry import PERFORMANCE, SECURITY
from site_inspector.services.environment import HostEnvironment, SnapshotEnvironment
from site_inspector.services.probe import Prober
from site_inspector.services.scoring.engine import AuditReport, ScoringEngine


class ReportService:
    """Produces a fresh AuditReport per call; nothing is retained."""

    def __init__(
        self,
        env: HostEnvironment,
        settings: Optional[Settings] = None,
        prober: Optional[Prober] = None,
    ):
        self.env = env
        self.runner = AuditRunner(env, settings=settings, prober=prober)
        self.scoring_engine = ScoringEngine()

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, prober: Optional[Prober] = None
    ) -> "ReportService":
        """Build a service for the snapshot configured in settings."""
        settings = settings or default_settings
        env = SnapshotEnvironment.from_file(settings.SITE_SNAPSHOT_PATH)
        return cls(env, settings=settings, prober=prober)

    async def generate(self) -> AuditReport:
        started_at = datetime.utcnow()
        site_url = self.env.site_url()
        logger.info(f"Starting audit for {site_url}")

        results = await self.runner.run_all()

        return self.scoring_engine.build_report(
            site_url, results[PERFORMANCE], results[SECURITY], started_at
        )
