"""
Audit Runner - Executes a category of checks and isolates their faults.

A check that raises never aborts the category: its slot in the result list
becomes a WARNING and the remaining checks still run.
"""
import asyncio
from typing import Dict, List, Optional, Sequence

from site_inspector.config import Settings, settings as default_settings
from site_inspector.logger import logger
from site_inspector.services.checks.models import (
    AuditContext,
    AuditResult,
    CheckSpec,
    Status,
    make_result,
)
from site_inspector.services.checks.registry import CATEGORIES, CHECKS
from site_inspector.services.environment import HostEnvironment
from site_inspector.services.probe import Prober


class AuditRunner:
    """Runs registered checks for a category in declared order."""

    def __init__(
        self,
        env: HostEnvironment,
        settings: Optional[Settings] = None,
        prober: Optional[Prober] = None,
        checks: Optional[Dict[str, Sequence[CheckSpec]]] = None,
    ):
        self.settings = settings or default_settings
        self.context = AuditContext(
            env=env,
            prober=prober or Prober(self.settings),
            settings=self.settings,
        )
        self.checks = checks if checks is not None else CHECKS

    async def run(self, category: str) -> List[AuditResult]:
        """Run every check of a category.

        Args:
            category: 'performance' or 'security'

        Returns:
            One AuditResult per registered check, in registration order
        """
        if category not in self.checks:
            raise ValueError(f"Unknown audit category: {category}")

        specs = self.checks[category]
        logger.info(f"Running {len(specs)} {category} checks")

        if self.settings.PROBE_CONCURRENCY:
            # gather preserves argument order regardless of completion order
            results = list(await asyncio.gather(*(self._run_check(spec) for spec in specs)))
        else:
            results = [await self._run_check(spec) for spec in specs]

        summary = ", ".join(f"{r.title}={r.status.value}" for r in results)
        logger.info(f"Completed {category} checks: {summary}")
        return results

    async def run_all(self) -> Dict[str, List[AuditResult]]:
        """Run both categories."""
        return {category: await self.run(category) for category in CATEGORIES}

    async def _run_check(self, spec: CheckSpec) -> AuditResult:
        try:
            return await spec.func(self.context)
        except Exception as e:
            logger.exception(f"Check '{spec.title}' failed: {e}")
            return make_result(
                spec.title,
                Status.WARNING,
                f"Could not complete this check: {e}",
                fix="Re-run the audit; if the problem persists, check the server logs.",
            )
