from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from src.core.logging import emit_event
from src.schemas import DependencyStatus, HealthReport, ProbeResult
from src.services.probes import DEFAULT_PROBE_TIMEOUT, DependencyProbe, run_probe

logger = logging.getLogger(__name__)


class HealthAggregator:
    """Runs every registered probe once and merges the outcomes.

    The report is healthy only if every probe succeeded; there is no partial
    degradation. Probe error text goes to the log, never into the report.
    """

    def __init__(
        self,
        probes: Sequence[DependencyProbe],
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        concurrent: bool = True,
    ) -> None:
        names = [p.name for p in probes]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate probe names: {', '.join(duplicates)}")
        if timeout <= 0:
            raise ValueError("Probe timeout must be positive")

        self.probes = list(probes)
        self.timeout = timeout
        self.concurrent = concurrent

    async def _run_all(self) -> list[ProbeResult]:
        if self.concurrent:
            return list(
                await asyncio.gather(*(run_probe(p, self.timeout) for p in self.probes))
            )
        return [await run_probe(p, self.timeout) for p in self.probes]

    async def check(self) -> HealthReport:
        results = await self._run_all()

        for result in results:
            if not result.healthy:
                emit_event(
                    logger,
                    "health_probe_failed",
                    f"Dependency {result.name} unreachable",
                    level=logging.WARNING,
                    dependency=result.name,
                    error=result.error,
                )

        report = HealthReport.from_results(results)
        emit_event(
            logger,
            "healthz",
            "Health check",
            status={name: str(s) for name, s in report.statuses.items()},
            code=report.status_code,
        )
        return report


class DependencyStartupError(RuntimeError):
    """Raised when a dependency cannot be reached while the service boots."""


async def ensure_dependencies(aggregator: HealthAggregator) -> None:
    """Fail startup unless every probe succeeds on its first attempt."""
    report = await aggregator.check()
    if not report.healthy:
        failed = sorted(name for name, s in report.statuses.items() if s != DependencyStatus.OK)
        emit_event(
            logger,
            "startup",
            "Dependencies unreachable at startup",
            level=logging.CRITICAL,
            failed=failed,
        )
        raise DependencyStartupError(f"Unreachable at startup: {', '.join(failed)}")
