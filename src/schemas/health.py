from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class DependencyStatus(StrEnum):
    OK = "ok"
    UNREACHABLE = "unreachable"


class ProbeResult(BaseModel):
    name: str
    healthy: bool
    error: str | None = None  # logged only, never returned to clients

    @property
    def status(self) -> DependencyStatus:
        return DependencyStatus.OK if self.healthy else DependencyStatus.UNREACHABLE


class HealthReport(BaseModel):
    statuses: dict[str, DependencyStatus]

    @property
    def healthy(self) -> bool:
        return all(s == DependencyStatus.OK for s in self.statuses.values())

    @property
    def status_code(self) -> int:
        return 200 if self.healthy else 503

    @classmethod
    def from_results(cls, results: list[ProbeResult]) -> HealthReport:
        return cls(statuses={r.name: r.status for r in results})
