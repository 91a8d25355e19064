from __future__ import annotations

from .health import DependencyStatus, HealthReport, ProbeResult

__all__ = [
    "DependencyStatus",
    "HealthReport",
    "ProbeResult",
]
