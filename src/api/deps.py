from __future__ import annotations

from fastapi import Request

from src.core.database import get_db
from src.core.metrics import RequestMetrics
from src.services.health import HealthAggregator


def get_health_aggregator(request: Request) -> HealthAggregator:
    aggregator: HealthAggregator = request.app.state.health_aggregator
    return aggregator


def get_metrics(request: Request) -> RequestMetrics:
    metrics: RequestMetrics = request.app.state.metrics
    return metrics


# Re-export for convenient imports
__all__ = ["get_db", "get_health_aggregator", "get_metrics"]
