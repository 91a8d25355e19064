from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.deps import get_health_aggregator
from src.schemas import DependencyStatus
from src.services.health import HealthAggregator

router = APIRouter()


@router.get(
    "/healthz",
    response_model=dict[str, DependencyStatus],
    responses={503: {"description": "At least one dependency is unreachable"}},
)
async def healthz(
    aggregator: HealthAggregator = Depends(get_health_aggregator),
) -> JSONResponse:
    """Probe the database and cache; 200 only when both answer."""
    report = await aggregator.check()
    return JSONResponse(
        content={name: status.value for name, status in report.statuses.items()},
        status_code=report.status_code,
    )
