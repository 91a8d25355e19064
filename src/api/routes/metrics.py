from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from src.api.deps import get_metrics
from src.core.metrics import RequestMetrics

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics(request_metrics: RequestMetrics = Depends(get_metrics)) -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=request_metrics.render(), media_type=request_metrics.content_type)
