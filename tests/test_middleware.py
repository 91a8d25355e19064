from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, Response
from httpx import ASGITransport, AsyncClient

from src.api.deps import get_db
from src.api.middleware import RequestMetricsMiddleware
from src.core.metrics import RequestMetrics
from tests.fakes import FakeProbe


def _instrumented_app(metrics: RequestMetrics) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestMetricsMiddleware, metrics=metrics)

    @app.get("/tagged")
    async def tagged() -> Response:
        return Response(content=b"payload", status_code=201, headers={"X-Custom": "1"})

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("handler failed")

    @app.get("/items/{item_id}")
    async def item(item_id: int) -> dict[str, int]:
        return {"id": item_id}

    return app


def _series(metrics: RequestMetrics) -> list[dict[str, str]]:
    return [
        sample.labels
        for family in metrics.registry.collect()
        if family.name == "http_requests"
        for sample in family.samples
        if sample.name == "http_requests_total"
    ]


@pytest.mark.asyncio
async def test_counts_each_request_once(client: AsyncClient, metrics: RequestMetrics) -> None:
    for expected in (1.0, 2.0, 3.0):
        await client.get("/healthz")
        assert metrics.request_count("/healthz", "GET") == expected


@pytest.mark.asyncio
async def test_counts_degraded_health(
    client: AsyncClient, metrics: RequestMetrics, db_probe: FakeProbe
) -> None:
    db_probe.healthy = False

    response = await client.get("/healthz")

    assert response.status_code == 503
    assert metrics.request_count("/healthz", "GET") == 1.0


@pytest.mark.asyncio
async def test_counts_failed_product_query(
    app: FastAPI, client: AsyncClient, metrics: RequestMetrics
) -> None:
    db = AsyncMock()
    db.execute.side_effect = ConnectionError("db down")
    app.dependency_overrides[get_db] = lambda: db
    try:
        response = await client.get("/products")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert metrics.request_count("/products", "GET") == 1.0


@pytest.mark.asyncio
async def test_labels_by_method(client: AsyncClient, metrics: RequestMetrics) -> None:
    await client.post("/login")
    await client.get("/login")

    assert metrics.request_count("/login", "POST") == 1.0
    assert metrics.request_count("/login", "GET") == 1.0


@pytest.mark.asyncio
async def test_records_latency(client: AsyncClient, metrics: RequestMetrics) -> None:
    await client.get("/")

    count = metrics.registry.get_sample_value(
        "http_request_duration_seconds_count", {"path": "/"}
    )
    assert count == 1.0


@pytest.mark.asyncio
async def test_response_passes_through_unchanged() -> None:
    metrics = RequestMetrics()
    app = _instrumented_app(metrics)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/tagged")

    assert response.status_code == 201
    assert response.content == b"payload"
    assert response.headers["x-custom"] == "1"
    assert metrics.request_count("/tagged", "GET") == 1.0


@pytest.mark.asyncio
async def test_handler_exception_propagates_and_is_counted() -> None:
    metrics = RequestMetrics()
    app = _instrumented_app(metrics)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        with pytest.raises(RuntimeError, match="handler failed"):
            await ac.get("/boom")

    assert metrics.request_count("/boom", "GET") == 1.0


@pytest.mark.asyncio
async def test_unknown_paths_share_one_series(client: AsyncClient, metrics: RequestMetrics) -> None:
    for i in range(50):
        response = await client.get(f"/scan-{i}")
        assert response.status_code == 404

    series = _series(metrics)
    assert series == [{"path": "unmatched", "method": "GET"}]
    assert metrics.request_count("unmatched", "GET") == 50.0


@pytest.mark.asyncio
async def test_labels_use_route_template() -> None:
    metrics = RequestMetrics()
    app = _instrumented_app(metrics)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        for item_id in range(5):
            response = await ac.get(f"/items/{item_id}")
            assert response.status_code == 200

    assert _series(metrics) == [{"path": "/items/{item_id}", "method": "GET"}]
    assert metrics.request_count("/items/{item_id}", "GET") == 5.0
