from __future__ import annotations

import os

os.environ["APP_ENV"] = "test"
os.environ["APP_LOG_JSON"] = "false"
os.environ["HEALTH_PROBE_TIMEOUT"] = "0.2"

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.core.metrics import RequestMetrics
from src.main import create_app
from tests.fakes import FakeProbe


@pytest.fixture
def db_probe() -> FakeProbe:
    return FakeProbe("database")


@pytest.fixture
def cache_probe() -> FakeProbe:
    return FakeProbe("redis")


@pytest.fixture
def metrics() -> RequestMetrics:
    return RequestMetrics()


@pytest.fixture
def app(db_probe: FakeProbe, cache_probe: FakeProbe, metrics: RequestMetrics) -> FastAPI:
    return create_app(
        Settings(),
        redis=AsyncMock(),
        probes=[db_probe, cache_probe],
        metrics=metrics,
    )


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
