from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from src.api.middleware import RequestMetricsMiddleware
from src.core.config import Settings, settings
from src.core.database import create_engine, create_session_factory
from src.core.logging import emit_event, setup_logging
from src.core.metrics import RequestMetrics
from src.core.redis import create_redis
from src.services.health import HealthAggregator, ensure_dependencies
from src.services.probes import CacheProbe, DatabaseProbe, DependencyProbe

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app_settings: Settings = app.state.settings
    setup_logging(
        level=app_settings.app_log_level,
        json_output=app_settings.app_log_json,
        environment=app_settings.app_env,
    )

    try:
        # Startup: refuse to serve without both dependencies
        await ensure_dependencies(app.state.health_aggregator)
        emit_event(logger, "startup", "Connected to PostgreSQL and Redis")
        yield
    finally:
        # Shutdown
        try:
            await app.state.redis.aclose()
        finally:
            await app.state.engine.dispose()


def create_app(
    app_settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
    redis: aioredis.Redis | None = None,
    probes: Sequence[DependencyProbe] | None = None,
    metrics: RequestMetrics | None = None,
) -> FastAPI:
    """Build the application and wire its dependencies.

    Client handles are created here unless supplied, and are closed when the
    application shuts down. State is attached immediately rather than in the
    lifespan so the app can be driven in tests without starting it.
    """
    app_settings = app_settings or settings
    engine = engine or create_engine(app_settings)
    redis = redis or create_redis(app_settings)
    metrics = metrics or RequestMetrics()
    if probes is None:
        probes = [DatabaseProbe(engine), CacheProbe(redis)]

    app = FastAPI(
        title=app_settings.app_name,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.redis = redis
    app.state.metrics = metrics
    app.state.health_aggregator = HealthAggregator(
        probes,
        timeout=app_settings.health_probe_timeout,
        concurrent=app_settings.health_probes_concurrent,
    )

    app.add_middleware(RequestMetricsMiddleware, metrics=metrics)

    # Register routes
    from src.api.routes.router import api_router

    app.include_router(api_router)

    if app_settings.otel_tracing_enabled:
        from src.core.tracing import init_tracing

        init_tracing(app, app_settings)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    setup_logging(
        level=settings.app_log_level,
        json_output=settings.app_log_json,
        environment=settings.app_env,
    )
    emit_event(
        logger,
        "startup",
        f"Service starting on {settings.app_host}:{settings.app_port}",
    )
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, log_config=None)


if __name__ == "__main__":
    main()
