from __future__ import annotations

import logging

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from src.core.config import Settings

logger = logging.getLogger(__name__)


def init_tracing(app: FastAPI, settings: Settings) -> TracerProvider:
    """Instrument the app with its own console-exporting tracer provider.

    The provider is handed to the instrumentor only; the process-global
    provider is left alone so several apps can be built in one process.
    """
    resource = Resource.create(
        {
            "service.name": settings.app_name,
            "deployment.environment": settings.app_env,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)
    logger.info("OpenTelemetry tracer initialized")
    return provider
