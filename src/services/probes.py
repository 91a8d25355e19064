"""Dependency probes used by the health check.

A probe performs one lightweight round-trip against an external system.
``attempt()`` raises on failure; ``run_probe`` turns that into a
``ProbeResult`` so a failing dependency is reported as data.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import redis.asyncio as aioredis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from src.schemas import ProbeResult

DEFAULT_PROBE_TIMEOUT = 2.0


class DependencyProbe(Protocol):
    name: str

    async def attempt(self) -> None: ...


class DatabaseProbe:
    """Runs ``SELECT 1`` on a pooled connection."""

    def __init__(self, engine: AsyncEngine, name: str = "database") -> None:
        self.name = name
        self._engine = engine

    async def attempt(self) -> None:
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))


class CacheProbe:
    """Sends ``PING`` to Redis."""

    def __init__(self, redis: aioredis.Redis, name: str = "redis") -> None:
        self.name = name
        self._redis = redis

    async def attempt(self) -> None:
        await self._redis.ping()


async def run_probe(
    probe: DependencyProbe, timeout: float = DEFAULT_PROBE_TIMEOUT
) -> ProbeResult:
    try:
        await asyncio.wait_for(probe.attempt(), timeout=timeout)
    except TimeoutError:
        return ProbeResult(
            name=probe.name,
            healthy=False,
            error=f"timed out after {timeout:g}s",
        )
    except Exception as exc:
        return ProbeResult(name=probe.name, healthy=False, error=repr(exc))
    return ProbeResult(name=probe.name, healthy=True)
