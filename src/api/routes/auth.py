from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from src.core.logging import emit_event

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_class=PlainTextResponse)
async def login() -> str:
    """Login stub; no credentials are checked."""
    emit_event(logger, "login", "Login endpoint hit")
    return "Logged in"
