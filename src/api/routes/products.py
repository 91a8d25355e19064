from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.core.logging import emit_event
from src.models.product import Product

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/products",
    response_model=list[str],
    responses={500: {"description": "Database error", "content": {"text/plain": {}}}},
)
async def list_products(db: AsyncSession = Depends(get_db)) -> Any:
    """List product names."""
    try:
        result = await db.execute(select(Product.name))
        names = list(result.scalars().all())
    except Exception as e:
        emit_event(
            logger,
            "db",
            "Product query failed",
            level=logging.ERROR,
            error=repr(e),
        )
        return PlainTextResponse("DB error", status_code=500)
    return names
