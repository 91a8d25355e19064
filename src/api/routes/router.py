from __future__ import annotations

from fastapi import APIRouter

from src.api.routes import auth, health, index, metrics, products

api_router = APIRouter()

api_router.include_router(index.router, tags=["Index"])
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, tags=["Auth"])
api_router.include_router(products.router, tags=["Products"])
api_router.include_router(metrics.router, tags=["Metrics"])
