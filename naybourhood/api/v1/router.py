"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from naybourhood.api.v1 import health, imports, score, webhooks
from naybourhood.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(score.router)
api_router.include_router(webhooks.router)
api_router.include_router(imports.router)


def get_api_router() -> APIRouter:
    return api_router
