"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from breakapart.api import break_apart, health

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(break_apart.router)
