"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from breakapart import __version__
from breakapart.actions.registry import get_registry
from breakapart.models.responses import ActionInfo, HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        actions_registered=get_registry().count,
    )


@router.get("/actions", response_model=list[ActionInfo])
async def actions() -> list[ActionInfo]:
    return [
        ActionInfo(name=spec.name, label=spec.label, icon=spec.icon, track_event=spec.track_event)
        for spec in get_registry().all()
    ]
