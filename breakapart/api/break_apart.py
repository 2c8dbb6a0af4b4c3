"""Break-apart endpoints — predicate and execution over a posted scene."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from breakapart.actions.break_apart_svg import enable_break_apart_svg, perform
from breakapart.models.requests import SceneRequest
from breakapart.models.responses import BreakApartResponse, EnabledResponse
from breakapart.models.scene import App, Scene

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/break-apart")


def _app_for(request: SceneRequest) -> App:
    return App(scene=Scene(request.elements), files=request.files)


@router.post("/enabled", response_model=EnabledResponse)
async def enabled(request: SceneRequest) -> EnabledResponse:
    return EnabledResponse(enabled=enable_break_apart_svg(request.app_state, _app_for(request)))


@router.post("", response_model=BreakApartResponse)
async def break_apart(request: SceneRequest) -> BreakApartResponse:
    result = perform(request.elements, request.app_state, None, _app_for(request))
    before = {el.id for el in request.elements}
    created = sum(1 for el in result.elements if el.id not in before)
    logger.info("Break apart: %d elements created (%s)", created, result.capture_update.value)
    return BreakApartResponse(
        elements=result.elements,
        capture_update=result.capture_update,
        created=created,
    )
