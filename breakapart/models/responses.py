"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from breakapart.models.elements import Element
from breakapart.models.scene import CaptureUpdate


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    actions_registered: int = 0


class EnabledResponse(BaseModel):
    enabled: bool


class BreakApartResponse(BaseModel):
    elements: list[Element]
    capture_update: CaptureUpdate
    created: int = 0


class ActionInfo(BaseModel):
    name: str
    label: str
    icon: str = ""
    track_event: dict[str, str] = Field(default_factory=dict)
