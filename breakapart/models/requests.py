"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from breakapart.models.elements import Element
from breakapart.models.scene import AppState, BinaryFileData


class SceneRequest(BaseModel):
    elements: list[Element] = Field(..., description="Ordered scene elements")
    app_state: AppState = Field(default_factory=AppState, description="Selection state")
    files: dict[str, BinaryFileData] = Field(
        default_factory=dict,
        description="Binary files referenced by image elements, keyed by file id",
    )
