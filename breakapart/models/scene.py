"""Scene state handed to actions by the host application."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from breakapart.models.elements import BaseElement, Element


class BinaryFileData(BaseModel):
    id: str
    mime_type: str = ""
    data_url: str


class AppState(BaseModel):
    # id -> True for every selected element
    selected_element_ids: dict[str, bool] = Field(default_factory=dict)


class CaptureUpdate(str, enum.Enum):
    """How the host records an action result in its history."""

    EVENTUALLY = "eventually"
    IMMEDIATELY = "immediately"


class ActionResult(BaseModel):
    elements: list[Element]
    app_state: AppState
    capture_update: CaptureUpdate


class Scene:
    """Ordered element collection with selection queries."""

    def __init__(self, elements: list[BaseElement] | None = None) -> None:
        self.elements: list[BaseElement] = list(elements or [])

    def get_selected_elements(self, selected_element_ids: dict[str, bool]) -> list[BaseElement]:
        return [
            el for el in self.elements
            if selected_element_ids.get(el.id) and not el.is_deleted
        ]


@dataclass
class App:
    """Handle to the host: its scene and the binary files referenced by images."""

    scene: Scene
    files: dict[str, BinaryFileData] = field(default_factory=dict)
