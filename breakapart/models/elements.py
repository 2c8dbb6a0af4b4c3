"""Drawing elements of the host application and their constructors."""

from __future__ import annotations

import secrets
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from breakapart.utils.geometry import size_from_points

StrokeStyle = Literal["solid", "dashed", "dotted"]
FillStyle = Literal["hachure", "cross-hatch", "solid", "zigzag"]

Point = tuple[float, float]

DEFAULT_STROKE_COLOR = "#1e1e1e"
DEFAULT_BACKGROUND_COLOR = "transparent"


def random_id() -> str:
    return secrets.token_urlsafe(15)


class BaseElement(BaseModel):
    id: str = Field(default_factory=random_id)
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    angle: float = 0.0
    stroke_color: str = DEFAULT_STROKE_COLOR
    background_color: str = DEFAULT_BACKGROUND_COLOR
    fill_style: FillStyle = "solid"
    stroke_width: float = 2.0
    stroke_style: StrokeStyle = "solid"
    roughness: int = 1
    opacity: int = 100
    group_ids: list[str] = Field(default_factory=list)
    frame_id: str | None = None
    is_deleted: bool = False
    version: int = 1


class ShapeElement(BaseElement):
    type: Literal["rectangle", "ellipse", "diamond", "text", "frame"]


class LinearElement(BaseElement):
    type: Literal["line", "arrow"] = "line"
    points: list[Point] = Field(default_factory=list)
    # Closed and fillable
    polygon: bool = False


class FreeDrawElement(BaseElement):
    type: Literal["freedraw"] = "freedraw"
    points: list[Point] = Field(default_factory=list)
    pressures: list[float] = Field(default_factory=list)
    simulate_pressure: bool = False


class ImageElement(BaseElement):
    type: Literal["image"] = "image"
    file_id: str | None = None
    status: Literal["pending", "saved", "error"] = "pending"
    scale: tuple[float, float] = (1.0, 1.0)


Element = Annotated[
    Union[ShapeElement, LinearElement, FreeDrawElement, ImageElement],
    Field(discriminator="type"),
]


def is_initialized_image(element: BaseElement) -> bool:
    return isinstance(element, ImageElement) and element.file_id is not None


def _given(opts: dict[str, Any]) -> dict[str, Any]:
    """Drop unset options so element defaults apply."""
    return {k: v for k, v in opts.items() if v is not None}


def new_element(**opts: Any) -> ShapeElement:
    """Create a rectangle/ellipse/diamond with a fresh id."""
    return ShapeElement(**_given(opts))


def new_linear_element(**opts: Any) -> LinearElement:
    """Create a line; width/height follow the extent of its points."""
    opts = _given(opts)
    width, height = size_from_points(opts.get("points", []))
    return LinearElement(**{"width": width, "height": height, **opts})


def new_free_draw_element(**opts: Any) -> FreeDrawElement:
    opts = _given(opts)
    width, height = size_from_points(opts.get("points", []))
    return FreeDrawElement(**{"width": width, "height": height, **opts})
