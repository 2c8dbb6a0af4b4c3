"""Shared test fixtures."""

from __future__ import annotations

import base64

import pytest

from breakapart.models.elements import ImageElement, ShapeElement
from breakapart.models.scene import App, AppState, BinaryFileData, Scene


# Two top-level groups: a rect, and a circle + line
TWO_GROUP_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">
  <g id="first">
    <rect x="10" y="10" width="30" height="20" fill="red" stroke="blue" stroke-width="2"/>
  </g>
  <g id="second" stroke="black">
    <circle cx="70" cy="70" r="10" fill="green"/>
    <line x1="0" y1="100" x2="100" y2="0"/>
  </g>
</svg>'''

ONE_GROUP_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">
  <g><rect x="0" y="0" width="10" height="10"/></g>
</svg>'''

# Single group, nothing drawable by the break-apart
TEXT_ONLY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">
  <g><text x="10" y="10">hello</text></g>
</svg>'''

STYLED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">
  <style>
    .accent { fill: orange; stroke: purple }
    #special { fill: teal }
    .loud { stroke: lime !important }
  </style>
  <defs>
    <linearGradient id="redblue">
      <stop offset="0%" stop-color="red"/>
      <stop offset="100%" stop-color="blue"/>
    </linearGradient>
    <linearGradient id="three">
      <stop offset="0" stop-color="red"/>
      <stop offset="0.4" style="stop-color: green"/>
      <stop offset="1" stop-color="blue"/>
    </linearGradient>
    <linearGradient id="borrowed" href="#three"/>
    <linearGradient id="empty"/>
  </defs>
  <g fill="red" stroke="blue" stroke-width="3" opacity="0.5" color="#123456">
    <rect id="inherits" width="10" height="10"/>
    <rect id="classed" class="accent" fill="yellow" width="10" height="10"/>
    <rect id="special" class="accent" width="10" height="10"/>
    <rect id="inline" class="accent" style="fill: navy" width="10" height="10"/>
    <rect id="important" class="loud" style="stroke: gray" width="10" height="10"/>
    <rect id="current" fill="currentColor" width="10" height="10"/>
    <rect id="nofill" fill="none" stroke="none" width="10" height="10"/>
    <rect id="tie" fill="url(#redblue)" width="10" height="10"/>
    <rect id="nearest" fill="url(#three)" width="10" height="10"/>
    <rect id="viahref" stroke="url(#borrowed)" width="10" height="10"/>
    <rect id="nostops" fill="url(#empty)" width="10" height="10"/>
    <rect id="missing" fill="url(#nope)" width="10" height="10"/>
    <rect id="own-opacity" opacity="25%" width="10" height="10"/>
    <line id="dots" stroke-dasharray="1 2" stroke-linecap="round" x2="10"/>
    <line id="dashes" stroke-dasharray="8,4" x2="10"/>
  </g>
</svg>'''


def single_shape_svg(shape: str, *, view_box: str = "0 0 100 100", size: int = 100) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="{view_box}">'
        f"<g>{shape}</g></svg>"
    )


def svg_data_url(svg: str) -> str:
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def make_image(
    image_id: str = "img",
    *,
    file_id: str | None = "file-1",
    x: float = 0.0,
    y: float = 0.0,
    width: float = 100.0,
    height: float = 100.0,
    group_ids: list[str] | None = None,
    frame_id: str | None = None,
) -> ImageElement:
    return ImageElement(
        id=image_id,
        file_id=file_id,
        x=x,
        y=y,
        width=width,
        height=height,
        group_ids=group_ids or [],
        frame_id=frame_id,
        status="saved",
    )


def make_file(svg: str, file_id: str = "file-1", mime_type: str = "image/svg+xml") -> BinaryFileData:
    return BinaryFileData(id=file_id, mime_type=mime_type, data_url=svg_data_url(svg))


def make_app(elements, files, selected: list[str]) -> tuple[App, AppState]:
    app = App(scene=Scene(elements), files={f.id: f for f in files})
    return app, AppState(selected_element_ids={eid: True for eid in selected})


@pytest.fixture
def two_group_svg() -> str:
    return TWO_GROUP_SVG


@pytest.fixture
def scene_with_image():
    """[A, img, B] with the two-group SVG behind img, img selected."""
    before = ShapeElement(id="A", type="rectangle")
    after = ShapeElement(id="B", type="ellipse")
    image = make_image("img")
    elements = [before, image, after]
    app, app_state = make_app(elements, [make_file(TWO_GROUP_SVG)], ["img"])
    return elements, app, app_state
