"""Decomposition engine — one SVG image element in, native shape elements out.

Each top-level <g> of the SVG becomes one new group; every supported shape
inside it becomes one element placed where it rendered inside the image:

    canvas = image origin + (user-space point - viewBox origin) * (image size / viewBox size)

Usage:
    elements = decompose_svg(svg_text, image)
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable

import numpy as np

from breakapart.engine.config import DEFAULT_CONFIG, DecomposeConfig
from breakapart.engine.diagnostics import StyleDiffSink, check_style, log_style_diff
from breakapart.engine.geometry import (
    get_bbox,
    load_path,
    points_to_user_space,
    sample_path,
    to_user_space,
)
from breakapart.engine.layout import LayoutSession
from breakapart.engine.style import ResolvedStyle, resolve_style
from breakapart.models.elements import (
    BaseElement,
    ImageElement,
    Point,
    new_element,
    new_free_draw_element,
    new_linear_element,
    random_id,
)
from breakapart.models.scene import BinaryFileData
from breakapart.svg.normalize import normalize_svg
from breakapart.svg.parser import (
    InvalidSvgError,
    data_url_to_string,
    local_name,
    parse_svg_document,
    read_viewport,
    top_level_groups,
)
from breakapart.svg.primitives import (
    has_close_command,
    is_diamond_polygon,
    parse_float_attr,
    parse_points_attr,
)

logger = logging.getLogger(__name__)

SHAPE_TAGS = ("rect", "ellipse", "circle", "line", "polygon", "polyline", "path")


@dataclass(frozen=True)
class Placement:
    """Where the SVG's user space lands on the canvas, plus inherited membership."""

    image_x: float
    image_y: float
    vb_x: float
    vb_y: float
    sx: float
    sy: float
    group_ids: tuple[str, ...]
    frame_id: str | None

    def to_canvas(self, x: float, y: float) -> Point:
        return (self.image_x + (x - self.vb_x) * self.sx, self.image_y + (y - self.vb_y) * self.sy)

    def scale(self, dx: float, dy: float) -> Point:
        return (dx * self.sx, dy * self.sy)


@dataclass(frozen=True)
class _NodeContext:
    node: ET.Element
    style: ResolvedStyle
    placement: Placement
    group_id: str
    session: LayoutSession
    config: DecomposeConfig

    def common(self, *, fill: bool = True) -> dict:
        opts = {
            "group_ids": [*self.placement.group_ids, self.group_id],
            "frame_id": self.placement.frame_id,
            "stroke_color": self.style.stroke_color,
            "stroke_width": self.style.stroke_width,
            "stroke_style": self.style.stroke_style,
            "opacity": self.style.opacity,
        }
        if fill:
            opts["background_color"] = self.style.background_color
        return opts


def decompose_image(
    image: ImageElement,
    file_data: BinaryFileData,
    *,
    config: DecomposeConfig = DEFAULT_CONFIG,
    on_style_diff: StyleDiffSink = log_style_diff,
) -> list[BaseElement]:
    """Break one image apart. Failures are logged and yield no elements."""
    try:
        svg_text = normalize_svg(data_url_to_string(file_data.data_url))
        return decompose_svg(svg_text, image, config=config, on_style_diff=on_style_diff)
    except InvalidSvgError as e:
        logger.warning("Skipping image %s: %s", image.id, e)
    except Exception:
        logger.exception("Failed to break apart image %s", image.id)
    return []


def decompose_svg(
    svg_text: str,
    image: ImageElement,
    *,
    config: DecomposeConfig = DEFAULT_CONFIG,
    on_style_diff: StyleDiffSink = log_style_diff,
) -> list[BaseElement]:
    """Produce shape elements for every supported shape under a top-level group."""
    svg = parse_svg_document(svg_text)

    with LayoutSession(svg) as session:
        vp = read_viewport(svg)
        placement = Placement(
            image_x=image.x,
            image_y=image.y,
            vb_x=vp.vb_x,
            vb_y=vp.vb_y,
            sx=image.width / vp.vb_w if vp.vb_w else 1.0,
            sy=image.height / vp.vb_h if vp.vb_h else 1.0,
            group_ids=tuple(image.group_ids),
            frame_id=image.frame_id,
        )

        created: list[BaseElement] = []
        for group in top_level_groups(svg):
            created.extend(_decompose_group(group, placement, session, config, on_style_diff))

    logger.info("Broke image %s into %d elements", image.id, len(created))
    return created


def _decompose_group(
    group: ET.Element,
    placement: Placement,
    session: LayoutSession,
    config: DecomposeConfig,
    on_style_diff: StyleDiffSink,
) -> list[BaseElement]:
    group_id = random_id()
    elements: list[BaseElement] = []
    for node in group.iter():
        tag = local_name(node.tag)
        if tag not in SHAPE_TAGS:
            continue
        try:
            style = resolve_style(node, session, config)
            element = _BUILDERS[tag](_NodeContext(node, style, placement, group_id, session, config))
        except Exception as e:
            logger.warning("Skipping <%s>: %s", tag, e)
            continue
        if element is None:
            continue
        check_style(tag, style, element, on_style_diff)
        elements.append(element)
    return elements


# ── Per-tag builders ──────────────────────────────────────────────────────


def _build_rect(ctx: _NodeContext) -> BaseElement | None:
    box = get_bbox(ctx.node, ctx.session)
    if box is None:
        return None
    x, y, w, h = box
    cx, cy = ctx.placement.to_canvas(x, y)
    width, height = ctx.placement.scale(w, h)
    return new_element(type="rectangle", x=cx, y=cy, width=width, height=height, **ctx.common())


def _build_ellipse(ctx: _NodeContext) -> BaseElement | None:
    box = get_bbox(ctx.node, ctx.session)
    if box is None:
        return None
    x, y, w, h = box
    rx, ry = w / 2, h / 2
    if local_name(ctx.node.tag) == "circle":
        # Non-uniform transforms stretch the box; keep the circle round
        rx = ry = max(w, h) / 2
    cx, cy = x + w / 2, y + h / 2
    left, top = ctx.placement.to_canvas(cx - rx, cy - ry)
    width, height = ctx.placement.scale(rx * 2, ry * 2)
    return new_element(type="ellipse", x=left, y=top, width=width, height=height, **ctx.common())


def _build_line(ctx: _NodeContext) -> BaseElement | None:
    node = ctx.node
    x1, y1 = to_user_space(
        node, parse_float_attr(node, "x1") or 0.0, parse_float_attr(node, "y1") or 0.0, ctx.session
    )
    x2, y2 = to_user_space(
        node, parse_float_attr(node, "x2") or 0.0, parse_float_attr(node, "y2") or 0.0, ctx.session
    )
    x, y = ctx.placement.to_canvas(x1, y1)
    return new_linear_element(
        type="line",
        x=x,
        y=y,
        points=[(0.0, 0.0), ctx.placement.scale(x2 - x1, y2 - y1)],
        **ctx.common(fill=False),
    )


def _build_poly(ctx: _NodeContext) -> BaseElement | None:
    tag = local_name(ctx.node.tag)
    raw = parse_points_attr(ctx.node)
    if not raw:
        logger.debug("Skipping <%s> without points", tag)
        return None

    closed = tag == "polygon"
    if closed and is_diamond_polygon(raw, ctx.config.diamond_tolerance):
        logger.debug("<polygon> %s reads as a diamond", ctx.node.get("id") or "")

    pts = points_to_user_space(ctx.node, np.array(raw, dtype=np.float64), ctx.session)
    canvas = [ctx.placement.to_canvas(float(px), float(py)) for px, py in pts]

    # Each point after the first is a step from the previous one
    local: list[Point] = [(0.0, 0.0)]
    for (px, py), (qx, qy) in zip(canvas, canvas[1:]):
        local.append((qx - px, qy - py))

    if closed and len(canvas) >= 2:
        close_dx = canvas[0][0] - canvas[-1][0]
        close_dy = canvas[0][1] - canvas[-1][1]
        if np.hypot(close_dx, close_dy) > 0:
            local.append((close_dx, close_dy))

    x, y = canvas[0]
    return new_linear_element(
        type="line",
        x=x,
        y=y,
        points=local,
        polygon=closed,
        **ctx.common(fill=closed),
    )


def _build_path(ctx: _NodeContext) -> BaseElement | None:
    path = load_path(ctx.node)
    if path is None:
        logger.debug("Skipping <path> without drawable data")
        return None
    pts = points_to_user_space(ctx.node, sample_path(path, ctx.config), ctx.session)
    box = get_bbox(ctx.node, ctx.session)
    if len(pts) < 2 or box is None:
        return None

    origin_x, origin_y = box[0], box[1]
    local: list[Point] = [
        ctx.placement.scale(float(px) - origin_x, float(py) - origin_y) for px, py in pts
    ]
    if has_close_command(ctx.node.get("d")):
        first, last = local[0], local[-1]
        if np.hypot(first[0] - last[0], first[1] - last[1]) > 0:
            local.append(first)

    x, y = ctx.placement.to_canvas(origin_x, origin_y)
    return new_free_draw_element(
        type="freedraw",
        x=x,
        y=y,
        points=local,
        simulate_pressure=True,
        **ctx.common(),
    )


_BUILDERS: dict[str, Callable[[_NodeContext], BaseElement | None]] = {
    "rect": _build_rect,
    "ellipse": _build_ellipse,
    "circle": _build_ellipse,
    "line": _build_line,
    "polygon": _build_poly,
    "polyline": _build_poly,
    "path": _build_path,
}
