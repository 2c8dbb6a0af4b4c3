"""Style resolver — effective stroke/fill/width/opacity of one SVG shape node."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from breakapart.engine.config import DEFAULT_CONFIG, DecomposeConfig
from breakapart.engine.layout import LayoutSession
from breakapart.models.elements import StrokeStyle
from breakapart.svg.parser import XLINK_NS, local_name
from breakapart.svg.primitives import stroke_style_from_dash
from breakapart.utils.math_helpers import clamp, parse_number_prefix, round_half_up

logger = logging.getLogger(__name__)

TRANSPARENT = "transparent"

_URL_RE = re.compile(r"url\(\s*['\"]?#([^)'\"]+)['\"]?\s*\)", re.IGNORECASE)

# Gradients may borrow their stops from another gradient; cap the chain length.
_MAX_HREF_DEPTH = 8


@dataclass(frozen=True)
class ResolvedStyle:
    stroke_color: str
    background_color: str
    stroke_width: float | None
    opacity: int | None
    stroke_style: StrokeStyle = "solid"


def resolve_style(
    node: ET.Element,
    session: LayoutSession,
    config: DecomposeConfig = DEFAULT_CONFIG,
) -> ResolvedStyle:
    """Resolve the presentation of `node` as it renders inside the session's document."""
    fill = to_color(session.computed(node, "fill"))
    stroke = to_color(session.computed(node, "stroke"))

    if fill and fill.lower().startswith("url("):
        fill = resolve_url_color(fill, session)
    if stroke and stroke.lower().startswith("url("):
        stroke = resolve_url_color(stroke, session)

    stroke_width = parse_stroke_width(session.computed(node, "stroke-width"))
    stroke_style = stroke_style_from_dash(
        session.computed(node, "stroke-dasharray"),
        session.computed(node, "stroke-linecap"),
        stroke_width,
        ratio=config.dotted_dash_ratio,
    )

    return ResolvedStyle(
        stroke_color=stroke or TRANSPARENT,
        background_color=fill or TRANSPARENT,
        stroke_width=stroke_width,
        opacity=parse_opacity(session.computed(node, "opacity")),
        stroke_style=stroke_style,
    )


def to_color(value: str | None) -> str | None:
    """A paint value, or None for empty / `none`."""
    if not value:
        return None
    value = value.strip()
    if not value or value == "none":
        return None
    return value


def resolve_url_color(value: str, session: LayoutSession) -> str | None:
    """Approximate a gradient/pattern paint by its stop nearest the 50% offset."""
    match = _URL_RE.search(value)
    if not match:
        return None
    ref = session.get_element_by_id(match.group(1))
    if ref is None:
        logger.debug("Paint server %r not found", match.group(1))
        return None

    stops = _collect_stops(ref, session)
    if not stops:
        return None

    picked = stops[0]
    best = float("inf")
    for stop in stops:
        raw = stop.get("offset") or "0"
        offset = parse_number_prefix(raw.replace("%", ""))
        if offset is None:
            continue
        fraction = offset / 100 if "%" in raw else offset
        diff = abs(fraction - 0.5)
        # Strict comparison keeps the earliest stop on ties
        if diff < best:
            best = diff
            picked = stop
    return to_color(session.computed(picked, "stop-color"))


def _collect_stops(ref: ET.Element, session: LayoutSession) -> list[ET.Element]:
    seen: set[int] = set()
    current: ET.Element | None = ref
    for _ in range(_MAX_HREF_DEPTH):
        if current is None or id(current) in seen:
            break
        seen.add(id(current))
        stops = [el for el in current.iter() if local_name(el.tag) == "stop"]
        if stops:
            return stops
        href = current.get(f"{{{XLINK_NS}}}href") or current.get("href") or ""
        current = session.get_element_by_id(href[1:]) if href.startswith("#") else None
    return []


def parse_stroke_width(raw: str | None) -> float | None:
    if raw is None:
        return None
    return parse_number_prefix("".join(str(raw).split()).replace("px", ""))


def parse_opacity(raw: str | None) -> int | None:
    """Opacity on a 0–100 scale. Accepts `50%`, fractions (`0.5`) and percentages (`50`)."""
    text = (raw or "").strip()
    if not text:
        return None
    if text.endswith("%"):
        value = parse_number_prefix(text[:-1])
        if value is None:
            return None
        return int(clamp(round_half_up(value), 0, 100))

    value = parse_number_prefix(text)
    if value is None:
        return None
    if value <= 1:
        return int(clamp(round_half_up(value * 100), 0, 100))
    return int(clamp(round_half_up(value), 0, 100))
