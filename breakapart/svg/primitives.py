"""Attribute readers and shape classifiers shared by the decomposition engine."""

from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET

import numpy as np

from breakapart.models.elements import StrokeStyle
from breakapart.utils.math_helpers import NUMBER_RE, parse_number_prefix, parse_numbers

# A coordinate entry: a numeric literal, or any other run up to the next separator
_POINT_TOKEN_RE = re.compile(rf"{NUMBER_RE.pattern}|[^\s,]+")


def parse_float_attr(node: ET.Element, name: str) -> float | None:
    """Numeric value of an attribute, ignoring whitespace and `px`. None if absent."""
    raw = node.get(name)
    if not raw:
        return None
    return parse_number_prefix("".join(raw.split()).replace("px", ""))


def _coordinate(token: str) -> float | None:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_points_attr(node: ET.Element) -> list[tuple[float, float]]:
    """Coordinate pairs of a `points` attribute.

    Entries are paired first; a pair with an unreadable or non-finite member is
    dropped whole, and a dangling odd coordinate is ignored.
    """
    coords = [_coordinate(tok) for tok in _POINT_TOKEN_RE.findall(node.get("points") or "")]
    pairs = []
    for x, y in zip(coords[0::2], coords[1::2]):
        if x is None or y is None:
            continue
        pairs.append((x, y))
    return pairs


def stroke_style_from_dash(
    dasharray: str | None,
    linecap: str | None,
    stroke_width: float | None,
    ratio: float,
) -> StrokeStyle:
    """Map an SVG dash pattern onto solid/dashed/dotted.

    Round-capped dashes averaging at most `ratio` times the stroke width read as dots.
    """
    raw = (dasharray or "").strip()
    if not raw or raw == "none":
        return "solid"
    nums = parse_numbers(raw)
    if not nums:
        return "dashed"
    mean = sum(nums) / len(nums)
    if (linecap or "").strip() == "round" and stroke_width and mean <= stroke_width * ratio:
        return "dotted"
    return "dashed"


def is_diamond_polygon(
    points: list[tuple[float, float]],
    tolerance: float,
) -> bool:
    """Detect a 4-point polygon whose vertices sit on the mid-edges of its bbox.

    Each vertex may stray by `tolerance` times the bbox extent on each axis.
    """
    if len(points) != 4:
        return False
    pts = np.array(points, dtype=np.float64)
    if not np.all(np.isfinite(pts)):
        return False

    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    cx = (min_x + max_x) / 2
    cy = (min_y + max_y) / 2
    tol_x = (max_x - min_x) * tolerance
    tol_y = (max_y - min_y) * tolerance

    expected = [(cx, min_y), (max_x, cy), (cx, max_y), (min_x, cy)]
    matched = 0
    for ex, ey in expected:
        near = (np.abs(pts[:, 0] - ex) <= tol_x) & (np.abs(pts[:, 1] - ey) <= tol_y)
        if near.any():
            matched += 1
    return matched == 4


def has_close_command(d: str | None) -> bool:
    return bool(d) and ("z" in d or "Z" in d)
