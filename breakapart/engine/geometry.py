"""Geometry transformer — CTMs, user-space bounding boxes and path sampling.

All queries fail soft: an unreadable transform leaves points where they are,
and unreadable geometry yields None rather than raising.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

import numpy as np
from numpy.typing import NDArray
from svgpathtools import Path, parse_path
from svgpathtools.parser import parse_transform

from breakapart.engine.config import DEFAULT_CONFIG, DecomposeConfig
from breakapart.engine.layout import LayoutSession
from breakapart.svg.parser import local_name
from breakapart.svg.primitives import parse_float_attr, parse_points_attr
from breakapart.utils.geometry import apply_matrix, arc_lengths, bbox, corners
from breakapart.utils.math_helpers import clamp, round_half_up

logger = logging.getLogger(__name__)

Box = tuple[float, float, float, float]  # (x, y, width, height)

# Dense per-segment sampling used to build the arc-length table.
_SAMPLES_PER_SEGMENT = 64


def get_ctm(node: ET.Element, session: LayoutSession) -> NDArray[np.float64] | None:
    """Cumulative transform from `node`'s local space to the root's user space."""
    chain = [node]
    chain.extend(a for a in session.ancestors(node) if a is not session.root)
    if node is session.root:
        chain = []

    ctm = np.identity(3)
    for el in reversed(chain):
        tf = el.get("transform")
        if not tf:
            continue
        try:
            ctm = ctm @ parse_transform(tf)
        except (ValueError, IndexError, TypeError) as e:
            logger.debug("Unreadable transform %r on <%s>: %s", tf, local_name(el.tag), e)
            return None
    return ctm


def to_user_space(node: ET.Element, x: float, y: float, session: LayoutSession) -> tuple[float, float]:
    """Map a local point into root user space. Returns the input point if no CTM is available."""
    try:
        ctm = get_ctm(node, session)
    except RuntimeError:
        return (x, y)
    if ctm is None:
        return (x, y)
    px, py, _ = ctm @ np.array([x, y, 1.0])
    return (float(px), float(py))


def points_to_user_space(
    node: ET.Element,
    points: NDArray[np.float64],
    session: LayoutSession,
) -> NDArray[np.float64]:
    """Vectorized `to_user_space` for an Nx2 array."""
    try:
        ctm = get_ctm(node, session)
    except RuntimeError:
        return points
    if ctm is None:
        return points
    return apply_matrix(ctm, points)


def local_bbox(node: ET.Element) -> Box | None:
    """Bounding box of a shape node in its own coordinate space."""
    tag = local_name(node.tag)

    if tag == "rect":
        return (
            parse_float_attr(node, "x") or 0.0,
            parse_float_attr(node, "y") or 0.0,
            parse_float_attr(node, "width") or 0.0,
            parse_float_attr(node, "height") or 0.0,
        )
    if tag in ("ellipse", "circle"):
        cx = parse_float_attr(node, "cx") or 0.0
        cy = parse_float_attr(node, "cy") or 0.0
        if tag == "circle":
            rx = ry = parse_float_attr(node, "r") or 0.0
        else:
            rx = parse_float_attr(node, "rx") or 0.0
            ry = parse_float_attr(node, "ry") or 0.0
        return (cx - rx, cy - ry, 2 * rx, 2 * ry)
    if tag == "line":
        pts = np.array(
            [
                [parse_float_attr(node, "x1") or 0.0, parse_float_attr(node, "y1") or 0.0],
                [parse_float_attr(node, "x2") or 0.0, parse_float_attr(node, "y2") or 0.0],
            ]
        )
        xmin, ymin, xmax, ymax = bbox(pts)
        return (xmin, ymin, xmax - xmin, ymax - ymin)
    if tag in ("polygon", "polyline"):
        raw = parse_points_attr(node)
        if not raw:
            return None
        xmin, ymin, xmax, ymax = bbox(np.array(raw))
        return (xmin, ymin, xmax - xmin, ymax - ymin)
    if tag == "path":
        path = load_path(node)
        if path is None:
            return None
        xmin, xmax, ymin, ymax = path.bbox()
        return (float(xmin), float(ymin), float(xmax - xmin), float(ymax - ymin))
    return None


def get_bbox(node: ET.Element, session: LayoutSession) -> Box | None:
    """Axis-aligned bounding box of `node` in root user space."""
    box = local_bbox(node)
    if box is None:
        return None
    mapped = points_to_user_space(node, corners(*box), session)
    xmin, ymin, xmax, ymax = bbox(mapped)
    return (xmin, ymin, xmax - xmin, ymax - ymin)


def load_path(node: ET.Element) -> Path | None:
    """Parse a <path> node's `d`. None for empty or unparseable data."""
    d = (node.get("d") or "").strip()
    if not d:
        return None
    try:
        path = parse_path(d)
    except Exception as e:
        logger.warning("Failed to parse path: %s", e)
        return None
    return path if len(path) else None


def sample_path(path: Path, config: DecomposeConfig = DEFAULT_CONFIG) -> NDArray[np.float64]:
    """Points at evenly spaced arc lengths along the outline, start and end included.

    The sample count follows the outline length and is clamped to the
    configured bounds; pen-up jumps between subpaths add no length. An outline
    with non-finite coordinates yields no points.
    """
    ts = np.linspace(0.0, 1.0, _SAMPLES_PER_SEGMENT)
    dense: list[NDArray[np.float64]] = []
    lengths: list[NDArray[np.float64]] = []
    offset = 0.0
    for seg in path:
        pts = np.array([[p.real, p.imag] for p in (seg.point(t) for t in ts)])
        cum = offset + arc_lengths(pts)
        dense.append(pts)
        lengths.append(cum)
        offset = float(cum[-1])

    if not dense:
        return np.empty((0, 2))
    points = np.vstack(dense)
    cum_lengths = np.concatenate(lengths)
    total = offset
    if not np.isfinite(total) or not np.all(np.isfinite(points)):
        logger.warning("Path outline is not finite, skipping")
        return np.empty((0, 2))

    count = int(
        clamp(
            round_half_up(total / config.path_sample_spacing),
            config.path_min_samples,
            config.path_max_samples,
        )
    )
    targets = np.linspace(0.0, total, count + 1)
    xs = np.interp(targets, cum_lengths, points[:, 0])
    ys = np.interp(targets, cum_lengths, points[:, 1])
    return np.column_stack([xs, ys])
