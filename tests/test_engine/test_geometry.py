"""Tests for CTM resolution, bounding boxes and path sampling."""

import xml.etree.ElementTree as ET

import numpy as np
import pytest
from svgpathtools import parse_path

from breakapart.engine.config import DecomposeConfig
from breakapart.engine.geometry import (
    get_bbox,
    get_ctm,
    load_path,
    local_bbox,
    sample_path,
    to_user_space,
)
from breakapart.engine.layout import LayoutSession
from breakapart.svg.parser import parse_svg_document


def _session_for(body: str):
    return LayoutSession(parse_svg_document(f'<svg width="100" height="100">{body}</svg>'))


def test_identity_without_transforms():
    with _session_for('<g><rect id="r"/></g>') as session:
        node = session.get_element_by_id("r")
        assert to_user_space(node, 3, 4, session) == (3, 4)


def test_own_transform():
    with _session_for('<g><line id="l" transform="translate(10, 20)"/></g>') as session:
        assert to_user_space(session.get_element_by_id("l"), 1, 1, session) == pytest.approx((11, 21))


def test_ancestor_transforms_compose_outer_first():
    with _session_for('<g transform="scale(2)"><g><line id="l" transform="translate(5 0)"/></g></g>') as session:
        assert to_user_space(session.get_element_by_id("l"), 1, 1, session) == pytest.approx((12, 2))


def test_root_transform_is_ignored():
    svg = parse_svg_document('<svg transform="scale(3)"><g><line id="l"/></g></svg>')
    with LayoutSession(svg) as session:
        assert to_user_space(session.get_element_by_id("l"), 1, 1, session) == (1, 1)
        np.testing.assert_allclose(get_ctm(svg, session), np.identity(3))


def test_unreadable_transform_leaves_point():
    with _session_for('<g><line id="l" transform="translate(abc)"/></g>') as session:
        assert to_user_space(session.get_element_by_id("l"), 7, 8, session) == (7, 8)


def test_closed_session_leaves_point():
    session = _session_for('<g><line id="l" transform="translate(10 0)"/></g>')
    with session:
        node = session.get_element_by_id("l")
    assert to_user_space(node, 7, 8, session) == (7, 8)


def test_rect_bbox():
    with _session_for('<g><rect id="r" x="1" y="2" width="3px" height="4"/></g>') as session:
        assert get_bbox(session.get_element_by_id("r"), session) == pytest.approx((1, 2, 3, 4))


def test_rotated_rect_bbox():
    with _session_for('<g><rect id="r" width="10" height="20" transform="rotate(90)"/></g>') as session:
        assert get_bbox(session.get_element_by_id("r"), session) == pytest.approx((-20, 0, 20, 10), abs=1e-9)


def test_local_bbox_shapes():
    svg = parse_svg_document(
        "<svg>"
        '<ellipse id="e" cx="10" cy="10" rx="4" ry="2"/>'
        '<circle id="c" cx="5" cy="5" r="5"/>'
        '<polyline id="p" points="0,0 10,5 -2,8"/>'
        '<path id="d" d="M0 0 L10 0 L10 4"/>'
        '<text id="t"/>'
        "</svg>"
    )
    by_id = {el.get("id"): el for el in svg.iter()}
    assert local_bbox(by_id["e"]) == (6, 8, 8, 4)
    assert local_bbox(by_id["c"]) == (0, 0, 10, 10)
    assert local_bbox(by_id["p"]) == (-2, 0, 12, 8)
    assert local_bbox(by_id["d"]) == pytest.approx((0, 0, 10, 4))
    assert local_bbox(by_id["t"]) is None


def test_sample_count_follows_length():
    pts = sample_path(parse_path("M0 0 L400 0"))
    assert len(pts) == 101
    np.testing.assert_allclose(np.diff(pts[:, 0]), 4.0)
    assert tuple(pts[0]) == (0, 0)
    assert tuple(pts[-1]) == pytest.approx((400, 0))


def test_sample_count_bounds():
    assert len(sample_path(parse_path("M0 0 L10 0"))) == 33
    assert len(sample_path(parse_path("M0 0 L10000 0"))) == 513


def test_sample_count_configurable():
    config = DecomposeConfig(path_sample_spacing=1.0, path_min_samples=4, path_max_samples=8)
    assert len(sample_path(parse_path("M0 0 L6 0"), config)) == 7


def test_pen_up_moves_add_no_length():
    pts = sample_path(parse_path("M0 0 L100 0 M0 50 L100 50"))
    assert len(pts) == 51
    assert set(np.round(pts[:, 1], 9)) <= {0.0, 50.0}


def test_non_finite_outline_yields_no_samples():
    assert len(sample_path(parse_path("M0 0 H 1e999"))) == 0


def test_zero_length_arc_is_unreadable():
    assert load_path(ET.Element("path", {"d": "M0 0 A 10 10 0 0 1 0 0"})) is None
