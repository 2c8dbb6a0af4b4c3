"""Tests for the break-apart action: predicate, splice and batch behaviour."""

import pytest

from tests.conftest import (
    ONE_GROUP_SVG,
    TEXT_ONLY_SVG,
    TWO_GROUP_SVG,
    make_app,
    make_file,
    make_image,
    svg_data_url,
)

from breakapart.actions.break_apart_svg import (
    action_break_apart_svg,
    enable_break_apart_svg,
    is_svg_file,
    perform,
    splice_elements,
)
from breakapart.actions.registry import ActionRegistry, ActionSpec, get_registry
from breakapart.models.elements import ShapeElement
from breakapart.models.scene import BinaryFileData, CaptureUpdate


def _silent(tag, diffs):
    pass


def _enabled(elements, files, selected):
    app, app_state = make_app(elements, files, selected)
    return enable_break_apart_svg(app_state, app)


# ── Predicate ──────────────────────────────────────────────────────────────


def test_enabled_for_multi_group_svg():
    assert _enabled([make_image()], [make_file(TWO_GROUP_SVG)], ["img"])


def test_disabled_for_single_group_svg():
    assert not _enabled([make_image()], [make_file(ONE_GROUP_SVG)], ["img"])


def test_disabled_for_two_selected_images():
    images = [make_image("a", file_id="f1"), make_image("b", file_id="f2")]
    files = [make_file(TWO_GROUP_SVG, "f1"), make_file(TWO_GROUP_SVG, "f2")]
    assert not _enabled(images, files, ["a", "b"])


def test_disabled_without_selection():
    assert not _enabled([make_image()], [make_file(TWO_GROUP_SVG)], [])


def test_disabled_for_non_image():
    assert not _enabled([ShapeElement(id="r", type="rectangle")], [], ["r"])


def test_disabled_for_uninitialized_image():
    assert not _enabled([make_image(file_id=None)], [make_file(TWO_GROUP_SVG)], ["img"])


def test_disabled_without_file():
    assert not _enabled([make_image()], [], ["img"])


def test_disabled_for_raster_file():
    png = BinaryFileData(id="file-1", mime_type="image/png", data_url="data:image/png;base64,AAAA")
    assert not _enabled([make_image()], [png], ["img"])


def test_enabled_by_sniffing_data_url():
    file_data = make_file(TWO_GROUP_SVG, mime_type="")
    assert _enabled([make_image()], [file_data], ["img"])


def test_disabled_for_broken_svg():
    broken = BinaryFileData(id="file-1", mime_type="image/svg+xml", data_url=svg_data_url("<svg><g>"))
    assert not _enabled([make_image()], [broken], ["img"])


def test_is_svg_file():
    assert is_svg_file(BinaryFileData(id="f", mime_type="image/svg+xml", data_url=""))
    assert is_svg_file(BinaryFileData(id="f", mime_type="", data_url="data:image/svg+xml,<svg/>"))
    assert not is_svg_file(BinaryFileData(id="f", mime_type="image/png", data_url="data:image/png,"))


# ── Splice ─────────────────────────────────────────────────────────────────


def _shape(eid):
    return ShapeElement(id=eid, type="rectangle")


def test_splice_in_place():
    a, img, b, s1, s2 = (_shape(i) for i in ("A", "img", "B", "S1", "S2"))
    assert [e.id for e in splice_elements([a, img, b], "img", [s1, s2])] == ["A", "S1", "S2", "B"]


def test_splice_missing_target_appends():
    a, b, s1 = (_shape(i) for i in ("A", "B", "S1"))
    assert [e.id for e in splice_elements([a, b], "img", [s1])] == ["A", "B", "S1"]


# ── Perform ────────────────────────────────────────────────────────────────


def test_perform_replaces_image_in_place(scene_with_image):
    elements, app, app_state = scene_with_image
    result = perform(elements, app_state, None, app, on_style_diff=_silent)
    assert result.capture_update == CaptureUpdate.IMMEDIATELY
    ids = [e.id for e in result.elements]
    assert ids[0] == "A" and ids[-1] == "B"
    assert "img" not in ids
    assert [e.type for e in result.elements[1:-1]] == ["rectangle", "ellipse", "line"]


def test_perform_does_not_mutate_input(scene_with_image):
    elements, app, app_state = scene_with_image
    before = list(elements)
    perform(elements, app_state, None, app, on_style_diff=_silent)
    assert elements == before


def test_perform_noop_without_supported_shapes():
    elements = [make_image()]
    app, app_state = make_app(elements, [make_file(TEXT_ONLY_SVG)], ["img"])
    result = perform(elements, app_state, None, app)
    assert result.capture_update == CaptureUpdate.EVENTUALLY
    assert result.elements == elements


def test_perform_noop_without_images():
    elements = [_shape("A")]
    app, app_state = make_app(elements, [], ["A"])
    result = perform(elements, app_state, None, app)
    assert result.capture_update == CaptureUpdate.EVENTUALLY
    assert [e.id for e in result.elements] == ["A"]


def test_perform_batch_partial_failure():
    good = make_image("good", file_id="f-good")
    bad = make_image("bad", file_id="f-bad")
    raster = make_image("raster", file_id="f-png")
    files = [
        make_file(TWO_GROUP_SVG, "f-good"),
        BinaryFileData(id="f-bad", mime_type="image/svg+xml", data_url=svg_data_url("<svg")),
        BinaryFileData(id="f-png", mime_type="image/png", data_url="data:image/png;base64,AAAA"),
    ]
    elements = [bad, good, raster]
    app, app_state = make_app(elements, files, ["good", "bad", "raster"])
    result = perform(elements, app_state, None, app, on_style_diff=_silent)
    ids = [e.id for e in result.elements]
    assert result.capture_update == CaptureUpdate.IMMEDIATELY
    assert ids[0] == "bad" and ids[-1] == "raster"
    assert "good" not in ids
    assert len(ids) == 5


# ── Registration ───────────────────────────────────────────────────────────


def test_action_registered():
    spec = get_registry().get("breakApartSvg")
    assert spec is action_break_apart_svg
    assert spec.label == "buttons.breakApartSvg"
    assert spec.track_event == {"category": "element", "action": "break_apart_svg"}


def test_duplicate_action_rejected():
    reg = ActionRegistry()
    spec = ActionSpec(name="x", label="x", perform=perform)
    reg.register(spec)
    with pytest.raises(ValueError):
        reg.register(spec)


def test_panel_descriptor(scene_with_image):
    elements, app, app_state = scene_with_image
    panel = action_break_apart_svg.panel(elements, app_state, app)
    assert not panel.hidden
    assert panel.visible
    assert panel.title == "Break Apart SVG"
    assert panel.icon == "magic"


def test_panel_hidden_without_selection(scene_with_image):
    elements, app, _ = scene_with_image
    _, empty_state = make_app(elements, [], [])
    panel = action_break_apart_svg.panel(elements, empty_state, app)
    assert panel.hidden
    assert not panel.visible
