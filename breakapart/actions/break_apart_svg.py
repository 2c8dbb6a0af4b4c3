"""Break apart SVG — replaces a selected SVG image with its shapes as native elements."""

from __future__ import annotations

import logging
from typing import Any

from breakapart.actions.registry import ActionSpec, PanelDescriptor, register
from breakapart.config import settings
from breakapart.engine.config import DEFAULT_CONFIG, DecomposeConfig
from breakapart.engine.decompose import decompose_image
from breakapart.engine.diagnostics import StyleDiffSink, log_style_diff
from breakapart.models.elements import BaseElement, ImageElement, is_initialized_image
from breakapart.models.scene import ActionResult, App, AppState, BinaryFileData, CaptureUpdate
from breakapart.svg.normalize import normalize_svg
from breakapart.svg.parser import (
    SVG_MIME_TYPE,
    InvalidSvgError,
    count_top_level_groups,
    data_url_to_string,
    is_svg_data_url,
)

logger = logging.getLogger(__name__)

ICON = "magic"


def is_svg_file(file_data: BinaryFileData) -> bool:
    """SVG by declared MIME type, or by the data URL header when the type is missing or wrong."""
    return file_data.mime_type == SVG_MIME_TYPE or is_svg_data_url(file_data.data_url)


def enable_break_apart_svg(app_state: AppState, app: App) -> bool:
    """True iff exactly one initialized SVG image with more than one top-level group is selected."""
    selected = app.scene.get_selected_elements(app_state.selected_element_ids)
    if len(selected) != 1:
        return False
    el = selected[0]
    if not is_initialized_image(el):
        return False
    file_data = app.files.get(el.file_id)
    if file_data is None or not is_svg_file(file_data):
        return False
    try:
        svg_text = normalize_svg(data_url_to_string(file_data.data_url))
        return count_top_level_groups(svg_text) > 1
    except InvalidSvgError:
        return False


def splice_elements(
    elements: list[BaseElement],
    target_id: str,
    replacement: list[BaseElement],
) -> list[BaseElement]:
    """Replace `target_id` in place; if it is missing, drop it and append at the end."""
    idx = next((i for i, el in enumerate(elements) if el.id == target_id), -1)
    if idx >= 0:
        return [*elements[:idx], *replacement, *elements[idx + 1:]]
    return [*(el for el in elements if el.id != target_id), *replacement]


def perform(
    elements: list[BaseElement],
    app_state: AppState,
    form_data: Any,
    app: App,
    *,
    config: DecomposeConfig = DEFAULT_CONFIG,
    on_style_diff: StyleDiffSink = log_style_diff,
) -> ActionResult:
    """Break apart every selected SVG image. A no-op result is reported as EVENTUALLY."""
    selected = app.scene.get_selected_elements(app_state.selected_element_ids)
    images: list[ImageElement] = [el for el in selected if is_initialized_image(el)]

    next_elements = list(elements)
    any_inserted = False
    for img in images:
        file_data = app.files.get(img.file_id)
        if file_data is None or not is_svg_file(file_data):
            logger.debug("Image %s has no SVG content, skipping", img.id)
            continue
        created = decompose_image(img, file_data, config=config, on_style_diff=on_style_diff)
        if not created:
            continue
        next_elements = splice_elements(next_elements, img.id, created)
        any_inserted = True

    if not any_inserted:
        return ActionResult(elements=list(elements), app_state=app_state, capture_update=CaptureUpdate.EVENTUALLY)
    return ActionResult(elements=next_elements, app_state=app_state, capture_update=CaptureUpdate.IMMEDIATELY)


def predicate(elements: list[BaseElement], app_state: AppState, app: App) -> bool:
    return enable_break_apart_svg(app_state, app)


def panel(elements: list[BaseElement], app_state: AppState, app: App) -> PanelDescriptor:
    return PanelDescriptor(
        name="breakApartSvg",
        title=settings.action_label_fallback,
        icon=ICON,
        hidden=not enable_break_apart_svg(app_state, app),
        visible=any(app_state.selected_element_ids.get(el.id) for el in elements),
    )


action_break_apart_svg = register(
    ActionSpec(
        name="breakApartSvg",
        label="buttons.breakApartSvg",
        icon=ICON,
        track_event={"category": "element", "action": "break_apart_svg"},
        perform=perform,
        predicate=predicate,
        panel=panel,
    )
)
