"""SVG normalization — canonicalizes asset text before it is broken apart.

Strips active content, makes sure the document is namespaced, and gives the
root a concrete width/height/viewBox so scale factors are always defined.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET

from breakapart.svg.parser import SVG_NS, XLINK_NS, local_name, parse_svg_document

logger = logging.getLogger(__name__)

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

# Elements that carry script or foreign markup
_UNSAFE_TAGS = {"script", "foreignobject"}

_DEFAULT_SIZE = "50"

# "<x> <y> <width> <height>" — captures the extents
_VIEWBOX_EXTENTS_RE = re.compile(r"[-\d.]+[\s,]+[-\d.]+[\s,]+(\d+(?:\.\d+)?)[\s,]+(\d+(?:\.\d+)?)")


def normalize_svg(svg_text: str) -> str:
    """Return canonical SVG text. Raises InvalidSvgError for unparseable input."""
    svg = parse_svg_document(svg_text)
    _strip_unsafe(svg)

    if "}" not in svg.tag and "xmlns" not in svg.attrib:
        svg.set("xmlns", SVG_NS)

    width = svg.get("width")
    height = svg.get("height")
    # Percentage or auto sizes would rescale with the host container
    if width and ("%" in width or width == "auto"):
        width = None
    if height and ("%" in height or height == "auto"):
        height = None

    view_box = svg.get("viewBox")
    if not width or not height:
        width = width or _DEFAULT_SIZE
        height = height or _DEFAULT_SIZE
        if view_box:
            match = _VIEWBOX_EXTENTS_RE.search(view_box)
            if match:
                width, height = match.group(1), match.group(2)
        svg.set("width", width)
        svg.set("height", height)

    if not view_box:
        svg.set("viewBox", f"0 0 {width} {height}")

    return ET.tostring(svg, encoding="unicode")


def _strip_unsafe(svg: ET.Element) -> None:
    for parent in list(svg.iter()):
        for child in list(parent):
            if local_name(child.tag) in _UNSAFE_TAGS:
                logger.debug("Removing <%s> from SVG", local_name(child.tag))
                parent.remove(child)
        for attr in [a for a in parent.attrib if local_name(a).startswith("on")]:
            del parent.attrib[attr]
