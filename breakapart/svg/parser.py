"""SVG parser — turns asset text into an ElementTree rooted at <svg>.

Also reads the root viewport (width/height/viewBox) and the top-level groups
that become the re-grouping units of a break-apart.
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from urllib.parse import unquote

from breakapart.svg.primitives import parse_float_attr

logger = logging.getLogger(__name__)

SVG_MIME_TYPE = "image/svg+xml"
SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

_DATA_URL_RE = re.compile(r"^data:([^,]*),(.*)$", re.DOTALL | re.IGNORECASE)
_SVG_DATA_URL_RE = re.compile(r"^data:image/svg\+xml", re.IGNORECASE)


class InvalidSvgError(ValueError):
    """Raised when asset text does not parse to an SVG document."""


@dataclass(frozen=True)
class Viewport:
    """Intrinsic size and viewBox of a root <svg> element."""

    width: float
    height: float
    vb_x: float
    vb_y: float
    vb_w: float
    vb_h: float


def local_name(tag: object) -> str:
    """Tag name without its namespace. Comments and PIs have no string tag."""
    if not isinstance(tag, str):
        return ""
    return tag.split("}")[-1].lower() if "}" in tag else tag.lower()


def data_url_to_string(data_url: str) -> str:
    """Decode a `data:` URL (base64 or percent-encoded) to text.

    Strings that are not data URLs are returned unchanged.
    """
    match = _DATA_URL_RE.match(data_url.strip())
    if not match:
        return data_url
    header, payload = match.groups()
    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode(payload).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InvalidSvgError(f"Undecodable data URL: {e}") from e
    return unquote(payload)


def is_svg_data_url(data_url: str | None) -> bool:
    return isinstance(data_url, str) and bool(_SVG_DATA_URL_RE.match(data_url))


def parse_svg_document(svg_text: str) -> ET.Element:
    """Parse SVG text and return its <svg> element (root or first descendant)."""
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise InvalidSvgError(f"Unparseable SVG: {e}") from e

    if local_name(root.tag) == "svg":
        return root
    for el in root.iter():
        if local_name(el.tag) == "svg":
            return el
    raise InvalidSvgError("Document has no <svg> element")


def top_level_groups(svg_root: ET.Element) -> list[ET.Element]:
    """Direct <g> children of the root, in document order."""
    return [child for child in svg_root if local_name(child.tag) == "g"]


def count_top_level_groups(svg_text: str) -> int:
    return len(top_level_groups(parse_svg_document(svg_text)))


def read_viewport(svg_root: ET.Element) -> Viewport:
    """Read width/height and viewBox; a missing or malformed viewBox spans the intrinsic size."""
    width = parse_float_attr(svg_root, "width") or 0.0
    height = parse_float_attr(svg_root, "height") or 0.0
    vb_x, vb_y, vb_w, vb_h = 0.0, 0.0, width, height

    raw = (svg_root.get("viewBox") or "").strip()
    if raw:
        try:
            parts = [float(p) for p in re.split(r"[\s,]+", raw)]
        except ValueError:
            parts = []
        if len(parts) == 4 and all(math.isfinite(p) for p in parts):
            vb_x, vb_y, vb_w, vb_h = parts
        else:
            logger.debug("Ignoring malformed viewBox %r", raw)

    return Viewport(width=width, height=height, vb_x=vb_x, vb_y=vb_y, vb_w=vb_w, vb_h=vb_h)
