"""Layout session — cascaded presentation properties for a parsed SVG tree.

A session indexes the tree once (parents, ids, <style> rules) when it is
entered and answers computed-style queries until it exits. Exiting drops
every index and cache, so a session never leaks state into the next image.

Usage:
    with LayoutSession(svg_root) as session:
        fill = session.computed(node, "fill")
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, Iterator

import cssselect2
import tinycss2

from breakapart.svg.parser import local_name

logger = logging.getLogger(__name__)

# Properties resolved by the session, with their SVG initial values.
INITIAL_VALUES: dict[str, str] = {
    "fill": "black",
    "stroke": "none",
    "stroke-width": "1",
    "stroke-dasharray": "none",
    "stroke-linecap": "butt",
    "opacity": "1",
    "color": "black",
    "stop-color": "black",
}

INHERITED_PROPERTIES = frozenset(
    {"fill", "stroke", "stroke-width", "stroke-dasharray", "stroke-linecap", "color"}
)

_COLOR_PROPERTIES = frozenset({"fill", "stroke", "stop-color"})

Declaration = tuple[str, str, bool]  # (name, value, important)


def parse_declarations(css: str | Iterable) -> list[Declaration]:
    """Parse a declaration block (inline `style` or rule body)."""
    declarations: list[Declaration] = []
    for decl in tinycss2.parse_declaration_list(css, skip_comments=True, skip_whitespace=True):
        if decl.type != "declaration":
            continue
        declarations.append((decl.lower_name, tinycss2.serialize(decl.value).strip(), decl.important))
    return declarations


class StyleSheetMatcher(cssselect2.Matcher):
    """Rules collected from every <style> element of a document."""

    def add_styles(self, css: str) -> None:
        rules = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
        for rule in rules:
            if rule.type != "qualified-rule":
                continue
            try:
                selectors = cssselect2.compile_selector_list(rule.prelude)
            except cssselect2.SelectorError as e:
                logger.debug("Skipping selector %r: %s", tinycss2.serialize(rule.prelude), e)
                continue
            declarations = parse_declarations(rule.content)
            for selector in selectors:
                self.add_selector(selector, declarations)


class LayoutSession:
    """Scoped computed-style provider over one <svg> tree."""

    def __init__(self, svg_root: ET.Element) -> None:
        self.root = svg_root
        self._open = False
        self._wrappers: dict[ET.Element, cssselect2.ElementWrapper] = {}
        self._parents: dict[ET.Element, ET.Element] = {}
        self._ids: dict[str, ET.Element] = {}
        self._matcher: StyleSheetMatcher | None = None
        self._specified: dict[ET.Element, dict[str, str]] = {}
        self._computed: dict[tuple[ET.Element, str], str] = {}

    def __enter__(self) -> LayoutSession:
        matcher = StyleSheetMatcher()
        for wrapper in cssselect2.ElementWrapper.from_xml_root(self.root).iter_subtree():
            el = wrapper.etree_element
            self._wrappers[el] = wrapper
            for child in el:
                self._parents[child] = el
            el_id = el.get("id")
            if el_id and el_id not in self._ids:
                self._ids[el_id] = el
            if local_name(el.tag) == "style":
                matcher.add_styles("".join(el.itertext()))
        self._matcher = matcher
        self._open = True
        logger.debug("Layout session opened: %d elements", len(self._wrappers))
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._wrappers.clear()
        self._parents.clear()
        self._ids.clear()
        self._specified.clear()
        self._computed.clear()
        self._matcher = None
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def _check_open(self) -> None:
        if not self._open:
            raise RuntimeError("Layout session is closed")

    # ── Tree queries ──────────────────────────────────────────────────────

    def parent(self, node: ET.Element) -> ET.Element | None:
        self._check_open()
        return self._parents.get(node)

    def ancestors(self, node: ET.Element) -> Iterator[ET.Element]:
        """Parents of `node` up to and including the root, nearest first."""
        parent = self.parent(node)
        while parent is not None:
            yield parent
            parent = self._parents.get(parent)

    def get_element_by_id(self, element_id: str) -> ET.Element | None:
        self._check_open()
        return self._ids.get(element_id)

    # ── Cascade ───────────────────────────────────────────────────────────

    def computed(self, node: ET.Element, name: str) -> str:
        """Computed value of a presentation property, after cascade and inheritance."""
        self._check_open()
        key = (node, name)
        cached = self._computed.get(key)
        if cached is not None:
            return cached

        value = self._specified_values(node).get(name)
        if value in (None, "", "inherit"):
            parent = self._parents.get(node)
            if parent is not None and (value == "inherit" or name in INHERITED_PROPERTIES):
                value = self.computed(parent, name)
            else:
                value = INITIAL_VALUES.get(name, "")
        elif value == "initial":
            value = INITIAL_VALUES.get(name, "")
        elif name in _COLOR_PROPERTIES and value.lower() == "currentcolor":
            value = self.computed(node, "color")

        self._computed[key] = value
        return value

    def _specified_values(self, node: ET.Element) -> dict[str, str]:
        """Attribute < stylesheet < inline style; !important stylesheet < !important inline."""
        cached = self._specified.get(node)
        if cached is not None:
            return cached

        normal: dict[str, str] = {}
        important: dict[str, str] = {}
        for name in INITIAL_VALUES:
            attr = node.get(name)
            if attr is not None:
                normal[name] = attr.strip()

        wrapper = self._wrappers.get(node)
        if wrapper is not None and self._matcher is not None:
            for _specificity, _order, pseudo, declarations in self._matcher.match(wrapper):
                if pseudo:
                    continue
                for prop, value, is_important in declarations:
                    (important if is_important else normal)[prop] = value

        for prop, value, is_important in parse_declarations(node.get("style") or ""):
            (important if is_important else normal)[prop] = value

        specified = {**normal, **important}
        self._specified[node] = specified
        return specified
