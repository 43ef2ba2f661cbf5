"""Helpers for SVG elements: tag names, namespaces, presentation attributes.

Leaf module. ElementTree keeps namespaces inline in tag names
("{http://www.w3.org/2000/svg}path"), so everything here compares local names.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

PRIMITIVE_TAGS = {"path", "circle", "rect", "polygon", "line", "ellipse", "polyline"}

# Containers whose content never renders on its own
NON_RENDERED_TAGS = {
    "defs", "symbol", "clipPath", "mask", "filter", "linearGradient",
    "radialGradient", "pattern", "marker", "style", "title", "desc", "metadata",
}

# Definition children that are paint servers or effects, never icons
NON_VISUAL_DEF_TAGS = {
    "clipPath", "mask", "filter", "linearGradient", "radialGradient",
    "pattern", "marker", "style",
}

# Presentation attributes an extracted subtree picks up from its source ancestors
INHERITED_ATTRS = (
    "fill", "stroke", "stroke-width", "color", "fill-rule",
    "stroke-linecap", "stroke-linejoin", "fill-opacity", "stroke-opacity", "opacity",
)

_URL_REF_RE = re.compile(r"url\(\s*['\"]?#([^'\")\s]+)['\"]?\s*\)")


def local_name(tag: object) -> str:
    """Strip the namespace from an ElementTree tag. Comments/PIs yield ''."""
    if not isinstance(tag, str):
        return ""
    return tag.split("}")[-1] if "}" in tag else tag


def is_primitive(el: ET.Element) -> bool:
    return local_name(el.tag) in PRIMITIVE_TAGS


def iter_primitives(el: ET.Element) -> Iterator[ET.Element]:
    """Drawing primitives in el's subtree (el included), skipping paint servers."""
    tag = local_name(el.tag)
    if tag in PRIMITIVE_TAGS:
        yield el
        return
    if tag in NON_VISUAL_DEF_TAGS:
        return
    for child in el:
        yield from iter_primitives(child)


def get_href(el: ET.Element) -> str | None:
    """href or xlink:href, whichever is present."""
    return el.get("href") or el.get(f"{{{XLINK_NS}}}href") or el.get("xlink:href")


def parse_style(style: str | None) -> dict[str, str]:
    """Parse an inline style attribute into a dict."""
    props: dict[str, str] = {}
    if not style:
        return props
    for decl in style.split(";"):
        if ":" not in decl:
            continue
        key, value = decl.split(":", 1)
        key = key.strip()
        if key:
            props[key] = value.strip()
    return props


def format_style(props: dict[str, str]) -> str:
    return ";".join(f"{k}:{v}" for k, v in props.items())


def presentation(el: ET.Element, name: str) -> str | None:
    """Value of a presentation property; inline style wins over the attribute."""
    style = parse_style(el.get("style"))
    if name in style:
        return style[name]
    return el.get(name)


def referenced_ids(el: ET.Element) -> set[str]:
    """Ids referenced from el's subtree through url(#id) or href="#id"."""
    refs: set[str] = set()
    for node in el.iter():
        for value in node.attrib.values():
            refs.update(_URL_REF_RE.findall(value))
        href = get_href(node)
        if href and href.startswith("#"):
            refs.add(href[1:])
    return refs
