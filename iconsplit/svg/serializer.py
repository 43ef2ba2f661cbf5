"""Write standalone SVG documents from detached element trees."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable

from iconsplit.svg.elements import SVG_NS, XLINK_NS

_XML_NS = "http://www.w3.org/XML/1998/namespace"
_KEPT_NAMESPACES = {SVG_NS, XLINK_NS, _XML_NS}

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)


def svg_tag(name: str) -> str:
    return f"{{{SVG_NS}}}{name}"


def normalize_tree(el: ET.Element) -> None:
    """Put every element in the SVG namespace and drop editor namespaces in place.

    Inkscape/Sodipodi elements and attributes would otherwise serialize as ns0:
    prefixes the fragment never declares meaningfully.
    """
    for node in list(el.iter()):
        for child in list(node):
            if _foreign(child.tag):
                node.remove(child)
        if isinstance(node.tag, str) and not node.tag.startswith("{"):
            node.tag = svg_tag(node.tag)
        for key in list(node.attrib):
            if _foreign(key):
                del node.attrib[key]
            elif key == "xlink:href":
                node.set(f"{{{XLINK_NS}}}href", node.attrib.pop(key))


def _foreign(name: object) -> bool:
    if not isinstance(name, str):
        # Comments and processing instructions
        return True
    if name.startswith("{"):
        return name[1:].split("}", 1)[0] not in _KEPT_NAMESPACES
    return ":" in name and not name.startswith("xlink:")


def serialize_svg(
    content: Iterable[ET.Element],
    viewbox: str,
    width: str | None = None,
    height: str | None = None,
    style_text: str = "",
    defs: Iterable[ET.Element] = (),
    title: str = "",
) -> str:
    """Assemble one self-contained <svg> document around detached elements."""
    root = ET.Element(svg_tag("svg"), {"viewBox": viewbox})
    if width and height:
        root.set("width", width)
        root.set("height", height)

    if title:
        ET.SubElement(root, svg_tag("title")).text = title

    if style_text:
        ET.SubElement(root, svg_tag("style")).text = style_text

    defs = list(defs)
    if defs:
        defs_el = ET.SubElement(root, svg_tag("defs"))
        defs_el.extend(defs)

    root.extend(content)
    normalize_tree(root)
    return ET.tostring(root, encoding="unicode")
