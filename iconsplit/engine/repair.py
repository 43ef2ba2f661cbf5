"""Visibility repair — keep detached icons from rendering invisible.

Extracted subtrees lose their ancestors, and with them inherited fill, stroke
and the `color` that `currentColor` resolves against. This pass walks a clone
with the effective paint it would inherit inside the fragment and bakes in an
explicit visible paint wherever a primitive would otherwise draw nothing.

Outline art (fill="none" plus a visible stroke) is left untouched.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from iconsplit.svg.elements import (
    NON_VISUAL_DEF_TAGS,
    PRIMITIVE_TAGS,
    format_style,
    local_name,
    parse_style,
    presentation,
)

logger = logging.getLogger(__name__)

_SKIPPED_TAGS = NON_VISUAL_DEF_TAGS | {"defs", "style", "title", "desc", "metadata"}
_INVISIBLE_PAINT = {"none", "transparent"}
_INHERIT = {"inherit", ""}

# Primitives that never render a fill
_STROKE_ONLY_TAGS = {"line"}


@dataclass(frozen=True)
class Paint:
    """Effective (inherited) paint state at a node."""

    fill: str | None = None
    stroke: str | None = None
    stroke_width: str | None = None
    color: str | None = None


def is_visible_paint(value: str | None) -> bool:
    return value is not None and value.strip().lower() not in _INVISIBLE_PAINT


def repair_visibility(
    root: ET.Element,
    default_color: str = "#000000",
    inherited: Paint | None = None,
) -> int:
    """Repair root's subtree in place. Returns the number of primitives changed.

    Only ever call this on a detached clone.
    """
    repaired = _walk(root, inherited or Paint(), default_color)
    if repaired:
        logger.debug("Visibility repair: %d primitives fixed", repaired)
    return repaired


def effective_paint(el: ET.Element, parent: Paint) -> Paint:
    """Paint state at el given its parent's state."""
    color = _own(el, "color")
    if color is None or color == "currentColor":
        color = parent.color
    return Paint(
        fill=_own(el, "fill") or parent.fill,
        stroke=_own(el, "stroke") or parent.stroke,
        stroke_width=_own(el, "stroke-width") or parent.stroke_width,
        color=color,
    )


def _walk(el: ET.Element, parent: Paint, default_color: str) -> int:
    tag = local_name(el.tag)
    if not tag or tag in _SKIPPED_TAGS:
        return 0

    resolved = parent.color if parent.color and parent.color != "currentColor" else default_color
    own_color = _own(el, "color")
    if own_color and own_color != "currentColor":
        resolved = own_color
    for prop in ("fill", "stroke"):
        if (_own(el, prop) or "").strip() == "currentColor":
            set_presentation(el, prop, resolved)

    paint = effective_paint(el, parent)
    repaired = 0
    if tag in PRIMITIVE_TAGS:
        repaired = int(_repair_primitive(el, tag, paint, default_color))
        paint = effective_paint(el, parent)

    for child in el:
        repaired += _walk(child, paint, default_color)
    return repaired


def _repair_primitive(el: ET.Element, tag: str, paint: Paint, default_color: str) -> bool:
    stroke_visible = is_visible_paint(paint.stroke)

    if tag in _STROKE_ONLY_TAGS:
        if stroke_visible:
            return False
        _add_stroke(el, paint, default_color)
        return True

    if stroke_visible:
        return False

    if paint.fill is None:
        set_presentation(el, "fill", default_color)
        return True

    if not is_visible_paint(paint.fill):
        _add_stroke(el, paint, default_color)
        return True

    return False


def _add_stroke(el: ET.Element, paint: Paint, default_color: str) -> None:
    set_presentation(el, "stroke", default_color)
    if paint.stroke_width is None:
        set_presentation(el, "stroke-width", "1")


def _own(el: ET.Element, name: str) -> str | None:
    """Element's own value for a property, with 'inherit' treated as unset."""
    value = presentation(el, name)
    if value is None or value.strip() in _INHERIT:
        return None
    return value.strip()


def set_presentation(el: ET.Element, name: str, value: str) -> None:
    """Set a property where it is declared: inline style if it lives there."""
    style = parse_style(el.get("style"))
    if name in style:
        style[name] = value
        el.set("style", format_style(style))
    else:
        el.set(name, value)

