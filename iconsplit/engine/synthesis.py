"""Fragment synthesis — one IconCandidate → one standalone IconFragment.

Steps: resolve the viewBox, isolate a deep copy of the candidate (the source
tree is never touched), re-apply the placement and inherited paint it had in
the source, inline what its <use> elements draw, repair visibility, carry over
<style> and referenced <defs>, serialize, then attach identity and empty
metadata.
"""

from __future__ import annotations

import copy
import logging
import re
import uuid
import xml.etree.ElementTree as ET

import numpy as np
from numpy.typing import NDArray

from iconsplit.engine.config import ExtractionConfig
from iconsplit.engine.context import BBox, IconCandidate, SourceDocument, format_number
from iconsplit.engine.errors import CandidateSynthesisError, OversizeError
from iconsplit.engine.repair import repair_visibility
from iconsplit.models.icon import Dimensions, IconFragment
from iconsplit.svg.elements import (
    INHERITED_ATTRS,
    PRIMITIVE_TAGS,
    get_href,
    local_name,
    presentation,
    referenced_ids,
)
from iconsplit.svg.geometry import (
    ancestor_matrix,
    content_bbox,
    document_bbox,
    matrix_to_attr,
    transform_matrix,
)
from iconsplit.svg.parser import parse_number, parse_viewbox
from iconsplit.svg.serializer import serialize_svg, svg_tag

logger = logging.getLogger(__name__)

# Attributes of <svg>/<symbol> that mean nothing on a <g>
_VIEWPORT_ATTRS = (
    "viewBox", "preserveAspectRatio", "x", "y", "width", "height",
    "version", "baseProfile", "zoomAndPan",
)

# Attributes of <use> that only locate its target
_USE_ONLY_ATTRS = ("href", "xlink:href", "x", "y", "width", "height")

# <use> chains nested deeper than this are left as references
_MAX_INLINE_DEPTH = 4

_SEPARATOR_RE = re.compile(r"[\s_\-]+")


def synthesize(
    candidate: IconCandidate,
    doc: SourceDocument,
    config: ExtractionConfig | None = None,
) -> IconFragment:
    """Build the standalone fragment for one candidate.

    Raises OversizeError when the result exceeds max_fragment_bytes and
    CandidateSynthesisError for anything else that goes wrong.
    """
    config = config or ExtractionConfig()
    try:
        box, from_canvas = resolve_box(candidate, doc, config)
        viewbox = box if from_canvas else box.padded(config.padding_ratio)
        dims = _dimensions(box, viewbox)

        content = isolate(candidate, doc)
        inline_uses(content, doc)
        repair_visibility(content, config.default_color)

        svg = serialize_svg(
            [content],
            viewbox=viewbox.as_viewbox(),
            width=format_number(viewbox.width),
            height=format_number(viewbox.height),
            style_text=doc.style_text,
            defs=carry_defs(content, doc),
        )
    except Exception as e:
        raise CandidateSynthesisError(
            f"{candidate.strategy} #{candidate.index}: {type(e).__name__}: {e}"
        ) from e

    size = len(svg.encode("utf-8"))
    if size > config.max_fragment_bytes:
        raise OversizeError(size, config.max_fragment_bytes, what="fragment")

    return IconFragment(
        id=f"{doc.stem}-{candidate.strategy}-{candidate.index}-{uuid.uuid4().hex[:8]}",
        svg_content=svg,
        name=default_name(candidate, doc),
        dimensions=dims,
        file_size=size,
        strategy=candidate.strategy,
        source_file=doc.filename,
    )


# -- ViewBox ----------------------------------------------------------------


def resolve_box(
    candidate: IconCandidate,
    doc: SourceDocument,
    config: ExtractionConfig,
) -> tuple[BBox, bool]:
    """The unpadded box of the icon, and whether it came from a declared canvas.

    Order: the symbol's own viewBox; the candidate's geometry; the source
    canvas; the default 24x24.
    """
    el = candidate.element
    symbol = _symbol_of(candidate)
    if symbol is not None:
        declared = parse_viewbox(symbol.get("viewBox"))
        if declared is not None:
            return declared, True

    if candidate.strategy == "document":
        if doc.canvas is not None:
            return doc.canvas, True
        box = content_bbox(el, doc)
    elif symbol is not None:
        box = content_bbox(symbol, doc)
    else:
        box = candidate.bbox or document_bbox(candidate.use if candidate.use is not None else el, doc)

    if box is not None and (box.width > 0 or box.height > 0):
        return box, False
    if doc.canvas is not None:
        return doc.canvas, True
    size = config.default_size
    return BBox(0.0, 0.0, size, size), True


def _dimensions(box: BBox, viewbox: BBox) -> Dimensions:
    # A straight horizontal/vertical line has one zero side; take the padded one
    width = box.width if box.width > 0 else viewbox.width
    height = box.height if box.height > 0 else viewbox.height
    return Dimensions(width=round(width, 2), height=round(height, 2))


def _symbol_of(candidate: IconCandidate) -> ET.Element | None:
    if local_name(candidate.element.tag) == "symbol":
        return candidate.element
    return None


# -- Isolation --------------------------------------------------------------


def isolate(candidate: IconCandidate, doc: SourceDocument) -> ET.Element:
    """Deep-copy the candidate and wrap it with the context it had in the source."""
    el = candidate.element
    clone = copy.deepcopy(el)
    tag = local_name(el.tag)

    if tag in ("svg", "symbol"):
        _to_group(clone)
    if candidate.strategy == "document":
        for child in list(clone):
            if local_name(child.tag) in ("style", "defs", "metadata"):
                clone.remove(child)
        # The root's paint lives on the clone itself now
        return clone

    if candidate.use is not None:
        anchor = candidate.use
        chain = [anchor, *doc.ancestors(anchor)]
        matrix = _use_placement(anchor, doc) if tag != "symbol" else np.identity(3)
    else:
        chain = list(doc.ancestors(el))
        matrix = ancestor_matrix(el, doc) if tag != "symbol" else np.identity(3)

    wrapper_attrs: dict[str, str] = {}
    for name in INHERITED_ATTRS:
        if presentation(clone, name) is not None:
            continue
        value = _inherited(chain, name)
        if value is not None:
            wrapper_attrs[name] = value
    if not np.allclose(matrix, np.identity(3)):
        wrapper_attrs["transform"] = matrix_to_attr(matrix)

    if not wrapper_attrs:
        return clone
    wrapper = ET.Element(svg_tag("g"), wrapper_attrs)
    wrapper.append(clone)
    return wrapper


def _to_group(el: ET.Element) -> None:
    el.tag = svg_tag("g")
    for name in _VIEWPORT_ATTRS:
        el.attrib.pop(name, None)


def _use_placement(use: ET.Element, doc: SourceDocument) -> NDArray[np.float64]:
    """Where a <use> puts its target: ancestors, own transform, then x/y offset."""
    offset = np.identity(3)
    offset[0, 2] = parse_number(use.get("x"))
    offset[1, 2] = parse_number(use.get("y"))
    return ancestor_matrix(use, doc) @ transform_matrix(use.get("transform")) @ offset


def inline_uses(root: ET.Element, doc: SourceDocument, _depth: int = 0) -> int:
    """Replace <use> elements under root with copies of what they draw.

    Primitive and group targets become a <g> carrying the use's attributes and
    placement; a symbol target becomes a nested <svg> viewport inside that <g>.
    The copies then get visibility repair with the paint of the use site.
    Returns the number of <use> elements replaced.
    """
    inlined = 0
    for parent in list(root.iter()):
        for i, child in enumerate(list(parent)):
            if local_name(child.tag) != "use":
                continue
            target = doc.lookup(get_href(child))
            if target is None:
                continue
            replacement = _expand_use(child, target)
            if replacement is None:
                continue
            # Deeper chains stay as references and travel with the defs
            if _depth < _MAX_INLINE_DEPTH:
                inlined += inline_uses(replacement, doc, _depth + 1)
            parent[i] = replacement
            inlined += 1
    return inlined


def _expand_use(use: ET.Element, target: ET.Element) -> ET.Element | None:
    tag = local_name(target.tag)
    attrs = {k: v for k, v in use.attrib.items() if local_name(k) not in _USE_ONLY_ATTRS}

    if tag == "symbol":
        body = ET.Element(
            svg_tag("svg"),
            {k: v for k, v in target.attrib.items() if k not in ("id", "x", "y", "width", "height")},
        )
        for name in ("x", "y", "width", "height"):
            if use.get(name) is not None:
                body.set(name, use.get(name))
        body.extend(copy.deepcopy(child) for child in target)
    elif tag in PRIMITIVE_TAGS or tag == "g":
        x, y = parse_number(use.get("x")), parse_number(use.get("y"))
        if x or y:
            offset = f"translate({format_number(x)} {format_number(y)})"
            attrs["transform"] = f"{attrs['transform']} {offset}" if "transform" in attrs else offset
        body = copy.deepcopy(target)
        body.attrib.pop("id", None)
    else:
        return None

    wrapper = ET.Element(svg_tag("g"), attrs)
    wrapper.append(body)
    return wrapper


def _inherited(chain: list[ET.Element], name: str) -> str | None:
    """Nearest explicit value of an inheritable property along an ancestor chain."""
    for node in chain:
        value = presentation(node, name)
        if value is not None and value.strip() not in ("", "inherit"):
            return value.strip()
    return None


# -- Context carry-over -----------------------------------------------------


def carry_defs(content: ET.Element, doc: SourceDocument) -> list[ET.Element]:
    """Copies of every source element the content references, transitively."""
    own_ids = {node.get("id") for node in content.iter() if node.get("id")}
    needed: dict[str, ET.Element] = {}
    queue = sorted(referenced_ids(content))
    while queue:
        ref = queue.pop()
        if ref in needed or ref in own_ids:
            continue
        target = doc.ids.get(ref)
        if target is None or target is doc.root:
            continue
        needed[ref] = target
        queue.extend(sorted(referenced_ids(target)))

    targets = list(needed.values())
    # A target nested inside another carried target comes along with it
    roots = [t for t in targets if not any(doc.is_descendant(t, other) for other in targets)]
    return [copy.deepcopy(t) for t in roots]


# -- Identity ---------------------------------------------------------------


def humanize(label: str) -> str:
    """'icon-home' / 'ARROW_LEFT' → 'Icon Home' / 'Arrow Left'."""
    words = [w for w in _SEPARATOR_RE.split(label) if w]
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def default_name(candidate: IconCandidate, doc: SourceDocument) -> str:
    el = candidate.element
    if candidate.strategy == "document":
        return humanize(doc.stem) or "Icon 1"
    label = el.get("id") or (el.get("class") or "").split(" ")[0]
    if candidate.use is not None and not label:
        label = (candidate.use.get("id") or "").strip()
    name = humanize(label) if label else ""
    return name or f"Icon {candidate.index + 1}"
