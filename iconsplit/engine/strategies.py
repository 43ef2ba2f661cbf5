"""Candidate-discovery strategies, registered in priority order.

Each strategy is a pure function (doc, config) -> candidates. Strategies only
point at elements of the source tree; validity filtering, de-duplication and
per-strategy caps are applied by discovery.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET

from iconsplit.engine.config import ExtractionConfig
from iconsplit.engine.context import IconCandidate, SourceDocument
from iconsplit.engine.grid import cluster_by_grid
from iconsplit.engine.registry import strategy
from iconsplit.svg.elements import (
    NON_RENDERED_TAGS,
    PRIMITIVE_TAGS,
    get_href,
    iter_primitives,
    local_name,
)
from iconsplit.svg.geometry import document_bbox, primitive_bbox

logger = logging.getLogger(__name__)

# Group ids/classes that name a layout role rather than an icon
_NON_ICON_RE = re.compile(r"layer|background|(?:^|[-_\s])bg(?:$|[-_\s])|artboard|guide", re.IGNORECASE)

# <use> chains deeper than this are treated as cycles
_MAX_USE_DEPTH = 4

# Raw groups gathered per strategy, as a multiple of the per-strategy cap
_GROUP_COLLECT_FACTOR = 4


# -- Validity ---------------------------------------------------------------


def is_meaningful(el: ET.Element, config: ExtractionConfig) -> bool:
    """A primitive with real geometry: not a dot, not a near-empty path."""
    if local_name(el.tag) == "path" and len((el.get("d") or "").strip()) < config.min_path_length:
        return False
    box = primitive_bbox(el)
    return box is not None and not box.is_degenerate(config.min_shape_size)


def has_drawing(
    el: ET.Element,
    doc: SourceDocument,
    config: ExtractionConfig,
    _depth: int = 0,
) -> bool:
    """True when el's subtree (following <use> references) draws something."""
    if any(is_meaningful(p, config) for p in iter_primitives(el)):
        return True
    if _depth >= _MAX_USE_DEPTH:
        return False
    for node in el.iter():
        if local_name(node.tag) != "use":
            continue
        target = doc.lookup(get_href(node))
        if target is not None and target is not el and has_drawing(target, doc, config, _depth + 1):
            return True
    return False


def _qualifying_groups(groups: list[ET.Element], doc: SourceDocument) -> list[ET.Element]:
    """Drop layout containers: groups holding two or more qualifying sub-groups.

    Sub-groups count only when no other qualifying group sits between them and
    the container, so an icon's own nested parts do not disqualify a sheet row.
    Each group is credited to its nearest qualifying ancestor in one walk up.
    """
    pool = set(groups)
    direct: dict[ET.Element, int] = {}
    for g in groups:
        for a in doc.ancestors(g):
            if a in pool:
                direct[a] = direct.get(a, 0) + 1
                break
    return [g for g in groups if direct.get(g, 0) < 2]


def _collect_groups(doc: SourceDocument, config: ExtractionConfig, accept) -> list[ET.Element]:
    """Groups passing accept(g), in document order, bounded for huge sheets.

    Collection stops at the first group outside every collected subtree once
    enough groups are held to fill the per-strategy cap several times over.
    Groups inside a collected container are still gathered so the container
    check sees all of its sub-groups.
    """
    limit = config.max_candidates_per_strategy * _GROUP_COLLECT_FACTOR
    groups: list[ET.Element] = []
    pool: set[ET.Element] = set()
    for g in doc.iter_elements("g"):
        if len(groups) >= limit and not any(a in pool for a in doc.ancestors(g)):
            logger.debug("Group collection stopped at %d groups", len(groups))
            break
        if accept(g):
            groups.append(g)
            pool.add(g)
    return groups


# -- Strategies -------------------------------------------------------------


@strategy(tag="symbol", priority=10, description="Author-declared <symbol> containers")
def symbols(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    return [IconCandidate(el, "symbol") for el in doc.iter_elements("symbol")]


@strategy(tag="definition", priority=20, description="Groups defined under <defs>")
def definition_groups(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    return [IconCandidate(el, "definition") for el in doc.defs if local_name(el.tag) == "g"]


@strategy(tag="named-group", priority=30, description="<g> elements with an id or class")
def named_groups(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    def accept(g: ET.Element) -> bool:
        label = " ".join(filter(None, (g.get("id"), g.get("class"))))
        if not label or _NON_ICON_RE.search(label) or not doc.is_rendered(g):
            return False
        return has_drawing(g, doc, config)

    groups = _collect_groups(doc, config, accept)
    return [IconCandidate(g, "named-group") for g in _qualifying_groups(groups, doc)]


@strategy(tag="use-reference", priority=40, description="<use href='#id'> resolved to its definition")
def use_references(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    candidates = []
    for use in doc.iter_elements("use"):
        if not doc.is_rendered(use):
            continue
        target = doc.lookup(get_href(use))
        if target is None:
            logger.debug("Unresolved <use> reference %r", get_href(use))
            continue
        candidates.append(
            IconCandidate(target, "use-reference", bbox=document_bbox(use, doc), use=use)
        )
    return candidates


@strategy(tag="group", priority=50, description="Any <g> holding drawing primitives")
def generic_groups(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    def accept(g: ET.Element) -> bool:
        n_children = sum(1 for child in g if local_name(child.tag))
        if not 0 < n_children <= config.max_group_children:
            return False
        return doc.is_rendered(g) and has_drawing(g, doc, config)

    groups = _collect_groups(doc, config, accept)
    return [IconCandidate(g, "group") for g in _qualifying_groups(groups, doc)]


@strategy(tag="direct-shape", priority=60, description="Top-level drawing primitives")
def direct_shapes(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    containers = [doc.root]
    top_level = [
        child for child in doc.root
        if local_name(child.tag) and local_name(child.tag) not in NON_RENDERED_TAGS
    ]
    # A single wrapper group around everything counts as the top level
    if len(top_level) == 1 and local_name(top_level[0].tag) == "g":
        containers.append(top_level[0])

    return [
        IconCandidate(child, "direct-shape")
        for container in containers
        for child in container
        if local_name(child.tag) in PRIMITIVE_TAGS
    ]


@strategy(
    tag="grid-cell",
    priority=70,
    structural=False,
    description="Positional clustering of loose elements into grid cells",
)
def grid_cells(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    elements = [
        el for el in doc.root.iter()
        if el is not doc.root
        and local_name(el.tag) in PRIMITIVE_TAGS | {"g"}
        and doc.is_rendered(el)
    ]
    return cluster_by_grid(elements, doc, config)


@strategy(
    tag="document",
    priority=80,
    structural=False,
    last_resort=True,
    description="The whole document as a single icon",
)
def whole_document(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
    if not doc.has_primitives():
        return []
    return [IconCandidate(doc.root, "document")]
