"""Per-file state shared by discovery and synthesis.

A SourceDocument is built once per file by the parser and treated as read-only
afterwards: strategies only point at its elements, synthesis works on clones.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass, field

from iconsplit.svg.elements import NON_RENDERED_TAGS, iter_primitives, local_name


@dataclass(frozen=True)
class BBox:
    """Axis-aligned bounding box in user units."""

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    def union(self, other: BBox) -> BBox:
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return BBox(x, y, max(self.x2, other.x2) - x, max(self.y2, other.y2) - y)

    def padded(self, ratio: float) -> BBox:
        pad = max(self.width, self.height) * ratio
        return BBox(self.x - pad, self.y - pad, self.width + 2 * pad, self.height + 2 * pad)

    def is_degenerate(self, min_size: float) -> bool:
        """Both sides below min_size. A horizontal line is still a drawing."""
        return self.width < min_size and self.height < min_size

    def as_viewbox(self) -> str:
        return " ".join(format_number(v) for v in (self.x, self.y, self.width, self.height))

    @classmethod
    def from_corners(cls, xmin: float, ymin: float, xmax: float, ymax: float) -> BBox:
        return cls(xmin, ymin, xmax - xmin, ymax - ymin)


def format_number(value: float) -> str:
    """Compact number formatting for attribute values (12.0 -> '12')."""
    rounded = round(value, 3)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:g}"


@dataclass
class SourceDocument:
    """One parsed SVG file."""

    root: ET.Element
    filename: str = ""
    # Declared viewBox, None when absent or unusable
    viewbox: BBox | None = None
    # Declared width/height in user units (unit suffix stripped)
    width: float | None = None
    height: float | None = None
    # Concatenated text of every <style> block
    style_text: str = ""
    # Children of every <defs> block, in document order
    defs: list[ET.Element] = field(default_factory=list)
    # id -> element, for <use> and url(#...) resolution
    ids: dict[str, ET.Element] = field(default_factory=dict)
    # child -> parent (ElementTree has no parent pointers)
    parents: dict[ET.Element, ET.Element] = field(default_factory=dict)

    @property
    def canvas(self) -> BBox | None:
        """viewBox, else declared width/height, else None."""
        if self.viewbox is not None:
            return self.viewbox
        if self.width and self.height:
            return BBox(0.0, 0.0, self.width, self.height)
        return None

    @property
    def stem(self) -> str:
        name = self.filename.rsplit("/", 1)[-1]
        if name.lower().endswith(".svg"):
            name = name[:-4]
        return name or "icon"

    def parent(self, el: ET.Element) -> ET.Element | None:
        return self.parents.get(el)

    def ancestors(self, el: ET.Element) -> Iterator[ET.Element]:
        """Parents of el from nearest up to the root."""
        node = self.parents.get(el)
        while node is not None:
            yield node
            node = self.parents.get(node)

    def is_descendant(self, el: ET.Element, ancestor: ET.Element) -> bool:
        return any(a is ancestor for a in self.ancestors(el))

    def is_rendered(self, el: ET.Element) -> bool:
        """False when el sits inside <defs>, <symbol>, <clipPath> and the like."""
        return not any(local_name(a.tag) in NON_RENDERED_TAGS for a in self.ancestors(el))

    def lookup(self, ref: str | None) -> ET.Element | None:
        if not ref:
            return None
        return self.ids.get(ref[1:] if ref.startswith("#") else ref)

    def iter_elements(self, *tags: str) -> Iterator[ET.Element]:
        """Every element with one of the given local names, in document order."""
        wanted = set(tags)
        for el in self.root.iter():
            if local_name(el.tag) in wanted:
                yield el

    def has_primitives(self) -> bool:
        return next(iter_primitives(self.root), None) is not None


@dataclass
class IconCandidate:
    """One subtree believed to be a single icon."""

    element: ET.Element
    strategy: str
    bbox: BBox | None = None
    # Position within the winning strategy's output
    index: int = 0
    # The <use> that pointed at element, for use-reference candidates
    use: ET.Element | None = None
