"""Iconsplit extraction engine."""

from iconsplit.engine.registry import strategy, get_registry
from iconsplit.engine.context import BBox, IconCandidate, SourceDocument
from iconsplit.engine.config import ExtractionConfig

__all__ = [
    "strategy",
    "get_registry",
    "BBox",
    "IconCandidate",
    "SourceDocument",
    "ExtractionConfig",
]
