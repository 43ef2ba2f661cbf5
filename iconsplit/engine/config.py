"""Extraction configuration — every tunable threshold of the engine."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from iconsplit.config import Settings


@dataclass
class ExtractionConfig:
    """Controls how hard discovery escalates and how much output it produces."""

    # Byte limits
    max_file_bytes: int = 10_000_000
    max_fragment_bytes: int = 1_000_000

    # Output caps
    max_icons_per_file: int = 50
    max_candidates_per_strategy: int = 50

    # Escalation: stop once a strategy brings the total to this many
    sufficient_candidates: int = 3
    # Grid clustering only runs when structural strategies found fewer than this.
    # Has no effect unless sufficient_candidates is larger.
    grid_fallback_threshold: int = 5

    # Generic groups with more children than this are probably not one icon
    max_group_children: int = 50

    # Paths with shorter `d` data are treated as stray marks
    min_path_length: int = 8
    # Smallest bbox side (user units) for a shape to count as drawn
    min_shape_size: float = 0.5

    # Grid clustering
    grid_row_tolerance: float = 50.0
    grid_min_cell_size: float = 4.0
    grid_max_rows: int = 10
    grid_max_per_row: int = 20

    # Fragment synthesis
    padding_ratio: float = 0.1
    default_color: str = "#000000"
    default_size: float = 24.0

    @classmethod
    def from_settings(cls, settings: Settings) -> ExtractionConfig:
        """Every field comes from the setting of the same name."""
        return cls(**{f.name: getattr(settings, f.name) for f in fields(cls)})
