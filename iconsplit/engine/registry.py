"""Strategy registry — every discovery strategy is a plain function registered via decorator.

Usage:
    @strategy(tag="symbol", priority=10)
    def symbols(doc: SourceDocument, config: ExtractionConfig) -> list[IconCandidate]:
        return [IconCandidate(el, "symbol") for el in doc.iter_elements("symbol")]

Adding a new strategy = writing one decorated function. Discovery picks it up in
priority order; nothing else changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from iconsplit.engine.config import ExtractionConfig
    from iconsplit.engine.context import IconCandidate, SourceDocument

logger = logging.getLogger(__name__)

StrategyFn = Callable[["SourceDocument", "ExtractionConfig"], list["IconCandidate"]]


@dataclass
class StrategySpec:
    tag: str
    priority: int
    fn: StrategyFn
    # Structural strategies count toward the grid-fallback threshold
    structural: bool = True
    # Only runs when every other strategy came up empty
    last_resort: bool = False
    description: str = ""


class StrategyRegistry:
    """Registry of candidate-discovery strategies, ordered by priority."""

    def __init__(self) -> None:
        self._strategies: dict[str, StrategySpec] = {}

    def register(self, spec: StrategySpec) -> None:
        if spec.tag in self._strategies:
            raise ValueError(f"Duplicate strategy tag: {spec.tag}")
        self._strategies[spec.tag] = spec
        logger.debug("Registered strategy %s (priority %d)", spec.tag, spec.priority)

    def get(self, tag: str) -> StrategySpec:
        return self._strategies[tag]

    def all(self) -> list[StrategySpec]:
        return sorted(self._strategies.values(), key=lambda s: (s.priority, s.tag))

    @property
    def count(self) -> int:
        return len(self._strategies)


# Module-level singleton
_registry = StrategyRegistry()


def get_registry() -> StrategyRegistry:
    return _registry


def strategy(
    *,
    tag: str,
    priority: int,
    structural: bool = True,
    last_resort: bool = False,
    description: str = "",
    registry: StrategyRegistry | None = None,
):
    """Decorator to register a discovery strategy."""

    def decorator(fn: StrategyFn) -> StrategyFn:
        (registry or _registry).register(
            StrategySpec(
                tag=tag,
                priority=priority,
                fn=fn,
                structural=structural,
                last_resort=last_resort,
                description=description,
            )
        )
        return fn

    return decorator
