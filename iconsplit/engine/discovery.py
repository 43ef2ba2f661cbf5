"""Candidate discovery — runs the registered strategies as one ordered chain.

Escalation rules:
- strategies run in priority order until the running total reaches
  ``sufficient_candidates``
- non-structural fallbacks (grid clustering) only run while the structural
  total is below ``grid_fallback_threshold``
- last-resort strategies (whole document) only run when nothing was found

Every candidate is checked for drawing content and against everything already
accepted: the same element, or an ancestor/descendant of an accepted element,
is never emitted twice.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from iconsplit.engine.config import ExtractionConfig
from iconsplit.engine.context import IconCandidate, SourceDocument
from iconsplit.engine.registry import StrategyRegistry, StrategySpec, get_registry
from iconsplit.engine.strategies import has_drawing

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    candidates: list[IconCandidate] = field(default_factory=list)
    # Accepted candidates per strategy tag, in run order
    counts: dict[str, int] = field(default_factory=dict)
    # strategy tag -> error message for strategies that raised
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def strategies_used(self) -> list[str]:
        return [tag for tag, n in self.counts.items() if n > 0]


def discover(
    doc: SourceDocument,
    config: ExtractionConfig | None = None,
    registry: StrategyRegistry | None = None,
) -> DiscoveryResult:
    """Run the strategy chain over one document."""
    config = config or ExtractionConfig()
    registry = registry or get_registry()
    result = DiscoveryResult()
    start = time.perf_counter()

    structural_total = 0
    for spec in registry.all():
        total = len(result.candidates)
        if total >= config.sufficient_candidates:
            break
        if spec.last_resort and total > 0:
            continue
        if not spec.structural and not spec.last_resort and structural_total >= config.grid_fallback_threshold:
            continue

        accepted = _run_strategy(spec, doc, config, result)
        result.counts[spec.tag] = accepted
        if spec.structural:
            structural_total += accepted

    for i, candidate in enumerate(result.candidates):
        candidate.index = i

    logger.info(
        "Discovery on %s: %d candidates via %s in %.1fms",
        doc.filename or "<svg>",
        len(result.candidates),
        ", ".join(result.strategies_used) or "nothing",
        (time.perf_counter() - start) * 1000,
    )
    return result


def _run_strategy(
    spec: StrategySpec,
    doc: SourceDocument,
    config: ExtractionConfig,
    result: DiscoveryResult,
) -> int:
    try:
        raw = spec.fn(doc, config)
    except Exception as e:
        result.errors[spec.tag] = str(e)
        logger.warning("Strategy %s FAILED: %s", spec.tag, e)
        return 0

    accepted = 0
    for candidate in raw:
        if accepted >= config.max_candidates_per_strategy:
            logger.debug("Strategy %s capped at %d", spec.tag, accepted)
            break
        if not _is_new(candidate, result.candidates, doc):
            continue
        # The last resort only needs some primitive, however small
        if not spec.last_resort and not has_drawing(candidate.element, doc, config):
            continue
        result.candidates.append(candidate)
        accepted += 1

    logger.debug("  %s: %d raw, %d accepted", spec.tag, len(raw), accepted)
    return accepted


def _is_new(candidate: IconCandidate, accepted: list[IconCandidate], doc: SourceDocument) -> bool:
    el = candidate.element
    for other in accepted:
        if other.element is el:
            return False
        if doc.is_descendant(el, other.element) or doc.is_descendant(other.element, el):
            return False
    return True
