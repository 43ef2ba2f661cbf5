"""Batch orchestration — files in, icon fragments and per-file reports out.

Files are processed one at a time in order. Per file: size guard → parse →
discover → synthesize every candidate → cap. A bad candidate drops only that
candidate; a bad file drops only that file.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable

from iconsplit.engine.config import ExtractionConfig
from iconsplit.engine.discovery import discover
from iconsplit.engine.errors import (
    CandidateSynthesisError,
    EmptyResultWarning,
    ExtractionError,
    OversizeError,
    ParseError,
)
from iconsplit.engine.synthesis import synthesize
from iconsplit.models.icon import IconFragment
from iconsplit.models.responses import BatchResult, FileReport
from iconsplit.svg.parser import parse_svg

logger = logging.getLogger(__name__)


def extract_file(
    filename: str,
    data: str | bytes,
    config: ExtractionConfig | None = None,
) -> tuple[list[IconFragment], FileReport]:
    """Extract every icon from one file. Never raises for bad input."""
    config = config or ExtractionConfig()
    report = FileReport(filename=filename)
    start = time.perf_counter()
    icons: list[IconFragment] = []

    try:
        size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
        if size > config.max_file_bytes:
            raise OversizeError(size, config.max_file_bytes)

        doc = parse_svg(data, filename=filename)
        discovery = discover(doc, config)
        report.strategies = discovery.strategies_used

        for candidate in discovery.candidates:
            if len(icons) >= config.max_icons_per_file:
                logger.info("%s: capped at %d icons", filename, config.max_icons_per_file)
                break
            try:
                icons.append(synthesize(candidate, doc, config))
            except (CandidateSynthesisError, OversizeError) as e:
                report.skipped_candidates += 1
                logger.warning("%s: skipping candidate %s #%d: %s", filename, candidate.strategy, candidate.index, e)

        if not icons:
            report.error_kind = EmptyResultWarning.kind
    except (ParseError, OversizeError) as e:
        report.error_kind = e.kind
        report.error = str(e)
        logger.warning("%s: %s", filename, e)
    except Exception as e:
        report.error_kind = ExtractionError.kind
        report.error = f"{type(e).__name__}: {e}"
        logger.exception("%s: extraction failed", filename)

    report.icon_count = len(icons)
    report.processing_time_ms = round((time.perf_counter() - start) * 1000, 1)
    logger.info(report.summary)
    return icons, report


def extract_batch(
    files: Iterable[tuple[str, str | bytes]],
    config: ExtractionConfig | None = None,
    cancel: threading.Event | None = None,
) -> BatchResult:
    """Extract icons from (filename, content) pairs, sequentially."""
    config = config or ExtractionConfig()
    result = BatchResult()

    for filename, data in files:
        if cancel is not None and cancel.is_set():
            logger.info("Batch cancelled after %d files", len(result.reports))
            break
        icons, report = extract_file(filename, data, config)
        result.icons.extend(icons)
        result.reports.append(report)

    logger.info(
        "Batch complete: %d icons from %d files",
        len(result.icons),
        len(result.reports),
    )
    return result
