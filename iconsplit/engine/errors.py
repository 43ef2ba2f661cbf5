"""Extraction error taxonomy.

Errors are contained at the smallest scope: a CandidateSynthesisError drops one
candidate, a ParseError or OversizeError drops one file. Nothing here is allowed
to abort a batch.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for everything the extraction engine raises."""

    kind = "error"


class ParseError(ExtractionError):
    """Input is not well-formed XML or has no root <svg>."""

    kind = "parse_error"


class OversizeError(ExtractionError):
    """A file or a synthesized fragment exceeds its byte limit."""

    kind = "oversize"

    def __init__(self, size: int, limit: int, what: str = "file") -> None:
        super().__init__(f"{what} is {size} bytes (limit {limit})")
        self.size = size
        self.limit = limit


class CandidateSynthesisError(ExtractionError):
    """Cloning or serializing a single candidate failed."""

    kind = "synthesis_error"


class EmptyResultWarning(UserWarning):
    """A file produced no icons at all. Reported, never raised out of a batch."""

    kind = "empty"
