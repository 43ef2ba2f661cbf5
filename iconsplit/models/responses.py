"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

from iconsplit.models.icon import CamelModel, IconFragment


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    strategies_registered: int = 0


class FileReport(CamelModel):
    """Outcome of one file in a batch."""

    filename: str
    icon_count: int = 0
    # Strategies that contributed candidates, in run order
    strategies: list[str] = Field(default_factory=list)
    # parse_error | oversize | empty | error; None on success
    error_kind: str | None = None
    error: str = ""
    skipped_candidates: int = 0
    processing_time_ms: float = 0.0

    @computed_field
    @property
    def strategy(self) -> str:
        """The first strategy with candidates; later ones only topped it up."""
        return self.strategies[0] if self.strategies else ""

    @computed_field
    @property
    def summary(self) -> str:
        line = f"{self.filename}: {self.icon_count} icons extracted"
        if self.error_kind == "parse_error":
            return f"{line} (parse error: {self.error})"
        if self.error_kind == "oversize":
            return f"{line} (file too large: {self.error})"
        if self.error_kind == "empty":
            return f"{line} (no drawing content found)"
        if self.error_kind:
            return f"{line} (processing error: {self.error})"
        return line


class BatchResult(CamelModel):
    icons: list[IconFragment] = Field(default_factory=list)
    reports: list[FileReport] = Field(default_factory=list)

    @property
    def summaries(self) -> list[str]:
        return [r.summary for r in self.reports]
