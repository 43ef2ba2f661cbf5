"""Icon models — the extraction output unit and its stored form."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON uses camelCase (svgContent, fileSize); Python uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Dimensions(CamelModel):
    width: float = 24.0
    height: float = 24.0


class IconFragment(CamelModel):
    """One standalone icon extracted from a sprite sheet."""

    id: str
    svg_content: str
    name: str
    dimensions: Dimensions = Field(default_factory=Dimensions)
    file_size: int = 0
    category: str = ""
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    license: str = ""
    author: str = ""
    # Which discovery strategy produced it, and from which upload
    strategy: str = ""
    source_file: str = ""


class IconRecord(IconFragment):
    """An icon saved to the library."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IconUpdate(CamelModel):
    """Metadata edits; unset fields are left alone."""

    name: str | None = None
    category: str | None = None
    description: str | None = None
    keywords: list[str] | None = None
    license: str | None = None
    author: str | None = None
