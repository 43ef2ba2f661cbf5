"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ExtractTextRequest(BaseModel):
    filename: str = Field("icons.svg", description="Name reported back in the file report")
    svg: str = Field(..., description="Raw SVG code of one sprite sheet")
