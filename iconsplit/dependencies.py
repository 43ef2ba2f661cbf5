"""FastAPI dependency injection."""

from __future__ import annotations

from iconsplit.config import settings
from iconsplit.engine.config import ExtractionConfig
from iconsplit.store.icon_store import IconStore, get_icon_store


def get_settings():
    return settings


def get_extraction_config() -> ExtractionConfig:
    return ExtractionConfig.from_settings(settings)


def get_store() -> IconStore:
    return get_icon_store()
