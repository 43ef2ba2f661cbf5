"""Icon library — JSONL-based record store.

One line per saved icon in ``icons.jsonl`` under the data directory. Writes
rewrite the whole file through a temp file + os.replace.
"""

from __future__ import annotations

import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from iconsplit.models.icon import IconFragment, IconRecord

logger = logging.getLogger(__name__)

# Fields a metadata edit may touch
_EDITABLE = ("name", "category", "description", "keywords", "license", "author")


class IconStore:
    """JSONL-backed store of saved icons."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.icons_file = self.data_dir / "icons.jsonl"
        self._lock = threading.Lock()

    def save(self, fragment: IconFragment) -> IconRecord:
        """Store a fragment under a fresh id. file_size is recomputed from the content."""
        data = fragment.model_dump(exclude={"id", "created_at", "updated_at"})
        data["file_size"] = len(fragment.svg_content.encode("utf-8"))
        now = datetime.now(timezone.utc)
        record = IconRecord(id=str(uuid.uuid4()), created_at=now, updated_at=now, **data)
        with self._lock:
            records = self._load()
            records.append(record)
            self._save(records)
        logger.info("Saved icon %s (%s)", record.id, record.name)
        return record

    def list(self, search: str = "", category: str = "") -> list[IconRecord]:
        """Records newest first, optionally filtered by text and category."""
        with self._lock:
            records = self._load()
        needle = search.strip().lower()
        if needle:
            records = [r for r in records if _matches(r, needle)]
        if category:
            records = [r for r in records if r.category == category]
        # File order is save order; reversing first keeps ties newest first too
        records.reverse()
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def get(self, icon_id: str) -> IconRecord | None:
        with self._lock:
            records = self._load()
        for record in records:
            if record.id == icon_id:
                return record
        return None

    def update(self, icon_id: str, fields: dict[str, Any]) -> IconRecord | None:
        """Apply metadata edits. Unknown and None-valued fields are ignored."""
        changes = {k: v for k, v in fields.items() if k in _EDITABLE and v is not None}
        with self._lock:
            records = self._load()
            for i, record in enumerate(records):
                if record.id != icon_id:
                    continue
                updated = record.model_copy(
                    update={**changes, "updated_at": datetime.now(timezone.utc)}
                )
                records[i] = updated
                self._save(records)
                logger.info("Updated icon %s: %s", icon_id, ", ".join(sorted(changes)) or "no changes")
                return updated
        return None

    def delete(self, icon_id: str) -> bool:
        with self._lock:
            records = self._load()
            kept = [r for r in records if r.id != icon_id]
            if len(kept) == len(records):
                return False
            self._save(kept)
        logger.info("Deleted icon %s", icon_id)
        return True

    def categories(self) -> list[str]:
        """Distinct non-empty categories, sorted."""
        with self._lock:
            records = self._load()
        return sorted({r.category for r in records if r.category})

    def _load(self) -> list[IconRecord]:
        if not self.icons_file.exists():
            return []
        records = []
        with open(self.icons_file, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    records.append(IconRecord.model_validate_json(line))
        return records

    def _save(self, records: list[IconRecord]) -> None:
        tmp = self.icons_file.with_suffix(".jsonl.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            for r in records:
                f.write(r.model_dump_json() + "\n")
        os.replace(tmp, self.icons_file)


def _matches(record: IconRecord, needle: str) -> bool:
    if needle in record.name.lower() or needle in record.description.lower():
        return True
    return any(needle in k.lower() for k in record.keywords)


# Singleton
_store: IconStore | None = None


def get_icon_store() -> IconStore:
    """Get or create the global IconStore for the configured data directory."""
    global _store
    if _store is None:
        from iconsplit.config import settings

        _store = IconStore(settings.data_dir)
    return _store
