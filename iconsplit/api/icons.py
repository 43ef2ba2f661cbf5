"""/api/icons — the saved icon library."""

from __future__ import annotations

import re
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response

from iconsplit.dependencies import get_store
from iconsplit.engine.errors import ParseError
from iconsplit.models.icon import IconFragment, IconRecord, IconUpdate
from iconsplit.store.icon_store import IconStore
from iconsplit.svg.parser import parse_svg

router = APIRouter(prefix="/icons")

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\r\n]+')


@router.get("", response_model=list[IconRecord])
def list_icons(
    search: str = "",
    category: str = "",
    store: IconStore = Depends(get_store),
) -> list[IconRecord]:
    return store.list(search=search, category=category)


@router.get("/categories", response_model=list[str])
def list_categories(store: IconStore = Depends(get_store)) -> list[str]:
    return store.categories()


@router.post("", response_model=IconRecord, status_code=201)
def save_icon(fragment: IconFragment, store: IconStore = Depends(get_store)) -> IconRecord:
    try:
        parse_svg(fragment.svg_content, filename=f"{fragment.name}.svg")
    except ParseError as e:
        raise HTTPException(status_code=400, detail=f"svgContent is not a valid SVG: {e}")
    return store.save(fragment)


@router.get("/{icon_id}", response_model=IconRecord)
def get_icon(icon_id: str, store: IconStore = Depends(get_store)) -> IconRecord:
    return _require(store, icon_id)


@router.patch("/{icon_id}", response_model=IconRecord)
def update_icon(
    icon_id: str,
    update: IconUpdate,
    store: IconStore = Depends(get_store),
) -> IconRecord:
    record = store.update(icon_id, update.model_dump(exclude_unset=True))
    if record is None:
        raise HTTPException(status_code=404, detail=f"Icon {icon_id} not found")
    return record


@router.delete("/{icon_id}", status_code=204)
def delete_icon(icon_id: str, store: IconStore = Depends(get_store)) -> Response:
    if not store.delete(icon_id):
        raise HTTPException(status_code=404, detail=f"Icon {icon_id} not found")
    return Response(status_code=204)


@router.get("/{icon_id}/download")
def download_icon(icon_id: str, store: IconStore = Depends(get_store)) -> Response:
    record = _require(store, icon_id)
    return Response(
        content=record.svg_content,
        media_type="image/svg+xml",
        headers={"Content-Disposition": _content_disposition(record.name)},
    )


def _content_disposition(name: str) -> str:
    """Attachment header with an ASCII filename plus RFC 5987 filename* when needed."""
    stem = _UNSAFE_FILENAME_RE.sub("_", name).strip() or "icon"
    filename = f"{stem}.svg"
    fallback = stem.encode("ascii", "ignore").decode("ascii").strip() or "icon"
    disposition = f'attachment; filename="{fallback}.svg"'
    quoted = quote(filename)
    if quoted != filename:
        disposition += f"; filename*=utf-8''{quoted}"
    return disposition


def _require(store: IconStore, icon_id: str) -> IconRecord:
    record = store.get(icon_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Icon {icon_id} not found")
    return record
