"""POST /api/extract — sprite sheets in, standalone icons out."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, File, UploadFile

from iconsplit.dependencies import get_extraction_config
from iconsplit.engine.batch import extract_batch
from iconsplit.engine.config import ExtractionConfig
from iconsplit.models.requests import ExtractTextRequest
from iconsplit.models.responses import BatchResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/extract")


async def extract_uploads(files: list[UploadFile], config: ExtractionConfig) -> BatchResult:
    """Read uploads in order, then run the sync batch off the event loop."""
    contents: list[tuple[str, bytes]] = []
    for upload in files:
        # One byte past the limit is enough to report the file as oversize
        data = await upload.read(config.max_file_bytes + 1)
        contents.append((upload.filename or "upload.svg", data))

    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, extract_batch, contents, config)


@router.post("", response_model=BatchResult)
async def extract(
    files: list[UploadFile] = File(...),
    config: ExtractionConfig = Depends(get_extraction_config),
) -> BatchResult:
    result = await extract_uploads(files, config)
    logger.info("Extracted %d icons from %d uploads", len(result.icons), len(files))
    return result


@router.post("/text", response_model=BatchResult)
async def extract_text(
    req: ExtractTextRequest,
    config: ExtractionConfig = Depends(get_extraction_config),
) -> BatchResult:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, extract_batch, [(req.filename, req.svg)], config)
