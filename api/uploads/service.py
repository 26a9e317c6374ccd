"""
Upload "service layer".

This file contains logic that is independent of FastAPI's routing layer:
- Validate every part of a batch before anything touches disk
- Stream each part to its routed destination with a size limit
- Describe what was stored
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, status
from starlette.datastructures import UploadFile

from . import naming, routing

ALLOWED_SUFFIX = re.compile(r"\.txt\.gz$", re.IGNORECASE)

CHUNK_SIZE = 1024 * 1024  # 1 MiB

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    original_name: str
    stored_name: str
    stored_path: Path
    size_bytes: int
    content_type: str | None

    def manifest_entry(self) -> dict:
        return {
            "originalname": self.original_name,
            "savedAs": self.stored_name,
            "path": str(self.stored_path),
            "size": self.size_bytes,
        }


def _too_large(max_bytes: int) -> HTTPException:
    return HTTPException(
        status_code=413,
        detail=f"File too large. Max is {max_bytes} bytes.",
    )


def is_allowed_filename(name: str | None) -> bool:
    return bool(name) and ALLOWED_SUFFIX.search(name) is not None


def validate_batch(files: list[UploadFile], *, max_bytes: int) -> None:
    """
    Reject the whole batch if any part has the wrong extension or is already
    known to be over the limit.
    """
    for upload in files:
        if not is_allowed_filename(upload.filename):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only .txt.gz files are allowed",
            )
        if upload.size is not None and upload.size > max_bytes:
            raise _too_large(max_bytes)


async def save_upload(upload: UploadFile, *, root: Path, max_bytes: int) -> UploadedFile:
    """
    Write one part to `<root>/<route>/<millis>-<sanitized name>`.

    A part that turns out to be over the limit while streaming is removed
    before the error is raised. OS errors propagate to the caller.
    """
    original_name = upload.filename or ""
    destination_dir = routing.ensure_destination(root, original_name)
    stored_name = naming.stored_filename(original_name)
    stored_path = (destination_dir / stored_name).resolve()

    size = 0
    with stored_path.open("wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                out.close()
                stored_path.unlink(missing_ok=True)
                raise _too_large(max_bytes)
            out.write(chunk)

    logger.info(
        "upload_saved original=%r saved_as=%s size=%s path=%s",
        original_name,
        stored_name,
        size,
        stored_path,
    )
    return UploadedFile(
        original_name=original_name,
        stored_name=stored_name,
        stored_path=stored_path,
        size_bytes=size,
        content_type=upload.content_type,
    )


async def save_batch(files: list[UploadFile], *, root: Path, max_bytes: int) -> list[UploadedFile]:
    """
    High-level step for one request: validate all parts, then store them in order.

    Files already written stay on disk if a later one fails.
    """
    validate_batch(files, max_bytes=max_bytes)

    saved: list[UploadedFile] = []
    for upload in files:
        try:
            saved.append(await save_upload(upload, root=root, max_bytes=max_bytes))
        except (OSError, ValueError) as e:
            # ValueError: names the OS cannot represent, e.g. an embedded NUL.
            logger.exception("upload_write_failed original=%r", upload.filename)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to store file: {e}",
            ) from e
    return saved
