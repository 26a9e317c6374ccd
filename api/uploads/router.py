"""
FastAPI router for upload endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status
from starlette.datastructures import UploadFile

from core import limits
from core.config import Settings

from . import service

router = APIRouter()

FILES_FIELD = "files"

# Slack for multipart boundaries and part headers.
PART_OVERHEAD_BYTES = 16 * 1024


@router.post("/upload-multiple")
async def upload_multiple(request: Request) -> dict:
    """
    Store every `.txt.gz` part sent under the `files` field.

    The form is parsed here rather than through `File(...)` so that an empty
    request yields `No files` and the part limit comes from settings.
    """
    settings: Settings = request.app.state.settings

    # Starlette spools every part before we see it; refuse bodies that cannot fit.
    max_request_bytes = settings.max_files * (settings.max_file_bytes + PART_OVERHEAD_BYTES)
    limits.reject_if_declared_over(
        request,
        max_request_bytes,
        detail=f"Request too large. Max is {max_request_bytes} bytes.",
    )

    async with request.form(max_files=settings.max_files) as form:
        files: list[UploadFile] = []
        for key, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            if key != FILES_FIELD:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Unexpected field '{key}'",
                )
            files.append(value)

        if not files:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files")

        saved = await service.save_batch(
            files,
            root=settings.upload_dir,
            max_bytes=settings.max_file_bytes,
        )

    return {"ok": True, "files": [f.manifest_entry() for f in saved]}
