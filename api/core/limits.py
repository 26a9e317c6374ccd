"""
Request size helpers shared by the upload and record endpoints.
"""

from __future__ import annotations

from fastapi import HTTPException
from starlette.requests import Request


def declared_content_length(request: Request) -> int | None:
    """
    The client's Content-Length, or None when it is absent or not a number.

    Only useful for rejecting early; the body may still be shorter or chunked.
    """
    raw = (request.headers.get("content-length") or "").strip()
    if not raw.isdigit():
        return None
    return int(raw)


def reject_if_declared_over(request: Request, max_bytes: int, *, detail: str) -> None:
    declared = declared_content_length(request)
    if declared is not None and declared > max_bytes:
        raise HTTPException(status_code=413, detail=detail)
