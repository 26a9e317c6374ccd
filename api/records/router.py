"""
FastAPI router for the generic insert endpoint.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from core import limits
from core.config import Settings

from . import repository, service

router = APIRouter()

logger = logging.getLogger(__name__)


TOO_LARGE_DETAIL = "request entity too large"


async def read_json_body(request: Request, *, max_bytes: int) -> object:
    """
    Read and decode the body, never holding more than `max_bytes` of it.
    """
    limits.reject_if_declared_over(request, max_bytes, detail=TOO_LARGE_DETAIL)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise HTTPException(status_code=413, detail=TOO_LARGE_DETAIL)

    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid JSON body") from e


@router.post("/data")
async def insert_data(request: Request):
    """
    Insert `{table, ...fields}` as one row and return the generated id.

    Shape errors are 400s; anything that goes wrong while building or running
    the statement is reported as `internal_error` with the underlying message.
    """
    settings: Settings = request.app.state.settings

    payload = await read_json_body(request, max_bytes=settings.max_json_bytes)
    record = service.parse_record(payload)

    try:
        new_id = await repository.insert_record(
            record,
            id_column=settings.insert_id_column,
            allowed_tables=settings.allowed_tables,
        )
    except Exception as e:
        logger.exception("insert_failed table=%r columns=%s", record.table, record.columns)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal_error", "details": str(e)},
        )

    logger.info("insert_complete table=%s id=%s", record.table, new_id)
    return {"ok": True, "id": new_id}
