"""
Access gate for every route.

Runs before routing, so unknown paths are rejected the same way as real ones.
Pre-flight (OPTIONS) requests always pass through for browser clients.
"""

from __future__ import annotations

import logging

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp

from .security import API_KEY_HEADER, api_key_matches

logger = logging.getLogger(__name__)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, api_key: str | None) -> None:
        super().__init__(app)
        self._api_key = api_key

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return await call_next(request)

        if not api_key_matches(request.headers.get(API_KEY_HEADER), self._api_key):
            logger.warning("unauthorized method=%s path=%s", request.method, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Unauthorized"},
            )

        return await call_next(request)
