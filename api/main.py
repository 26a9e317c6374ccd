from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.middleware import ApiKeyMiddleware
from core import db
from core.config import Settings
from core.log import configure_logging
from core.middleware import SecurityHeadersMiddleware
from records import router as records_router
from uploads import router as uploads_router

logger = logging.getLogger(__name__)


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        configure_logging(settings.log_level)
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        # Initialize the DB pool once per process. No database, no server.
        try:
            await db.init_pool(settings.database_url)
        except Exception:
            logger.exception("db_connect_failed")
            raise
        logger.info("Upload server running on %s, upload dir: %s", settings.port, settings.upload_dir)
        try:
            yield
        finally:
            await db.close_pool()

    app = FastAPI(title="upload-gateway", lifespan=lifespan)
    app.state.settings = settings

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    # Last added runs first: CORS answers pre-flights, then headers, then the gate.
    app.add_middleware(ApiKeyMiddleware, api_key=settings.api_key)
    app.add_middleware(SecurityHeadersMiddleware)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(uploads_router.router, tags=["uploads"])
    app.include_router(records_router.router, tags=["records"])

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
