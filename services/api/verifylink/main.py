"""FastAPI application entry point.

Verify.link API - store verification, trust badges and scam alerts.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from verifylink.cors import ScopedCORSMiddleware
from verifylink.routes import api_router
from verifylink.schemas import ErrorResponse
from verifylink.services.errors import VerifyError
from verifylink.settings import get_settings
from verifylink.stores.postgres import init_db, close_db, ping_db
from verifylink.stores.redis import init_redis, close_redis

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Connect Postgres and Redis on startup, release them on shutdown.

    Postgres failures are logged but do not block startup so /health keeps
    answering; Redis only backs the public badge cache.
    """
    try:
        await init_db()
        await ping_db()
        logger.info("[db] Postgres connected")
    except Exception:
        logger.exception("[db] Postgres init failed")

    try:
        await init_redis()
    except Exception:
        logger.exception("[badges] Redis init failed, badge cache disabled")

    yield

    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Store verification, trust badges and scam alerts API",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        ScopedCORSMiddleware,
        allow_origins=settings.cors_origins,
        public_prefixes=("/v1/badges",),
    )

    @app.exception_handler(VerifyError)
    async def verify_error_handler(request: Request, exc: VerifyError) -> JSONResponse:
        if exc.outcome == "retry":
            logger.warning(f"[api] {request.method} {request.url.path} -> {exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed request bodies get the same envelope as domain validation errors."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        return JSONResponse(
            status_code=422,
            content=ErrorResponse.build(
                "VALIDATION_ERROR",
                first.get("msg", "Invalid request"),
                outcome="rejected",
                field=field or None,
            ),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"[api] unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse.build(
                "INTERNAL_ERROR",
                str(exc) if settings.debug else "Internal server error",
                outcome="retry",
            ),
        )

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "verifylink.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
