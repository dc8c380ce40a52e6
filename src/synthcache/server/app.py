"""
FastAPI application for the synthcache server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from synthcache import __version__
from synthcache.config import SynthcacheConfig, load_config
from synthcache.server.schemas import ErrorResponse, HealthResponse
from synthcache.tts.service import SynthesisService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    stats = app.state.service.get_stats()
    logger.info(
        f"synthcache {__version__} ready "
        f"(provider: {app.state.service.synthesizer.name}, "
        f"cache: {'on' if stats.enabled else 'off'}, max size: {stats.max_size})"
    )
    yield
    logger.info("synthcache shutting down")


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer malformed request bodies with 400 and the shared error envelope."""
    fields = {str(part) for error in exc.errors() for part in error.get("loc", ())}
    if "text" in fields:
        message = "Text is required and must be a string"
    else:
        message = "; ".join(error.get("msg", "") for error in exc.errors())
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Bad request", message=message).model_dump(),
    )


def create_app(
    service: SynthesisService | None = None,
    config: SynthcacheConfig | None = None,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Synthesis service to expose (built from config when omitted)
        config: Loaded configuration (loaded from file/env when omitted)
        cors_origins: CORS allowed origins (default: ["*"])

    Returns:
        FastAPI application
    """
    config = config or load_config()
    service = service or SynthesisService.from_config(config)

    app = FastAPI(
        title="synthcache API",
        description="Cached text-to-speech synthesis",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.max_text_length = config.http.max_text_length

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Register routes
    from synthcache.server.routes import router as tts_router

    app.include_router(tts_router, prefix="/api/tts", tags=["TTS"])

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            version=__version__,
            provider=app.state.service.synthesizer.name,
        )

    return app
