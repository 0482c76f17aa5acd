"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from video_assembler.api.routes import router
from video_assembler.api.schemas import HealthResponse
from video_assembler.config import settings
from video_assembler.errors import PipelineError, ValidationError
from video_assembler.logging_config import configure_logging
from video_assembler.tools.credentials import DriveCredentials
from video_assembler.tools.fetcher import AssetFetcher

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------


def _get_allowed_origins() -> list[str]:
    if not settings.allowed_origins:
        return []
    return sorted({o.strip() for o in settings.allowed_origins.split(",") if o.strip()})


_ALLOWED_ORIGINS = _get_allowed_origins()


# ---------------------------------------------------------------------------
# App lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load credentials and own the shared HTTP client for the app lifetime."""
    configure_logging(settings.log_level, json_logs=settings.log_json)
    logger.info("app.startup", allowed_origins=_ALLOWED_ORIGINS, work_dir=settings.work_dir)

    # Broken credentials stop the process here rather than failing every job later
    credentials = DriveCredentials.from_settings(settings)
    if credentials is not None:
        await credentials.authorize()
    else:
        logger.info("app.credentials", mode="anonymous")

    client = httpx.AsyncClient(
        timeout=settings.fetch_timeout_sec,
        limits=httpx.Limits(max_connections=settings.max_connections),
        follow_redirects=True,
    )
    app.state.fetcher = AssetFetcher(client, credentials)
    try:
        yield
    finally:
        await client.aclose()
        logger.info("app.shutdown")


app = FastAPI(
    title="Video Assembler",
    description="Builds videos from remote image/audio pairs and merges remote clips",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info("request.rejected", path=request.url.path, missing_fields=exc.missing_fields)
    return JSONResponse(status_code=400, content={"error": exc.message, "missingFields": exc.missing_fields})


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    logger.error("request.failed", path=request.url.path, error_type=type(exc).__name__, error=exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


app.include_router(router)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return {"status": "ok"}


def run() -> None:
    """Console entrypoint: serve the app with uvicorn."""
    uvicorn.run("video_assembler.main:app", host=settings.host, port=settings.port, log_config=None)
