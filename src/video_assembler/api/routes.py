"""FastAPI route handlers for the video job API."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from video_assembler.api.delivery import JobFileResponse
from video_assembler.api.dependencies import get_command_runner, get_orchestrator
from video_assembler.api.schemas import VIDEO_RESPONSES
from video_assembler.config import settings
from video_assembler.errors import CommandError
from video_assembler.graph.runner import JobOrchestrator
from video_assembler.models.job import JobKind, JobStatus
from video_assembler.tools.command import CommandRunner
from video_assembler.tools.ffmpeg import transcoder_version

logger = structlog.get_logger()

router = APIRouter()


async def _run_and_deliver(orchestrator: JobOrchestrator, kind: JobKind, body: dict[str, Any]) -> JobFileResponse:
    job = await orchestrator.run(kind, body)
    logger.info("job.status", job_id=job.job_id, status=JobStatus.DELIVERING.value)
    return JobFileResponse(job)


@router.post("/create-video", response_class=JobFileResponse, responses=VIDEO_RESPONSES)
async def create_video(
    body: Optional[dict[str, Any]] = Body(default=None),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """Build one video from ``imageURL{n}``/``audioURL{n}`` pairs, in index order."""
    return await _run_and_deliver(orchestrator, JobKind.SEQUENCE, body or {})


@router.post("/create-single-video", response_class=JobFileResponse, responses=VIDEO_RESPONSES)
async def create_single_video(
    body: Optional[dict[str, Any]] = Body(default=None),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """Build one video from ``imageURL``/``audioURL`` and cut its tail."""
    return await _run_and_deliver(orchestrator, JobKind.SINGLE, body or {})


@router.post("/merge-videos", response_class=JobFileResponse, responses=VIDEO_RESPONSES)
async def merge_videos(
    body: Optional[dict[str, Any]] = Body(default=None),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """Concatenate ``videoURL1..N`` with re-encoding."""
    return await _run_and_deliver(orchestrator, JobKind.MERGE, body or {})


@router.get("/ffmpeg-version", response_class=PlainTextResponse)
async def ffmpeg_version(runner: CommandRunner = Depends(get_command_runner)):
    """Report the transcoder banner; doubles as a readiness probe."""
    try:
        banner = await transcoder_version(runner, settings.ffmpeg_binary)
    except CommandError as exc:
        logger.warning("ffmpeg_version.failed", error=exc.message)
        return PlainTextResponse(f"Error: {exc.message}", status_code=500)
    return PlainTextResponse(banner)
