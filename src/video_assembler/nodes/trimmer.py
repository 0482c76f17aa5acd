"""Trim Output node — cuts the configured tail off a single-pair video."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_assembler.errors import TrimError
from video_assembler.graph.context import get_job_context
from video_assembler.graph.state import JobState
from video_assembler.models.job import JobStatus
from video_assembler.tools.trimmer import trim

logger = structlog.get_logger()


async def trim_output(state: JobState, config: RunnableConfig) -> dict:
    ctx = get_job_context(config)
    segments = state.get("segments") or []
    if len(segments) != 1:
        raise TrimError(f"Expected exactly one segment to trim, got {len(segments)}")

    result = await trim(
        segments[0].output_path,
        ctx.settings.single_trim_tail_sec,
        ctx.workspace.path_for(state["kind"].attachment_name),
        ctx.runner,
        ffmpeg_binary=ctx.settings.ffmpeg_binary,
        ffprobe_binary=ctx.settings.ffprobe_binary,
    )

    logger.info(
        "trim_output.done",
        job_id=state["job_id"],
        status=result.status.value,
        original=result.original_duration,
        new=result.new_duration,
    )
    return {"video_path": result.video_path, "trim_result": result, "status": JobStatus.DELIVERING}
