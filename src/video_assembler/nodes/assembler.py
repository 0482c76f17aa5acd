"""Assemble Sequence node — concatenates segments or merge clips."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_assembler.graph.context import get_job_context
from video_assembler.graph.state import JobState
from video_assembler.models.assets import AssetKind
from video_assembler.models.job import JobKind, JobStatus
from video_assembler.tools.assembler import AssembleMode, assemble

logger = structlog.get_logger()


async def assemble_sequence(state: JobState, config: RunnableConfig) -> dict:
    """Concatenate in order.

    Sequence jobs stream-copy their freshly synthesized segments; merge jobs
    re-encode because the clips come from unrelated sources.
    """
    ctx = get_job_context(config)
    kind = state["kind"]

    if kind == JobKind.MERGE:
        videos = sorted(
            (a for a in state.get("assets") or [] if a.kind == AssetKind.VIDEO),
            key=lambda a: a.index,
        )
        inputs = [a.local_path for a in videos]
        mode = AssembleMode.REENCODE
    else:
        inputs = [s.output_path for s in sorted(state.get("segments") or [], key=lambda s: s.index)]
        mode = AssembleMode.COPY

    output = await assemble(
        inputs,
        ctx.workspace.path_for(kind.attachment_name),
        ctx.workspace.path_for("list.txt"),
        ctx.runner,
        mode=mode,
        encoding=ctx.encoding,
        ffmpeg_binary=ctx.settings.ffmpeg_binary,
    )

    logger.info("assemble_sequence.done", job_id=state["job_id"], inputs=len(inputs), mode=mode.value)
    return {"video_path": output, "status": JobStatus.DELIVERING}
