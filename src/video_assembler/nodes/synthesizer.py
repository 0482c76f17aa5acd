"""Synthesize Segments node — one video segment per image/audio pair."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_assembler.errors import SynthesisError
from video_assembler.graph.context import get_job_context
from video_assembler.graph.state import JobState
from video_assembler.models.assets import AssetKind, Segment
from video_assembler.models.job import JobKind, JobStatus
from video_assembler.tools.fanout import gather_bounded
from video_assembler.tools.synthesizer import synthesize

logger = structlog.get_logger()


async def synthesize_segments(state: JobState, config: RunnableConfig) -> dict:
    """Render every pair into ``segment{n}.mp4``; segment order follows pair order."""
    ctx = get_job_context(config)
    pairs = state.get("pairs") or []
    by_slot = {(asset.kind, asset.index): asset.local_path for asset in state.get("assets") or []}

    for pair in pairs:
        if (AssetKind.IMAGE, pair.index) not in by_slot or (AssetKind.AUDIO, pair.index) not in by_slot:
            raise SynthesisError(f"Assets for pair {pair.index} were not fetched")

    segments = [
        Segment(index=pair.index, source_pair=pair, output_path=ctx.workspace.path_for(f"segment{pair.index}.mp4"))
        for pair in pairs
    ]
    encoding = ctx.encoding
    renders = [
        synthesize(
            by_slot[(AssetKind.IMAGE, seg.index)],
            by_slot[(AssetKind.AUDIO, seg.index)],
            seg.output_path,
            ctx.runner,
            encoding=encoding,
            ffmpeg_binary=ctx.settings.ffmpeg_binary,
        )
        for seg in segments
    ]

    logger.info(
        "synthesize_segments.start",
        job_id=state["job_id"],
        count=len(renders),
        concurrency=ctx.settings.synth_concurrency,
    )
    await gather_bounded(renders, ctx.settings.synth_concurrency)
    logger.info("synthesize_segments.done", job_id=state["job_id"], count=len(segments))

    next_status = JobStatus.TRIMMING if state["kind"] == JobKind.SINGLE else JobStatus.ASSEMBLING
    return {"segments": segments, "status": next_status}
