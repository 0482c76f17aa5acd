"""Fetch Assets node — downloads every asset of the job concurrently."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_assembler.graph.context import get_job_context
from video_assembler.graph.state import JobState
from video_assembler.models.assets import AssetKind
from video_assembler.models.job import JobKind, JobStatus
from video_assembler.tools.fanout import gather_bounded

logger = structlog.get_logger()


async def fetch_assets(state: JobState, config: RunnableConfig) -> dict:
    """Download all sources named by the validated request.

    Destinations are registered in the workspace before any download starts,
    so partially written files are removed on failure.
    """
    ctx = get_job_context(config)
    workspace = ctx.workspace

    # (source, kind, index) in request order; images before audio within a pair
    plan: list[tuple[str, AssetKind, int]] = []
    for pair in state.get("pairs") or []:
        plan.append((pair.image_source, AssetKind.IMAGE, pair.index))
        plan.append((pair.audio_source, AssetKind.AUDIO, pair.index))
    for index, source in enumerate(state.get("video_sources") or [], start=1):
        plan.append((source, AssetKind.VIDEO, index))

    jobs = [
        (source, workspace.path_for(f"{kind.value}{index}{kind.default_suffix}"), kind, index)
        for source, kind, index in plan
    ]

    logger.info("fetch_assets.start", job_id=state["job_id"], count=len(jobs), concurrency=ctx.settings.fetch_concurrency)

    assets = await gather_bounded(
        (ctx.fetcher.fetch(source, dest, kind, index) for source, dest, kind, index in jobs),
        ctx.settings.fetch_concurrency,
    )

    logger.info("fetch_assets.done", job_id=state["job_id"], count=len(assets))
    next_status = JobStatus.ASSEMBLING if state["kind"] == JobKind.MERGE else JobStatus.SYNTHESIZING
    return {"assets": assets, "status": next_status}
