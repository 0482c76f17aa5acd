"""Per-job state carried between LangGraph nodes."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from typing_extensions import TypedDict

from video_assembler.models.assets import AssetPair, LocalAsset, Segment
from video_assembler.models.job import JobKind, JobStatus, TrimResult


class JobState(TypedDict):
    """State shared by the nodes of one job run."""

    # Set once at start
    job_id: str
    kind: JobKind
    body: dict[str, Any]

    # validate_request
    pairs: list[AssetPair]
    video_sources: list[str]  # merge jobs only

    # fetch_assets / synthesize_segments
    assets: list[LocalAsset]
    segments: list[Segment]

    # assemble_sequence / trim_output
    video_path: Optional[Path]
    trim_result: Optional[TrimResult]

    status: JobStatus
