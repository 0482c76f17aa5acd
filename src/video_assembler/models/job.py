"""Job kinds, lifecycle states and stage results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class JobKind(str, Enum):
    """Request shape accepted by the service; one per endpoint."""

    SEQUENCE = "sequence"  # N image/audio pairs → one video
    SINGLE = "single"  # one pair → one tail-trimmed video
    MERGE = "merge"  # pre-made videos → one re-encoded video

    @property
    def attachment_name(self) -> str:
        return {
            JobKind.SEQUENCE: "final_video.mp4",
            JobKind.SINGLE: "single_video.mp4",
            JobKind.MERGE: "final_merged_video.mp4",
        }[self]


class JobStatus(str, Enum):
    VALIDATING = "validating"
    FETCHING = "fetching"
    SYNTHESIZING = "synthesizing"
    ASSEMBLING = "assembling"
    TRIMMING = "trimming"
    DELIVERING = "delivering"
    DELIVERED = "delivered"
    FAILED = "failed"


class TrimStatus(str, Enum):
    SKIPPED = "skipped"
    TRIMMED = "trimmed"


@dataclass
class TrimResult:
    """Outcome of a tail cut. ``video_path`` is the job's current video either way."""

    status: TrimStatus
    video_path: Path
    original_duration: float
    new_duration: Optional[float] = None

    @property
    def skipped(self) -> bool:
        return self.status == TrimStatus.SKIPPED
