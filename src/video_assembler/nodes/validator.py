"""Validate Request node — turns a raw request body into asset sources."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from langchain_core.runnables import RunnableConfig

from video_assembler.errors import ValidationError
from video_assembler.graph.context import get_job_context
from video_assembler.graph.state import JobState
from video_assembler.models.assets import AssetPair
from video_assembler.models.job import JobKind, JobStatus

logger = structlog.get_logger()

MISSING_FIELDS_MESSAGE = "Missing required fields in request body."


def _field(body: dict[str, Any], name: str) -> Optional[str]:
    """Return the stripped value of *name*, or None unless it is a non-blank string."""
    value = body.get(name)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def collect_asset_pairs(body: dict[str, Any], required_count: Optional[int] = None) -> list[AssetPair]:
    """Collect ``imageURL{n}``/``audioURL{n}`` pairs in index order.

    Without *required_count* the scan stops at the first index where either
    field is absent; at least one pair is required. With it, every field from
    1 to *required_count* must be present and all missing names are reported.

    Raises:
        ValidationError: required fields are missing.
    """
    if required_count:
        missing: list[str] = []
        pairs: list[AssetPair] = []
        for i in range(1, required_count + 1):
            image, audio = _field(body, f"imageURL{i}"), _field(body, f"audioURL{i}")
            if image is None:
                missing.append(f"imageURL{i}")
            if audio is None:
                missing.append(f"audioURL{i}")
            if image and audio:
                pairs.append(AssetPair(index=i, image_source=image, audio_source=audio))
        if missing:
            raise ValidationError(MISSING_FIELDS_MESSAGE, missing)
        return pairs

    pairs = []
    index = 1
    while True:
        image, audio = _field(body, f"imageURL{index}"), _field(body, f"audioURL{index}")
        if image is None or audio is None:
            break
        pairs.append(AssetPair(index=index, image_source=image, audio_source=audio))
        index += 1

    if not pairs:
        missing = [name for name in ("imageURL1", "audioURL1") if _field(body, name) is None]
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing)
    return pairs


def parse_single_pair(body: dict[str, Any]) -> AssetPair:
    image, audio = _field(body, "imageURL"), _field(body, "audioURL")
    missing = [name for name, value in (("imageURL", image), ("audioURL", audio)) if value is None]
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing)
    return AssetPair(index=1, image_source=image, audio_source=audio)


def parse_video_sources(body: dict[str, Any], count: int) -> list[str]:
    names = [f"videoURL{i}" for i in range(1, count + 1)]
    missing = [name for name in names if _field(body, name) is None]
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing)
    return [_field(body, name) for name in names]


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------


async def validate_request(state: JobState, config: RunnableConfig) -> dict:
    """Check the request body for the job kind; nothing is fetched or written here."""
    settings = get_job_context(config).settings
    kind = state["kind"]
    body = state.get("body") or {}

    logger.info("validate_request.start", job_id=state["job_id"], kind=kind.value, fields=len(body))

    pairs: list[AssetPair] = []
    video_sources: list[str] = []
    if kind == JobKind.SEQUENCE:
        pairs = collect_asset_pairs(body, settings.required_pair_count)
    elif kind == JobKind.SINGLE:
        pairs = [parse_single_pair(body)]
    else:
        video_sources = parse_video_sources(body, settings.merge_video_count)

    logger.info(
        "validate_request.done",
        job_id=state["job_id"],
        pairs=len(pairs),
        videos=len(video_sources),
    )
    return {"pairs": pairs, "video_sources": video_sources, "status": JobStatus.FETCHING}
