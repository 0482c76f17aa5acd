"""Pydantic models for fetched assets and synthesized segments."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class AssetKind(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"

    @property
    def default_suffix(self) -> str:
        return {"image": ".png", "audio": ".mp3", "video": ".mp4"}[self.value]


class AssetPair(BaseModel):
    index: int = Field(ge=1, description="1-based position in the request; defines output order")
    image_source: str
    audio_source: str


class LocalAsset(BaseModel):
    source_uri: str
    local_path: Path
    kind: AssetKind
    index: int = Field(ge=1)


class Segment(BaseModel):
    index: int = Field(ge=1)
    source_pair: AssetPair
    output_path: Path
