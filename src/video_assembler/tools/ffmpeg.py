"""Shared ffmpeg/ffprobe argument building and small probe helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from video_assembler.config import Settings
from video_assembler.tools.command import CommandRunner

logger = structlog.get_logger()


@dataclass(frozen=True)
class EncodingPolicy:
    """Codec settings used whenever the pipeline encodes (synthesis, re-encode concat)."""

    video_codec: str = "libx264"
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"
    pixel_format: str = "yuv420p"

    @classmethod
    def from_settings(cls, settings: Settings) -> "EncodingPolicy":
        return cls(
            video_codec=settings.video_codec,
            audio_codec=settings.audio_codec,
            audio_bitrate=settings.audio_bitrate,
            pixel_format=settings.pixel_format,
        )

    def output_args(self) -> list[str]:
        return [
            "-c:v", self.video_codec,
            "-pix_fmt", self.pixel_format,
            "-c:a", self.audio_codec,
            "-b:a", self.audio_bitrate,
        ]


def build_probe_duration_command(path: Path, ffprobe_binary: str = "ffprobe") -> list[str]:
    return [
        ffprobe_binary,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]


def parse_duration(output: str) -> float:
    """Parse the single seconds value printed by ffprobe.

    Raises:
        ValueError: empty output, ``N/A``, or anything that is not one number.
    """
    text = output.strip()
    if not text:
        raise ValueError("probe returned no output")
    duration = float(text)
    if duration != duration or duration < 0:  # NaN or negative
        raise ValueError(f"probe returned an invalid duration: {text!r}")
    return duration


async def probe_duration(path: Path, runner: CommandRunner, ffprobe_binary: str = "ffprobe") -> float:
    """Return the container duration of *path* in seconds."""
    output = await runner(build_probe_duration_command(path, ffprobe_binary))
    duration = parse_duration(output)
    logger.debug("ffprobe.duration", path=str(path), duration=duration)
    return duration


async def transcoder_version(runner: CommandRunner, ffmpeg_binary: str = "ffmpeg") -> str:
    """Return the ``ffmpeg -version`` banner."""
    return await runner([ffmpeg_binary, "-version"])
