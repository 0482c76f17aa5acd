"""Still image + audio track → one video segment."""

from __future__ import annotations

from pathlib import Path

import structlog

from video_assembler.errors import CommandError, SynthesisError
from video_assembler.tools.command import CommandRunner
from video_assembler.tools.ffmpeg import EncodingPolicy

logger = structlog.get_logger()

# libx264 with 4:2:0 chroma needs even width and height
_EVEN_DIMENSIONS = "scale=trunc(iw/2)*2:trunc(ih/2)*2"


def build_synthesis_command(
    image_path: Path,
    audio_path: Path,
    output_path: Path,
    encoding: EncodingPolicy,
    ffmpeg_binary: str = "ffmpeg",
) -> list[str]:
    """The image is looped forever; ``-shortest`` stops the output when the audio ends."""
    return [
        ffmpeg_binary,
        "-y",
        "-loop", "1",
        "-i", str(image_path),
        "-i", str(audio_path),
        *encoding.output_args(),
        "-vf", _EVEN_DIMENSIONS,
        "-shortest",
        str(output_path),
    ]


async def synthesize(
    image_path: Path,
    audio_path: Path,
    output_path: Path,
    runner: CommandRunner,
    *,
    encoding: EncodingPolicy = EncodingPolicy(),
    ffmpeg_binary: str = "ffmpeg",
) -> Path:
    """Render *output_path* showing *image_path* for the length of *audio_path*.

    Returns:
        The output_path on success.

    Raises:
        SynthesisError: an input is missing or empty, or the transcoder failed.
    """
    for path in (image_path, audio_path):
        if not path.is_file() or path.stat().st_size == 0:
            raise SynthesisError(f"Input file missing or empty: {path.name}")

    cmd = build_synthesis_command(image_path, audio_path, output_path, encoding, ffmpeg_binary)

    logger.info("synthesize.start", image=image_path.name, audio=audio_path.name, output=output_path.name)
    try:
        await runner(cmd)
    except CommandError as exc:
        raise SynthesisError(f"Could not create segment {output_path.name}: {exc}", cause=exc) from exc

    logger.info("synthesize.done", output=output_path.name)
    return output_path
