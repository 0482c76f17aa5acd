"""Cut a fixed tail off a video without re-encoding."""

from __future__ import annotations

from pathlib import Path

import structlog

from video_assembler.errors import CommandError, TrimError
from video_assembler.models.job import TrimResult, TrimStatus
from video_assembler.tools.command import CommandRunner
from video_assembler.tools.ffmpeg import probe_duration

logger = structlog.get_logger()


def build_trim_command(
    input_path: Path,
    output_path: Path,
    duration: float,
    ffmpeg_binary: str = "ffmpeg",
) -> list[str]:
    return [
        ffmpeg_binary,
        "-y",
        "-i", str(input_path),
        "-t", f"{duration:.3f}",
        "-c", "copy",
        str(output_path),
    ]


async def trim(
    input_path: Path,
    trim_tail_seconds: float,
    output_path: Path,
    runner: CommandRunner,
    *,
    ffmpeg_binary: str = "ffmpeg",
    ffprobe_binary: str = "ffprobe",
) -> TrimResult:
    """Drop the last *trim_tail_seconds* of *input_path*.

    Stream copy cuts on keyframes, so the result may run slightly longer than
    requested. A video no longer than the tail is returned untouched.

    Returns:
        TrimResult whose ``video_path`` is the job's current video: the input
        when skipped, the output (with the input deleted) when trimmed.

    Raises:
        TrimError: the probe failed or printed something unparseable, or the
            cut itself failed.
    """
    try:
        original = await probe_duration(input_path, runner, ffprobe_binary)
    except CommandError as exc:
        raise TrimError(f"Could not probe {input_path.name}: {exc}", cause=exc) from exc
    except ValueError as exc:
        raise TrimError(f"Could not read duration of {input_path.name}: {exc}") from exc

    # rounded to the precision passed to -t so a sub-millisecond remainder is skipped
    new_duration = round(original - trim_tail_seconds, 3)
    if new_duration <= 0:
        logger.info("trim.skipped", input=input_path.name, duration=original, tail=trim_tail_seconds)
        return TrimResult(TrimStatus.SKIPPED, input_path, original)

    cmd = build_trim_command(input_path, output_path, new_duration, ffmpeg_binary)
    try:
        await runner(cmd)
    except CommandError as exc:
        raise TrimError(f"Could not trim {input_path.name}: {exc}", cause=exc) from exc

    input_path.unlink(missing_ok=True)
    logger.info("trim.done", output=output_path.name, original=original, new=new_duration)
    return TrimResult(TrimStatus.TRIMMED, output_path, original, new_duration)
