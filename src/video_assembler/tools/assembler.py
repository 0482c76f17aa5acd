"""Ordered concatenation of segments via the ffmpeg concat demuxer."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Sequence

import structlog

from video_assembler.errors import AssembleError, CommandError
from video_assembler.tools.command import CommandRunner
from video_assembler.tools.ffmpeg import EncodingPolicy

logger = structlog.get_logger()


class AssembleMode(str, Enum):
    COPY = "copy"  # segments share one encoding; no quality loss
    REENCODE = "reencode"  # independently authored clips; timestamps rebuilt


def _quote(path: Path) -> str:
    return "'" + str(path).replace("'", "'\\''") + "'"


def write_manifest(segment_paths: Sequence[Path], manifest_path: Path) -> Path:
    """Write one ``file '<path>'`` line per segment, in order."""
    lines = [f"file {_quote(p.resolve())}" for p in segment_paths]
    manifest_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return manifest_path


def build_concat_command(
    manifest_path: Path,
    output_path: Path,
    mode: AssembleMode,
    encoding: EncodingPolicy,
    ffmpeg_binary: str = "ffmpeg",
) -> list[str]:
    if mode == AssembleMode.COPY:
        return [
            ffmpeg_binary,
            "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", str(manifest_path),
            "-c", "copy",
            str(output_path),
        ]
    return [
        ffmpeg_binary,
        "-y",
        "-fflags", "+genpts",
        "-f", "concat",
        "-safe", "0",
        "-i", str(manifest_path),
        *encoding.output_args(),
        "-af", "aresample=async=1",
        str(output_path),
    ]


async def assemble(
    segment_paths: Sequence[Path],
    output_path: Path,
    manifest_path: Path,
    runner: CommandRunner,
    *,
    mode: AssembleMode = AssembleMode.COPY,
    encoding: EncodingPolicy = EncodingPolicy(),
    ffmpeg_binary: str = "ffmpeg",
) -> Path:
    """Concatenate *segment_paths* into *output_path*, preserving order.

    Args:
        segment_paths: Ordered segment files; all must exist and be non-empty.
        output_path: Destination video file.
        manifest_path: Where to write the concat list (job-owned).
        runner: Command runner used for the ffmpeg invocation.
        mode: COPY for uniform segments, REENCODE for heterogeneous clips.

    Returns:
        The output_path on success.

    Raises:
        AssembleError: no segments, a missing/empty segment, or ffmpeg failed.
    """
    if not segment_paths:
        raise AssembleError("No segments to assemble")
    for path in segment_paths:
        if not path.is_file() or path.stat().st_size == 0:
            raise AssembleError(f"Segment missing or empty: {path.name}")

    write_manifest(segment_paths, manifest_path)
    cmd = build_concat_command(manifest_path, output_path, mode, encoding, ffmpeg_binary)

    logger.info("assemble.start", segments=len(segment_paths), mode=mode.value, output=output_path.name)
    try:
        await runner(cmd)
    except CommandError as exc:
        raise AssembleError(f"Could not assemble {output_path.name}: {exc}", cause=exc) from exc

    logger.info("assemble.done", output=output_path.name)
    return output_path
