"""External process execution with combined output capture."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from os import PathLike
from typing import Optional, Union

import structlog

from video_assembler.errors import CommandError

logger = structlog.get_logger()

Arg = Union[str, PathLike]

# Stages only see this signature; timeouts and cwd are bound by the caller.
CommandRunner = Callable[[Sequence[Arg]], Awaitable[str]]


async def run_command(
    argv: Sequence[Arg],
    *,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """Run one process to completion and return its stdout+stderr as text.

    Arguments are passed straight to ``exec``; nothing goes through a shell.

    Raises:
        CommandError: launch failure, non-zero exit, or timeout. The combined
            output collected so far is attached to the error.
    """
    args = [str(a) for a in argv]
    if not args:
        raise CommandError(args, "is not a command")

    logger.debug("command.start", executable=args[0], argc=len(args))

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=cwd,
        )
    except OSError as exc:
        raise CommandError(args, f"could not be launched: {exc}") from exc

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(process)
        logger.warning("command.timeout", executable=args[0], timeout=timeout)
        raise CommandError(args, f"timed out after {timeout}s") from None
    except asyncio.CancelledError:
        await _kill(process)
        raise

    output = stdout.decode("utf-8", errors="replace") if stdout else ""

    if process.returncode != 0:
        error = CommandError(args, f"exited with status {process.returncode}", output)
        logger.warning(
            "command.failed",
            executable=args[0],
            returncode=process.returncode,
            output_tail=error.output_tail,
        )
        raise error

    logger.debug("command.done", executable=args[0], output_len=len(output))
    return output


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()
