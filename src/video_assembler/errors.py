"""Failure taxonomy for video jobs.

Every error that aborts a job derives from ``PipelineError``. The HTTP layer
maps ``ValidationError`` to 400 and everything else to 500; ``DeliveryError``
is only ever logged because the response is already on the wire.
"""

from __future__ import annotations

from typing import Optional, Sequence

_OUTPUT_TAIL_CHARS = 2000


class PipelineError(Exception):
    """Base class for failures that abort a job."""

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(PipelineError):
    """Request body is missing required fields. Raised before any side effect."""

    def __init__(self, message: str, missing_fields: Sequence[str] = ()):
        super().__init__(message)
        self.missing_fields = list(missing_fields)


class FetchError(PipelineError):
    """Remote asset could not be retrieved."""

    def __init__(self, url: str, status: Optional[int] = None, message: str = ""):
        self.url = url
        self.status = status
        self.reason = message
        detail = f"HTTP {status}" if status is not None else "request failed"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(f"Download failed for {url} ({detail})")


class CommandError(PipelineError):
    """External process exited non-zero, timed out, or could not be launched."""

    def __init__(self, argv: Sequence[str], exit_detail: str, output: str = ""):
        self.argv = list(argv)
        self.exit_detail = exit_detail
        self.output = output
        executable = self.argv[0] if self.argv else "<empty command>"
        super().__init__(f"{executable} {exit_detail}")

    @property
    def output_tail(self) -> str:
        """Last part of the combined output, enough for a log line."""
        return self.output[-_OUTPUT_TAIL_CHARS:]


class StageError(PipelineError):
    """A media stage failed; ``cause`` holds the failed invocation when there was one."""

    stage = "stage"

    def __init__(self, message: str, cause: Optional[CommandError] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def output(self) -> str:
        return self.cause.output if self.cause else ""


class SynthesisError(StageError):
    stage = "synthesize"


class AssembleError(StageError):
    stage = "assemble"


class TrimError(StageError):
    stage = "trim"


class DeliveryError(PipelineError):
    """Sending the finished file to the client failed."""


class CredentialsError(Exception):
    """Service-account credentials could not be loaded or authorized at startup."""
