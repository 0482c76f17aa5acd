"""Streaming the finished video back and releasing the job's files."""

from __future__ import annotations

import structlog
from starlette.responses import FileResponse
from starlette.types import Receive, Scope, Send

from video_assembler.errors import DeliveryError
from video_assembler.graph.runner import CompletedJob
from video_assembler.models.job import JobStatus

logger = structlog.get_logger()


class JobFileResponse(FileResponse):
    """File attachment that cleans up its job's workspace once sent.

    Cleanup runs whether or not the transfer succeeds. A failed transfer is
    logged as a delivery error; the response has already started, so there is
    nothing left to tell the client.
    """

    def __init__(self, job: CompletedJob):
        super().__init__(
            job.video_path,
            media_type="video/mp4",
            filename=job.attachment_name,
        )
        self.job = job

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except Exception as exc:
            self.job.status = JobStatus.FAILED
            error = DeliveryError(f"Sending {self.job.attachment_name} failed: {exc}")
            logger.warning(
                "delivery.failed",
                job_id=self.job.job_id,
                status=self.job.status.value,
                error_type=type(error).__name__,
                cause_type=type(exc).__name__,
                error=error.message,
            )
        else:
            self.job.status = JobStatus.DELIVERED
            logger.info(
                "delivery.done",
                job_id=self.job.job_id,
                status=self.job.status.value,
                filename=self.job.attachment_name,
            )
        finally:
            self.job.workspace.cleanup()
