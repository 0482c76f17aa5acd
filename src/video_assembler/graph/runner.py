"""Job orchestration: one compiled graph run per request."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import structlog
from langgraph.graph.state import CompiledStateGraph

from video_assembler.config import Settings
from video_assembler.errors import PipelineError
from video_assembler.graph.context import JobContext
from video_assembler.graph.state import JobState
from video_assembler.models.job import JobKind, JobStatus, TrimResult
from video_assembler.tools.command import CommandRunner
from video_assembler.tools.fetcher import AssetFetcher
from video_assembler.tools.workspace import JobWorkspace

logger = structlog.get_logger()


@dataclass
class CompletedJob:
    """A finished job whose video is ready for delivery.

    The workspace is still alive; whoever sends the file must call
    ``workspace.cleanup()`` afterwards.
    """

    job_id: str
    kind: JobKind
    video_path: Path
    workspace: JobWorkspace
    trim_result: Optional[TrimResult] = None
    status: JobStatus = JobStatus.DELIVERING  # DELIVERED or FAILED once the response ends

    @property
    def attachment_name(self) -> str:
        return self.kind.attachment_name


class JobOrchestrator:
    """Runs validate → fetch → synthesize → assemble/trim for one request.

    Any failure, cancellation included, removes every file the job created
    before the error propagates.
    """

    def __init__(
        self,
        graph: CompiledStateGraph,
        fetcher: AssetFetcher,
        runner: CommandRunner,
        settings: Settings,
    ):
        self._graph = graph
        self._fetcher = fetcher
        self._runner = runner
        self._settings = settings

    async def run(self, kind: JobKind, body: dict[str, Any]) -> CompletedJob:
        """Execute one job.

        Args:
            kind: Which endpoint the request came from.
            body: Decoded JSON request body.

        Returns:
            CompletedJob pointing at the final video inside the job workspace.

        Raises:
            PipelineError: validation, fetch, or any media stage failed.
        """
        workspace = JobWorkspace(Path(self._settings.work_dir))
        ctx = JobContext(
            fetcher=self._fetcher,
            runner=self._runner,
            settings=self._settings,
            workspace=workspace,
        )
        initial_state: JobState = {
            "job_id": workspace.job_id,
            "kind": kind,
            "body": body,
            "pairs": [],
            "video_sources": [],
            "assets": [],
            "segments": [],
            "video_path": None,
            "trim_result": None,
            "status": JobStatus.VALIDATING,
        }
        config = {"configurable": {"job_context": ctx}}

        logger.info("job.start", job_id=workspace.job_id, kind=kind.value)
        try:
            final = await self._graph.ainvoke(initial_state, config=config)
            video_path = final.get("video_path")
            if video_path is None or not Path(video_path).is_file():
                raise PipelineError(f"Job {workspace.job_id} finished without producing a video")
        except PipelineError as exc:
            logger.warning(
                "job.failed",
                job_id=workspace.job_id,
                kind=kind.value,
                status=JobStatus.FAILED.value,
                error_type=type(exc).__name__,
                error=exc.message,
            )
            workspace.cleanup()
            raise
        except BaseException:
            logger.exception("job.aborted", job_id=workspace.job_id, kind=kind.value)
            workspace.cleanup()
            raise

        logger.info(
            "job.done",
            job_id=workspace.job_id,
            kind=kind.value,
            status=final.get("status", JobStatus.DELIVERING).value,
            video=Path(video_path).name,
        )
        return CompletedJob(
            job_id=workspace.job_id,
            kind=kind,
            video_path=Path(video_path),
            workspace=workspace,
            trim_result=final.get("trim_result"),
        )
