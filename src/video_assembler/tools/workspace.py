"""Job-scoped ownership of temporary files."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Optional

import structlog

logger = structlog.get_logger()


class JobWorkspace:
    """Owns every temporary path one job creates.

    Paths are handed out by :meth:`path_for` and registered before the file
    exists, so partial downloads and half-written outputs are still removed by
    :meth:`cleanup`. The job directory is created on first use.
    """

    def __init__(self, work_dir: Path, job_id: Optional[str] = None):
        self.job_id = job_id or uuid.uuid4().hex
        self.root = Path(work_dir) / self.job_id
        self._paths: list[Path] = []
        self._cleaned = False

    def path_for(self, name: str) -> Path:
        if self._cleaned:
            raise RuntimeError(f"workspace {self.job_id} already cleaned up")
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / name
        if path not in self._paths:
            self._paths.append(path)
        return path

    @property
    def owned(self) -> list[Path]:
        return list(self._paths)

    @property
    def cleaned(self) -> bool:
        return self._cleaned

    def cleanup(self) -> None:
        """Delete all registered files and the job directory. Never raises."""
        if self._cleaned:
            return
        self._cleaned = True

        removed = 0
        for path in self._paths:
            try:
                if path.exists():
                    path.unlink()
                    removed += 1
            except OSError as exc:
                logger.warning("workspace.unlink_failed", job_id=self.job_id, path=str(path), error=str(exc))

        try:
            if self.root.exists():
                self.root.rmdir()
        except OSError as exc:
            logger.warning("workspace.rmdir_failed", job_id=self.job_id, path=str(self.root), error=str(exc))

        logger.debug("workspace.cleaned", job_id=self.job_id, removed=removed)
