"""Job context handed to nodes through the ``configurable`` mapping."""

from __future__ import annotations

from dataclasses import dataclass

from langchain_core.runnables import RunnableConfig

from video_assembler.config import Settings
from video_assembler.tools.command import CommandRunner
from video_assembler.tools.fetcher import AssetFetcher
from video_assembler.tools.ffmpeg import EncodingPolicy
from video_assembler.tools.workspace import JobWorkspace


@dataclass
class JobContext:
    fetcher: AssetFetcher
    runner: CommandRunner
    settings: Settings
    workspace: JobWorkspace

    @property
    def encoding(self) -> EncodingPolicy:
        return EncodingPolicy.from_settings(self.settings)


def get_job_context(config: RunnableConfig) -> JobContext:
    try:
        return config["configurable"]["job_context"]
    except KeyError as exc:
        raise RuntimeError("graph invoked without a job_context") from exc
