"""FastAPI dependency injection — graph instance, fetcher and command runner."""

from __future__ import annotations

from functools import lru_cache, partial

from fastapi import Depends, Request

from video_assembler.config import settings
from video_assembler.graph.builder import build_graph
from video_assembler.graph.runner import JobOrchestrator
from video_assembler.tools.command import CommandRunner, run_command
from video_assembler.tools.fetcher import AssetFetcher


@lru_cache(maxsize=1)
def get_compiled_graph():
    """Return the compiled job graph; built once per process."""
    return build_graph()


def get_fetcher(request: Request) -> AssetFetcher:
    """Return the fetcher created in the app lifespan."""
    return request.app.state.fetcher


def get_command_runner() -> CommandRunner:
    return partial(run_command, timeout=settings.command_timeout_sec)


def get_orchestrator(
    fetcher: AssetFetcher = Depends(get_fetcher),
    runner: CommandRunner = Depends(get_command_runner),
) -> JobOrchestrator:
    return JobOrchestrator(get_compiled_graph(), fetcher, runner, settings)
