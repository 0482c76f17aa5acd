"""
Pytest configuration and shared fixtures for video-assembler tests
"""

from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest

from video_assembler.config import Settings
from video_assembler.errors import CommandError
from video_assembler.graph.builder import build_graph
from video_assembler.graph.runner import JobOrchestrator
from video_assembler.tools.fetcher import AssetFetcher


# ============================================
# Fake transcoder
# ============================================


class FakeTranscoder:
    """Stands in for ffmpeg/ffprobe.

    ffmpeg calls write a few bytes to their last argument (the output path),
    ffprobe calls print ``duration``. Concat manifests are captured before
    the job workspace is cleaned.
    """

    def __init__(self, duration: str = "10.000000\n", fail_when: Optional[Callable[[list[str]], bool]] = None):
        self.duration = duration
        self.fail_when = fail_when
        self.calls: list[list[str]] = []
        self.manifests: list[str] = []

    async def __call__(self, argv) -> str:
        args = [str(a) for a in argv]
        self.calls.append(args)

        if self.fail_when and self.fail_when(args):
            raise CommandError(args, "exited with status 1", "fake transcoder output\nInvalid data found")

        if args[0].endswith("ffprobe"):
            return self.duration
        if "-version" in args:
            return "ffmpeg version 6.1.1 Copyright (c) 2000-2023 the FFmpeg developers\n"
        if "concat" in args:
            self.manifests.append(Path(args[args.index("-i") + 1]).read_text())

        Path(args[-1]).write_bytes(b"\x00\x00\x00\x18ftypmp42")
        return ""

    def invocations(self, keyword: str) -> list[list[str]]:
        return [c for c in self.calls if keyword in c]


@pytest.fixture
def transcoder():
    return FakeTranscoder()


# ============================================
# Remote assets
# ============================================


class FakeRemote:
    """httpx MockTransport handler serving bytes for any URL unless told otherwise."""

    def __init__(self):
        self.status_for: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        status = self.status_for.get(url, 200)
        if status != 200:
            return httpx.Response(status, text="nope")
        return httpx.Response(
            200,
            content=b"media:" + url.encode(),
            headers={"content-type": "application/octet-stream"},
        )


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def http_client(remote):
    # MockTransport holds no sockets, so the client needs no explicit close
    return httpx.AsyncClient(transport=httpx.MockTransport(remote))


@pytest.fixture
def fetcher(http_client):
    return AssetFetcher(http_client)


# ============================================
# Configuration
# ============================================


@pytest.fixture
def work_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def app_settings(work_dir):
    return Settings(work_dir=str(work_dir), merge_video_count=3)


@pytest.fixture
def orchestrator(fetcher, transcoder, app_settings):
    return JobOrchestrator(build_graph(), fetcher, transcoder, app_settings)


def sequence_body(count: int) -> dict:
    body = {}
    for i in range(1, count + 1):
        body[f"imageURL{i}"] = f"https://cdn.example.com/img{i}.png"
        body[f"audioURL{i}"] = f"https://cdn.example.com/audio{i}.mp3"
    return body
