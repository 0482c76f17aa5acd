"""
Tests for job-scoped temporary file ownership
"""

import asyncio

import pytest

from video_assembler.tools.fanout import gather_bounded
from video_assembler.tools.workspace import JobWorkspace


class TestJobWorkspace:

    def test_directory_created_lazily(self, work_dir):
        ws = JobWorkspace(work_dir)
        assert not ws.root.exists()
        ws.path_for("image1.png")
        assert ws.root.is_dir()

    def test_jobs_do_not_share_paths(self, work_dir):
        a, b = JobWorkspace(work_dir), JobWorkspace(work_dir)
        assert a.job_id != b.job_id
        assert a.path_for("list.txt") != b.path_for("list.txt")

    def test_cleanup_removes_registered_and_partial_files(self, work_dir):
        ws = JobWorkspace(work_dir)
        written = ws.path_for("segment1.mp4")
        written.write_bytes(b"x")
        ws.path_for("never_written.mp4")

        ws.cleanup()

        assert not written.exists()
        assert not ws.root.exists()
        assert list(work_dir.iterdir()) == []

    def test_cleanup_is_idempotent(self, work_dir):
        ws = JobWorkspace(work_dir)
        ws.path_for("a.png").write_bytes(b"x")
        ws.cleanup()
        ws.cleanup()
        assert ws.cleaned

    def test_cleanup_without_any_path(self, work_dir):
        JobWorkspace(work_dir).cleanup()
        assert list(work_dir.iterdir()) == []

    def test_no_paths_after_cleanup(self, work_dir):
        ws = JobWorkspace(work_dir)
        ws.cleanup()
        with pytest.raises(RuntimeError):
            ws.path_for("late.mp4")

    def test_registration_deduplicated(self, work_dir):
        ws = JobWorkspace(work_dir)
        ws.path_for("final_video.mp4")
        ws.path_for("final_video.mp4")
        assert len(ws.owned) == 1


class TestGatherBounded:

    @pytest.mark.asyncio
    async def test_order_and_limit(self):
        running = 0
        peak = 0

        async def work(i):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01 * (5 - i))
            running -= 1
            return i

        assert await gather_bounded((work(i) for i in range(5)), 2) == [0, 1, 2, 3, 4]
        assert peak <= 2

    @pytest.mark.asyncio
    async def test_failure_cancels_running_siblings(self):
        finished = []
        cancelled = []

        async def work(i):
            try:
                await asyncio.sleep(0.01 if i < 2 else 5)
            except asyncio.CancelledError:
                cancelled.append(i)
                raise
            finished.append(i)
            if i == 1:
                raise ValueError(f"failed {i}")
            return i

        loop = asyncio.get_running_loop()
        started = loop.time()
        with pytest.raises(ValueError, match="failed 1"):
            await gather_bounded([work(i) for i in range(4)], 4)

        assert loop.time() - started < 1
        assert sorted(finished) == [0, 1]
        # cancellation has been delivered before the error surfaces
        assert sorted(cancelled) == [2, 3]

    @pytest.mark.asyncio
    async def test_failure_stops_queued_work(self):
        done = []

        async def fail():
            raise ValueError("first")

        async def slow(i):
            await asyncio.sleep(0.05)
            done.append(i)
            return i

        with pytest.raises(ValueError, match="first"):
            await gather_bounded([fail()] + [slow(i) for i in range(4)], 1)
        await asyncio.sleep(0.1)
        assert done == []

    @pytest.mark.asyncio
    async def test_simultaneous_failures_report_first_in_input_order(self):
        async def work(i):
            await asyncio.sleep(0)
            raise ValueError(f"failed {i}")

        with pytest.raises(ValueError, match="failed 0"):
            await gather_bounded([work(i) for i in range(3)], 3)

    @pytest.mark.asyncio
    async def test_empty_input(self):
        assert await gather_bounded([], 2) == []
