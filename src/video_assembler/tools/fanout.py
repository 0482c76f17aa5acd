"""Bounded concurrent execution that keeps input order."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

T = TypeVar("T")


async def gather_bounded(awaitables: Iterable[Awaitable[T]], limit: int) -> list[T]:
    """Await all *awaitables* with at most *limit* running at once.

    The first failure cancels everything still running or queued. Cancelled
    tasks are awaited before this raises, so no work is still writing files
    when the caller starts cleaning up. When several tasks failed, the first
    in input order is raised.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _with_limit(aw: Awaitable[T]) -> T:
        try:
            async with semaphore:
                return await aw
        finally:
            # a queued coroutine cancelled before it started is never awaited
            if asyncio.iscoroutine(aw):
                aw.close()

    tasks = [asyncio.ensure_future(_with_limit(aw)) for aw in awaitables]
    if not tasks:
        return []

    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        # also reached when the caller itself is cancelled
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for task in tasks:
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()
    return [task.result() for task in tasks]
