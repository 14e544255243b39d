"""Fire-and-forget task dispatch with a logging observer."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from loguru import logger

type FailureHook = Callable[[str, BaseException], None]


class BackgroundTasks:
    """Schedule coroutines without awaiting them.

    The set keeps strong references so the event loop cannot garbage-collect
    pending tasks. Completion is only observed to log failures; nothing is
    propagated back to whoever spawned the task.
    """

    def __init__(self, on_failure: FailureHook | None = None) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._on_failure = on_failure

    def spawn(self, coro: Coroutine[Any, Any, Any], label: str) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=label)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task {task.get_name()} failed: {exc}")
            if self._on_failure is not None:
                self._on_failure(task.get_name(), exc)
            return
        logger.debug(f"Background task {task.get_name()} completed")

    async def drain(self) -> None:
        """Wait for every pending task (shutdown and tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def __len__(self) -> int:
        return len(self._tasks)
