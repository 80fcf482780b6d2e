"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/coalescing.py.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")


class RequestCoalescer:
    """
    Deduplicate identical in-flight requests.

    The first caller for a key starts the work as a task; callers arriving
    while it runs await that same task and observe its value or its error.
    The key is released once the task settles, success or failure.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}
        self._lock = asyncio.Lock()

    def in_flight(self, key: str) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    async def run(
        self,
        key: str,
        factory: Callable[[], Awaitable[T]],
        *,
        on_join: Callable[[str], None] | None = None,
    ) -> T:
        async with self._lock:
            task = self._tasks.get(key)
            leader = task is None
            if leader:
                task = asyncio.ensure_future(factory())
                self._tasks[key] = task
                task.add_done_callback(lambda done, k=key: self._release(k, done))

        if not leader and on_join is not None:
            on_join(key)
        return await asyncio.shield(task)

    def _release(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        # Waiters may all be cancelled; mark the error as retrieved.
        if not task.cancelled():
            task.exception()
