"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/pacing.py.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable


async def hold_until_elapsed(
    started_at: float,
    floor_s: float,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> float:
    """
    Sleep until at least ``floor_s`` has passed since ``started_at``.

    Keeps very fast responses from flickering loading states. Returns the
    time actually waited.
    """
    remaining = floor_s - (clock() - started_at)
    if remaining <= 0:
        return 0.0
    await sleep(remaining)
    return remaining
