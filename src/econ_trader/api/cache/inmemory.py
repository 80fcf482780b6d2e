"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from .base import CacheEntry, resource_path

logger = logging.getLogger("econ_trader.api.cache")


class ResponseCache:
    """
    Process-local TTL cache for GET results.

    Expiry is checked lazily on read; nothing runs on a timer. When the cache
    is disabled every operation is a no-op and every lookup misses.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        default_ttl_s: float = 30.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.enabled = enabled
        self.default_ttl_s = default_ttl_s
        self._clock = clock
        self._rows: dict[str, CacheEntry[Any]] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def keys(self) -> list[str]:
        return list(self._rows)

    def get(self, key: str) -> Any | None:
        """Return the fresh value for ``key`` or ``None``, evicting stale rows."""
        if not self.enabled:
            return None
        row = self._rows.get(key)
        if row is None:
            logger.debug("cache miss key=%s", key)
            return None
        if row.is_expired(self._clock()):
            self._rows.pop(key, None)
            logger.debug("cache entry expired key=%s", key)
            return None
        logger.debug("cache hit key=%s", key)
        return row.data

    def has(self, key: str) -> bool:
        if not self.enabled:
            return False
        row = self._rows.get(key)
        if row is None:
            return False
        if row.is_expired(self._clock()):
            self._rows.pop(key, None)
            return False
        return True

    def set(self, key: str, value: Any, *, ttl_s: float | None = None) -> None:
        if not self.enabled:
            return
        self._rows[key] = CacheEntry(
            data=value,
            timestamp=self._clock(),
            ttl_s=self.default_ttl_s if ttl_s is None else ttl_s,
        )

    def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def clear(self) -> None:
        self._rows.clear()

    def clear_expired(self) -> int:
        """Evict every expired row and return how many were dropped."""
        now = self._clock()
        expired = [key for key, row in self._rows.items() if row.is_expired(now)]
        for key in expired:
            self._rows.pop(key, None)
        return len(expired)

    def remaining_ttl(self, key: str) -> float:
        """Seconds of freshness left for ``key``; ``0.0`` when absent or stale."""
        row = self._rows.get(key)
        if row is None:
            return 0.0
        return row.remaining_s(self._clock())

    def invalidate_related(self, endpoint: str) -> int:
        """Drop every key containing the endpoint's resource path (substring match)."""
        if not self.enabled:
            return 0
        needle = resource_path(endpoint)
        related = [key for key in self._rows if needle in key]
        for key in related:
            self._rows.pop(key, None)
        logger.debug(
            "invalidated related cache entries endpoint=%s resource=%s count=%d",
            endpoint,
            needle,
            len(related),
        )
        return len(related)
