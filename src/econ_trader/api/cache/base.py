"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """One cached GET result with its freshness metadata."""

    data: T
    timestamp: float
    ttl_s: float

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl_s

    def remaining_s(self, now: float) -> float:
        return max(0.0, self.ttl_s - (now - self.timestamp))


def resource_path(endpoint: str) -> str:
    """
    Coarse invalidation unit of an endpoint.

    Keeps everything up to the first path segment: ``/accounts/123`` becomes
    ``/accounts``.
    """
    return "/".join(endpoint.split("/")[:2])
