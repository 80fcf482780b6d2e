"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Request/response value types shared by the client, transports and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """One fully-built outbound request handed to a transport."""

    method: HttpMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    timeout_s: float | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return _lookup(self.headers, name)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Raw transport response. Non-2xx statuses are values, not errors."""

    status: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return _lookup(self.headers, name)


@dataclass(frozen=True, slots=True)
class GetOptions:
    """
    Per-call GET overrides.

    Attributes:
        cache_key: Explicit cache key used instead of the canonical URL.
        ttl_s: Freshness window for this result instead of the client default.
    """

    cache_key: str | None = None
    ttl_s: float | None = None


def _lookup(headers: dict[str, str], name: str) -> str | None:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None
