"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Per-client session token holder.
"""

from __future__ import annotations


class SessionStore:
    """Holds the bearer token attached to outbound requests."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None

    @property
    def authenticated(self) -> bool:
        return self._token is not None
