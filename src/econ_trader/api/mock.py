"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-memory mock backend.

Handlers are registered per ``(method, path)`` and receive the request plus
an explicit ``MockStore``. Their return values are wrapped in the
``{"success": true, "data": ...}`` envelope the real backend uses. Nothing is
persisted; state lives only in the injected store.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlsplit

from .nonce import NONCE_HEADER, TIMESTAMP_HEADER, UNIQ_HEADER, verify_nonce
from .types import HttpRequest, HttpResponse


class MockHttpError(Exception):
    """Raised by handlers to answer with a non-success status."""

    def __init__(self, status: int, message: str, *, reason: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.reason = reason


@dataclass(slots=True)
class MockStore:
    """Mutable backend state, keyed by collection name."""

    collections: dict[str, Any] = field(default_factory=dict)

    def collection(self, name: str, default: Any = None) -> Any:
        if name not in self.collections:
            self.collections[name] = {} if default is None else default
        return self.collections[name]

    def reset(self) -> None:
        self.collections.clear()


@dataclass(frozen=True, slots=True)
class MockRequest:
    """Decoded view of an ``HttpRequest`` handed to handlers."""

    method: str
    path: str
    query: dict[str, list[str]]
    headers: dict[str, str]
    json: Any


Handler = Callable[[MockRequest, MockStore], Awaitable[Any]]

_REASONS = {
    200: "OK",
    204: "No Content",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    409: "Conflict",
    500: "Internal Server Error",
}


class MockTransport:
    """
    ``HttpTransport`` backed by in-process route handlers.

    Attributes:
        store: Backend state shared by all handlers.
        latency_s: Simulated network latency per request.
        verify_nonces: Reject requests whose nonce headers do not verify.
        calls: Every request received, in arrival order.
    """

    def __init__(
        self,
        *,
        store: MockStore | None = None,
        latency_s: float = 0.0,
        verify_nonces: bool = False,
    ) -> None:
        self.store = store or MockStore()
        self.latency_s = latency_s
        self.verify_nonces = verify_nonces
        self.calls: list[HttpRequest] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def route(self, method: str, path: str) -> Callable[[Handler], Handler]:
        """Decorator registering ``handler`` for ``method`` + exact ``path``."""

        def _register(handler: Handler) -> Handler:
            self.add_route(method, path, handler)
            return handler

        return _register

    def add_route(self, method: str, path: str, handler: Handler) -> None:
        self._routes[(method.upper(), path)] = handler

    def reset(self) -> None:
        self.calls.clear()
        self.store.reset()

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.calls.append(request)
        if self.latency_s > 0:
            await asyncio.sleep(self.latency_s)

        parts = urlsplit(request.url)
        if self.verify_nonces and not _nonce_ok(request):
            return _envelope(401, {"success": False, "message": "invalid nonce"})

        handler = self._routes.get((request.method, parts.path))
        if handler is None:
            return _envelope(404, {"success": False, "message": f"no route {parts.path}"})

        decoded = MockRequest(
            method=request.method,
            path=parts.path,
            query=parse_qs(parts.query),
            headers=dict(request.headers),
            json=json.loads(request.body) if request.body else None,
        )
        try:
            result = await handler(decoded, self.store)
        except MockHttpError as e:
            return _envelope(
                e.status,
                {"success": False, "message": e.message},
                reason=e.reason,
            )
        if result is None:
            return HttpResponse(status=204, reason=_REASONS[204])
        return _envelope(200, {"success": True, "data": result})


def _envelope(status: int, payload: Any, *, reason: str = "") -> HttpResponse:
    body = json.dumps(payload).encode("utf-8")
    return HttpResponse(
        status=status,
        reason=reason or _REASONS.get(status, ""),
        headers={
            "Content-Type": "application/json; charset=utf-8",
            "Content-Length": str(len(body)),
        },
        body=body,
    )


def _nonce_ok(request: HttpRequest) -> bool:
    return verify_nonce(
        request.header(NONCE_HEADER) or "",
        request.header(TIMESTAMP_HEADER) or "",
        request.header(UNIQ_HEADER) or "",
    )
