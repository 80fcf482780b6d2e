"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Transport layer performing the actual HTTP exchange.
"""

from __future__ import annotations

import asyncio
import urllib.error
import urllib.request
from typing import Protocol

from .types import HttpRequest, HttpResponse


class HttpTransport(Protocol):
    """
    Network boundary used by ``BaseApiClient``.

    Implementations return non-2xx responses as values and raise only for
    transport-level failures.
    """

    async def send(self, request: HttpRequest) -> HttpResponse: ...


class UrllibTransport:
    """Stdlib HTTP transport; the blocking call runs in a worker thread."""

    async def send(self, request: HttpRequest) -> HttpResponse:
        return await asyncio.to_thread(self.http_send, request)

    def http_send(self, request: HttpRequest) -> HttpResponse:
        req = urllib.request.Request(
            request.url,
            data=request.body,
            method=request.method,
            headers=dict(request.headers),
        )
        try:
            with urllib.request.urlopen(req, timeout=request.timeout_s) as resp:  # noqa: S310
                return HttpResponse(
                    status=resp.status,
                    reason=resp.reason or "",
                    headers=dict(resp.headers.items()),
                    body=resp.read(),
                )
        except urllib.error.HTTPError as e:
            try:
                body = e.read()
            except OSError:
                body = b""
            return HttpResponse(
                status=e.code,
                reason=str(e.reason or ""),
                headers=dict(e.headers.items()) if e.headers is not None else {},
                body=body,
            )
