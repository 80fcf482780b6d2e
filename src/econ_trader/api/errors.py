"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy raised by the API client pipeline.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """
    Structured failure raised by ``BaseApiClient``.

    Attributes:
        status: HTTP status, ``408`` for timeouts, ``422`` for response
            validation failures and ``0`` for transport-level failures.
        status_text: Reason phrase or underlying error message.
        data: Optional parsed payload associated with the failure.
    """

    def __init__(self, status: int, status_text: str, data: Any = None) -> None:
        super().__init__(f"API Error: {status} {status_text}")
        self.status = status
        self.status_text = status_text
        self.data = data


class ApiTimeoutError(ApiError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(self, status_text: str = "Request Timeout") -> None:
        super().__init__(408, status_text)


class ApiTransportError(ApiError):
    """Raised for network-level failures (DNS, refused connection, bad body)."""

    def __init__(self, message: str) -> None:
        super().__init__(0, message)


class ApiHttpError(ApiError):
    """Raised when the server answers with a non-success status."""


class ApiValidationError(ApiError):
    """Raised when a response body fails its declared schema."""

    def __init__(self, received: Any, error: str) -> None:
        super().__init__(
            422,
            "Invalid response format",
            {"received": received, "error": error},
        )

    @property
    def received(self) -> Any:
        return self.data["received"]


class ApiConfigurationError(ValueError):
    """Raised when client settings are invalid."""
