"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: api/__init__.py.
"""

from .cache import CacheEntry, ResponseCache, resource_path
from .client import BaseApiClient, parse_response
from .errors import (
    ApiConfigurationError,
    ApiError,
    ApiHttpError,
    ApiTimeoutError,
    ApiTransportError,
    ApiValidationError,
)
from .mock import MockHttpError, MockRequest, MockStore, MockTransport
from .nonce import NonceGenerator, generate_nonce, verify_nonce
from .session import SessionStore
from .settings import ApiSettings
from .transport import HttpTransport, UrllibTransport
from .types import GetOptions, HttpRequest, HttpResponse
from .validation import Validator, as_validator

__all__ = [
    "ApiConfigurationError",
    "ApiError",
    "ApiHttpError",
    "ApiSettings",
    "ApiTimeoutError",
    "ApiTransportError",
    "ApiValidationError",
    "BaseApiClient",
    "CacheEntry",
    "GetOptions",
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "MockHttpError",
    "MockRequest",
    "MockStore",
    "MockTransport",
    "NonceGenerator",
    "ResponseCache",
    "SessionStore",
    "UrllibTransport",
    "Validator",
    "as_validator",
    "generate_nonce",
    "parse_response",
    "resource_path",
    "verify_nonce",
]
