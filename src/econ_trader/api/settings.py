"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

API client settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ApiConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class ApiSettings:
    """
    Immutable per-client configuration.

    Attributes:
        base_url: Scheme + host (+ optional path prefix) prepended to endpoints.
        timeout_s: Upper bound for one transport round trip.
        cache_enabled: Whether successful GET results are cached.
        cache_ttl_s: Default freshness window for cached GET results.
        min_round_trip_s: Minimum wall time of a successful request.
        dev_delay_s: Artificial delay before every request (development only).
        api_token: Initial bearer token for the client's session store.
    """

    base_url: str
    timeout_s: float = 30.0
    cache_enabled: bool = True
    cache_ttl_s: float = 30.0
    min_round_trip_s: float = 0.3
    dev_delay_s: float = 0.0
    api_token: str | None = None

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ApiConfigurationError("base_url must be non-empty")
        if self.timeout_s <= 0:
            raise ApiConfigurationError("timeout_s must be > 0")
        if self.cache_ttl_s < 0:
            raise ApiConfigurationError("cache_ttl_s must be >= 0")
        if self.min_round_trip_s < 0:
            raise ApiConfigurationError("min_round_trip_s must be >= 0")
        if self.dev_delay_s < 0:
            raise ApiConfigurationError("dev_delay_s must be >= 0")

    @staticmethod
    def from_env(default_base_url: str = "http://localhost:8000") -> "ApiSettings":
        """Load settings from environment variables."""
        return ApiSettings(
            base_url=os.getenv("ECON_TRADER_API_BASE_URL", default_base_url),
            timeout_s=_env_float("ECON_TRADER_API_TIMEOUT_S", 30.0),
            cache_enabled=_env_bool("ECON_TRADER_API_CACHE_ENABLED", True),
            cache_ttl_s=_env_float("ECON_TRADER_API_CACHE_TTL_S", 30.0),
            min_round_trip_s=_env_float("ECON_TRADER_API_MIN_ROUND_TRIP_S", 0.3),
            dev_delay_s=_env_float("ECON_TRADER_API_DEV_DELAY_S", 0.0),
            api_token=os.getenv("ECON_TRADER_API_TOKEN") or None,
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ApiConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ApiConfigurationError(f"{name} must be a boolean flag, got {raw!r}")
