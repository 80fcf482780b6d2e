"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Base API client: caching, single-flight reads, invalidation on writes,
timeouts, response validation and nonce headers.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode, urlsplit

from .cache import ResponseCache
from .errors import (
    ApiError,
    ApiHttpError,
    ApiTimeoutError,
    ApiTransportError,
    ApiValidationError,
)
from .nonce import NonceGenerator
from .runtime import RequestCoalescer, await_with_timeout, hold_until_elapsed
from .session import SessionStore
from .settings import ApiSettings
from .transport import HttpTransport, UrllibTransport
from .types import GetOptions, HttpMethod, HttpRequest, HttpResponse
from .validation import as_validator, encode_json_body, to_plain_mapping, validate

logger = logging.getLogger("econ_trader.api.client")

JSON_CONTENT_TYPE = "application/json"


class BaseApiClient:
    """
    Single choke point for HTTP traffic to one backend.

    Reads go through a TTL cache and are coalesced per cache key so that
    concurrent identical GETs share one network round trip. Successful
    writes drop cached entries under the same resource path. Every failure
    surfaces as an ``ApiError`` subclass; nothing is retried here.
    """

    def __init__(
        self,
        settings: ApiSettings,
        *,
        transport: HttpTransport | None = None,
        session: SessionStore | None = None,
        nonce_generator: NonceGenerator | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        self.settings = settings
        self.session = session if session is not None else SessionStore(settings.api_token)
        self._base_url = settings.base_url.rstrip("/")
        self._transport = transport if transport is not None else UrllibTransport()
        self._nonces = nonce_generator if nonce_generator is not None else NonceGenerator()
        if cache is None:
            cache = ResponseCache(
                enabled=settings.cache_enabled,
                default_ttl_s=settings.cache_ttl_s,
            )
        self._cache = cache
        self._coalescer = RequestCoalescer()

    @classmethod
    def from_env(cls, **kwargs: Any) -> "BaseApiClient":
        """Build a client from ``ECON_TRADER_API_*`` environment variables."""
        return cls(ApiSettings.from_env(), **kwargs)

    # Cache management

    def clear_cache(self) -> None:
        self._cache.clear()

    def clear_expired_cache(self) -> int:
        return self._cache.clear_expired()

    def clear_cache_entry(self, cache_key: str) -> None:
        self._cache.delete(cache_key)

    def has_cached_data(self, cache_key: str) -> bool:
        return self._cache.has(cache_key)

    def get_cache_ttl(self, cache_key: str) -> float:
        """Remaining freshness of ``cache_key`` in seconds (``0.0`` if absent)."""
        return self._cache.remaining_ttl(cache_key)

    def get_cache_key(self, endpoint: str, params: Mapping[str, Any] | None = None) -> str:
        """Canonical cache key: full URL with query params sorted by name."""
        return self._build_url(endpoint, params)

    # Verbs

    async def get(
        self,
        endpoint: str,
        params: Any = None,
        response_schema: Any = None,
        params_schema: Any = None,
        options: GetOptions | None = None,
    ) -> Any:
        opts = options or GetOptions()
        clean_params = self._clean_params(params, params_schema)
        cache_key = opts.cache_key or self.get_cache_key(endpoint, clean_params)

        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        async def _fetch() -> Any:
            try:
                result = await self.request(
                    endpoint,
                    "GET",
                    params=clean_params,
                    schema=response_schema,
                )
            except ApiError as e:
                logger.error("GET %s failed key=%s: %s", endpoint, cache_key, e)
                raise
            self._cache.set(cache_key, result, ttl_s=opts.ttl_s)
            return result

        return await self._coalescer.run(
            cache_key,
            _fetch,
            on_join=lambda key: logger.debug("joined in-flight request key=%s", key),
        )

    async def post(
        self,
        endpoint: str,
        data: Any = None,
        response_schema: Any = None,
        data_schema: Any = None,
    ) -> Any:
        return await self._mutate("POST", endpoint, data, response_schema, data_schema)

    async def put(
        self,
        endpoint: str,
        data: Any = None,
        response_schema: Any = None,
        data_schema: Any = None,
    ) -> Any:
        return await self._mutate("PUT", endpoint, data, response_schema, data_schema)

    async def patch(
        self,
        endpoint: str,
        data: Any = None,
        response_schema: Any = None,
        data_schema: Any = None,
    ) -> Any:
        return await self._mutate("PATCH", endpoint, data, response_schema, data_schema)

    async def delete(
        self,
        endpoint: str,
        data: Any = None,
        response_schema: Any = None,
        data_schema: Any = None,
    ) -> Any:
        return await self._mutate("DELETE", endpoint, data, response_schema, data_schema)

    async def _mutate(
        self,
        method: HttpMethod,
        endpoint: str,
        data: Any,
        response_schema: Any,
        data_schema: Any,
    ) -> Any:
        logger.debug("%s %s", method, endpoint)
        if data_schema is not None:
            data = validate(data_schema, data)
        body = encode_json_body(data) if data is not None else None
        result = await self.request(endpoint, method, body=body, schema=response_schema)
        self._cache.invalidate_related(endpoint)
        return result

    # Low-level request

    async def request(
        self,
        endpoint: str,
        method: HttpMethod = "GET",
        *,
        params: Mapping[str, Any] | None = None,
        body: bytes | None = None,
        schema: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Perform one HTTP exchange and return the parsed (and validated) payload."""
        is_get = method == "GET"
        if self.settings.dev_delay_s > 0:
            await asyncio.sleep(self.settings.dev_delay_s)

        request = HttpRequest(
            method=method,
            url=self._build_url(endpoint, params if is_get else None),
            headers=self._build_headers(method, body, headers),
            body=body,
            timeout_s=self.settings.timeout_s,
        )
        logger.debug("dispatching %s %s", method, request.url)

        started_at = time.monotonic()
        try:
            response = await await_with_timeout(
                self._transport.send(request),
                self.settings.timeout_s,
            )
            data = parse_response(response)
        except ApiError:
            raise
        except TimeoutError as e:
            logger.warning("%s %s timed out after %.3fs", method, request.url, self.settings.timeout_s)
            raise ApiTimeoutError() from e
        except Exception as e:
            raise ApiTransportError(str(e) or type(e).__name__) from e

        if not response.ok:
            raise ApiHttpError(response.status, response.reason, data)

        await hold_until_elapsed(started_at, self.settings.min_round_trip_s)

        if schema is None:
            return data
        validator = as_validator(schema)
        try:
            return validator.parse(data)
        except Exception as e:  # noqa: BLE001
            logger.warning("response validation failed for %s %s", method, request.url)
            raise ApiValidationError(data, str(e)) from e

    def _build_url(self, endpoint: str, params: Mapping[str, Any] | None) -> str:
        url = f"{self._base_url}{endpoint}"
        pairs = _query_pairs(params) if params else []
        if not pairs:
            return url
        separator = "&" if urlsplit(url).query else "?"
        return f"{url}{separator}{urlencode(pairs)}"

    def _build_headers(
        self,
        method: HttpMethod,
        body: bytes | None,
        extra: Mapping[str, str] | None,
    ) -> dict[str, str]:
        headers = dict(extra or {})
        lowered = {key.lower() for key in headers}
        headers["Accept"] = JSON_CONTENT_TYPE
        if body is not None and "content-type" not in lowered:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        if method != "GET":
            headers["X-CACHE-CONTROL"] = "no-cache"
        token = self.session.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        headers.update(self._nonces.headers())
        return headers

    @staticmethod
    def _clean_params(params: Any, params_schema: Any) -> dict[str, Any] | None:
        if params is None:
            return None
        if params_schema is not None:
            params = validate(params_schema, params)
        return to_plain_mapping(params)


def parse_response(response: HttpResponse) -> Any:
    """
    Decode a backend envelope.

    Empty and non-JSON responses yield ``None``. JSON objects carrying a
    ``success`` flag unwrap to ``data``, then ``result``, then the object
    itself; any other JSON value yields ``None``.
    """
    if response.header("Content-Length") == "0" or response.status == 204:
        return None
    content_type = response.header("Content-Type") or ""
    if JSON_CONTENT_TYPE not in content_type.lower():
        return None
    payload = json.loads(response.body)
    if not isinstance(payload, dict) or "success" not in payload:
        return None
    for field_name in ("data", "result"):
        value = payload.get(field_name)
        if value is not None:
            return value
    return payload


def _query_pairs(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for name in sorted(params):
        value = params[name]
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None:
                continue
            pairs.append((str(name), _query_value(item)))
    return pairs


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
