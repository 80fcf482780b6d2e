from __future__ import annotations

import asyncio
import json
import time

import pytest
from pydantic import BaseModel

from econ_trader.api import (
    ApiError,
    ApiHttpError,
    ApiSettings,
    ApiTimeoutError,
    ApiTransportError,
    ApiValidationError,
    BaseApiClient,
    HttpResponse,
    parse_response,
)


def run_async(coro):
    return asyncio.run(coro)


def _json(payload, *, status: int = 200, reason: str = "OK", content_type="application/json"):
    return HttpResponse(
        status=status,
        reason=reason,
        headers={"Content-Type": content_type},
        body=json.dumps(payload).encode("utf-8"),
    )


class _StaticTransport:
    def __init__(self, response: HttpResponse) -> None:
        self.response = response
        self.calls = 0

    async def send(self, request):
        _ = request
        self.calls += 1
        return self.response


class _RaisingTransport:
    def __init__(self, error: Exception) -> None:
        self.error = error

    async def send(self, request):
        _ = request
        raise self.error


class _HangingTransport:
    async def send(self, request):
        _ = request
        await asyncio.Event().wait()


def _client(transport, **settings) -> BaseApiClient:
    settings.setdefault("min_round_trip_s", 0.0)
    return BaseApiClient(ApiSettings(base_url="https://api.test", **settings), transport=transport)


def test_parse_response_envelopes():
    assert parse_response(_json({"success": True, "data": {"a": 1}})) == {"a": 1}
    assert parse_response(_json({"success": True, "result": [1, 2]})) == [1, 2]
    assert parse_response(_json({"success": True, "data": None, "total": 3})) == {
        "success": True,
        "data": None,
        "total": 3,
    }
    assert parse_response(_json({"success": True, "data": 0})) == 0
    assert parse_response(_json({"items": []})) is None
    assert parse_response(_json([1, 2, 3])) is None


def test_parse_response_empty_and_non_json_bodies():
    assert parse_response(HttpResponse(status=204)) is None
    assert parse_response(HttpResponse(status=200, headers={"Content-Length": "0"})) is None
    assert parse_response(
        HttpResponse(status=200, headers={"Content-Type": "text/html"}, body=b"<p>hi</p>")
    ) is None
    assert parse_response(
        _json({"success": True, "data": "x"}, content_type="application/json; charset=utf-8")
    ) == "x"


def test_http_error_preserves_status_reason_and_body():
    transport = _StaticTransport(
        _json({"success": False, "message": "missing"}, status=404, reason="Not Found")
    )
    client = _client(transport)

    with pytest.raises(ApiHttpError) as excinfo:
        run_async(client.get("/accounts/9"))

    error = excinfo.value
    assert error.status == 404
    assert error.status_text == "Not Found"
    assert error.data == {"success": False, "message": "missing"}
    assert str(error) == "API Error: 404 Not Found"


def test_timeout_is_classified_as_408():
    client = _client(_HangingTransport(), timeout_s=0.05)

    started = time.monotonic()
    with pytest.raises(ApiTimeoutError) as excinfo:
        run_async(client.get("/slow"))
    elapsed = time.monotonic() - started

    assert excinfo.value.status == 408
    assert excinfo.value.status_text == "Request Timeout"
    assert 0.045 <= elapsed < 0.15


def test_timed_out_get_releases_key():
    client = _client(_HangingTransport(), timeout_s=0.02)

    async def _scenario():
        with pytest.raises(ApiTimeoutError):
            await client.get("/slow")
        return client._coalescer.in_flight(client.get_cache_key("/slow"))

    assert run_async(_scenario()) is False


def test_transport_failure_is_status_zero_with_message():
    client = _client(_RaisingTransport(ConnectionRefusedError("connection refused")))

    with pytest.raises(ApiTransportError) as excinfo:
        run_async(client.post("/accounts", {"x": 1}))

    assert excinfo.value.status == 0
    assert excinfo.value.status_text == "connection refused"
    assert isinstance(excinfo.value.__cause__, ConnectionRefusedError)


def test_socket_timeout_from_transport_is_a_timeout():
    client = _client(_RaisingTransport(TimeoutError("timed out")))

    with pytest.raises(ApiTimeoutError):
        run_async(client.get("/slow"))


def test_api_error_from_transport_passes_through():
    original = ApiError(503, "Upstream Down")
    client = _client(_RaisingTransport(original))

    with pytest.raises(ApiError) as excinfo:
        run_async(client.get("/x"))

    assert excinfo.value is original


def test_invalid_json_body_is_a_transport_error():
    response = HttpResponse(status=200, headers={"Content-Type": "application/json"}, body=b"{oops")
    client = _client(_StaticTransport(response))

    with pytest.raises(ApiTransportError):
        run_async(client.get("/x"))


class _Account(BaseModel):
    id: str
    name: str


def test_response_schema_parses_payload():
    client = _client(_StaticTransport(_json({"success": True, "data": {"id": "1", "name": "main"}})))

    account = run_async(client.get("/accounts/1", response_schema=_Account))

    assert account == _Account(id="1", name="main")


def test_validation_failure_is_distinct_and_carries_received_body():
    client = _client(_StaticTransport(_json({"success": True, "data": {"id": 5}})))

    with pytest.raises(ApiValidationError) as excinfo:
        run_async(client.get("/accounts/1", response_schema=_Account))

    error = excinfo.value
    assert error.status == 422
    assert error.status_text == "Invalid response format"
    assert error.received == {"id": 5}
    assert "name" in error.data["error"]
    assert not isinstance(error, ApiTransportError)


def test_missing_envelope_fails_schema_validation():
    client = _client(_StaticTransport(_json({"id": "1", "name": "main"})))

    with pytest.raises(ApiValidationError) as excinfo:
        run_async(client.get("/accounts/1", response_schema=_Account))

    assert excinfo.value.received is None


class _PositiveInt:
    def parse(self, value):
        if not isinstance(value, int) or value <= 0:
            raise ValueError(f"expected positive int, got {value!r}")
        return value


def test_parse_object_validator_is_accepted():
    client = _client(_StaticTransport(_json({"success": True, "data": -1})))

    with pytest.raises(ApiValidationError) as excinfo:
        run_async(client.get("/count", response_schema=_PositiveInt()))

    assert "positive int" in excinfo.value.data["error"]


def test_unsupported_schema_object_is_a_caller_error_not_a_422():
    client = _client(_StaticTransport(_json({"success": True, "data": {"id": "1"}})))

    with pytest.raises(TypeError, match="Unsupported schema"):
        run_async(client.get("/accounts/1", response_schema={"not": "a schema"}))


def test_failed_validation_is_not_cached():
    transport = _StaticTransport(_json({"success": True, "data": {"id": 5}}))
    client = _client(transport)

    async def _scenario():
        for _ in range(2):
            with pytest.raises(ApiValidationError):
                await client.get("/accounts/1", response_schema=_Account)

    run_async(_scenario())
    assert transport.calls == 2


def test_round_trip_floor_delays_fast_responses():
    client = _client(_StaticTransport(_json({"success": True, "data": 1})), min_round_trip_s=0.3)

    started = time.monotonic()
    run_async(client.post("/x", {"a": 1}))
    elapsed = time.monotonic() - started

    assert elapsed >= 0.29


def test_round_trip_floor_applies_to_get():
    client = _client(_StaticTransport(_json({"success": True, "data": 1})), min_round_trip_s=0.2)

    started = time.monotonic()
    assert run_async(client.get("/x")) == 1
    elapsed = time.monotonic() - started

    assert elapsed >= 0.19


def test_cache_hit_is_not_delayed():
    client = _client(_StaticTransport(_json({"success": True, "data": 1})), min_round_trip_s=0.2)

    async def _scenario():
        await client.get("/x")
        started = time.monotonic()
        await client.get("/x")
        return time.monotonic() - started

    assert run_async(_scenario()) < 0.1


def test_dev_delay_precedes_dispatch():
    client = _client(_StaticTransport(_json({"success": True, "data": 1})), dev_delay_s=0.05)

    started = time.monotonic()
    run_async(client.get("/x"))

    assert time.monotonic() - started >= 0.045


def test_base_url_trailing_slash_is_normalized():
    client = BaseApiClient(ApiSettings(base_url="https://api.test/v1/"))
    assert client.get_cache_key("/events", {"q": "cpi"}) == "https://api.test/v1/events?q=cpi"
