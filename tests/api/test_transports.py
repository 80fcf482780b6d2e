from __future__ import annotations

import asyncio
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from econ_trader.api import (
    ApiHttpError,
    ApiSettings,
    ApiTimeoutError,
    ApiTransportError,
    BaseApiClient,
    HttpRequest,
    MockHttpError,
    MockStore,
    MockTransport,
    UrllibTransport,
)


def run_async(coro):
    return asyncio.run(coro)


def _mock_client(transport: MockTransport, **settings) -> BaseApiClient:
    settings.setdefault("min_round_trip_s", 0.0)
    return BaseApiClient(ApiSettings(base_url="https://mock.test", **settings), transport=transport)


def _account_backend(**kwargs) -> MockTransport:
    backend = MockTransport(**kwargs)

    @backend.route("GET", "/accounts")
    async def _list(request, store):
        accounts = store.collection("accounts")
        active = request.query.get("active")
        rows = list(accounts.values())
        if active:
            rows = [row for row in rows if str(row["active"]).lower() == active[0]]
        return rows

    @backend.route("POST", "/accounts")
    async def _create(request, store):
        accounts = store.collection("accounts")
        if any(row["name"] == request.json["name"] for row in accounts.values()):
            raise MockHttpError(409, "duplicate account name")
        account_id = str(len(accounts) + 1)
        accounts[account_id] = {"id": account_id, "active": True, **request.json}
        return accounts[account_id]

    @backend.route("DELETE", "/accounts/1")
    async def _delete(request, store):
        _ = request
        store.collection("accounts").pop("1", None)
        return None

    return backend


def test_mock_backend_round_trip_with_cache_invalidation():
    backend = _account_backend()
    client = _mock_client(backend)

    async def _scenario():
        assert await client.get("/accounts") == []
        created = await client.post("/accounts", {"name": "main"})
        listed = await client.get("/accounts")
        return created, listed

    created, listed = run_async(_scenario())
    assert created == {"id": "1", "active": True, "name": "main"}
    assert listed == [created]
    assert [call.method for call in backend.calls] == ["GET", "POST", "GET"]


def test_mock_backend_passes_query_params():
    backend = _account_backend()
    backend.store.collection("accounts").update(
        {"1": {"id": "1", "active": True}, "2": {"id": "2", "active": False}}
    )
    client = _mock_client(backend)

    rows = run_async(client.get("/accounts", {"active": False}))

    assert rows == [{"id": "2", "active": False}]


def test_handler_errors_become_http_errors_with_payload():
    backend = _account_backend()
    client = _mock_client(backend)

    async def _scenario():
        await client.post("/accounts", {"name": "main"})
        await client.post("/accounts", {"name": "main"})

    with pytest.raises(ApiHttpError) as excinfo:
        run_async(_scenario())

    assert excinfo.value.status == 409
    assert excinfo.value.status_text == "Conflict"
    assert excinfo.value.data == {"success": False, "message": "duplicate account name"}


def test_unknown_route_is_404():
    client = _mock_client(_account_backend())

    with pytest.raises(ApiHttpError) as excinfo:
        run_async(client.get("/nope"))

    assert excinfo.value.status == 404


def test_none_result_is_204_and_parses_to_none():
    backend = _account_backend()
    client = _mock_client(backend)

    assert run_async(client.delete("/accounts/1")) is None


def test_nonce_verification_accepts_client_requests():
    backend = _account_backend(verify_nonces=True)
    client = _mock_client(backend)

    assert run_async(client.get("/accounts")) == []


def test_nonce_verification_rejects_untagged_requests():
    backend = _account_backend(verify_nonces=True)

    response = run_async(backend.send(HttpRequest(method="GET", url="https://mock.test/accounts")))

    assert response.status == 401


def test_latency_is_simulated_and_store_is_resettable():
    store = MockStore()
    backend = _account_backend(store=store, latency_s=0.05)
    client = _mock_client(backend, timeout_s=0.01)

    with pytest.raises(ApiTimeoutError):
        run_async(client.get("/accounts"))

    store.collection("accounts")["9"] = {"id": "9"}
    backend.reset()
    assert backend.calls == []
    assert store.collections == {}


class _Handler(BaseHTTPRequestHandler):
    def log_message(self, format, *args):  # noqa: A002
        _ = (format, args)

    def _reply(self, status: int, payload) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):  # noqa: N802
        if self.path.startswith("/echo"):
            self._reply(
                200,
                {
                    "success": True,
                    "data": {"path": self.path, "nonce": self.headers.get("X-NONCE")},
                },
            )
        else:
            self._reply(404, {"success": False, "message": "not found"})

    def do_POST(self):  # noqa: N802
        length = int(self.headers.get("Content-Length", "0"))
        payload = json.loads(self.rfile.read(length))
        self._reply(200, {"success": True, "result": payload})


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


def test_urllib_transport_against_local_server(http_server):
    client = BaseApiClient(
        ApiSettings(base_url=http_server, min_round_trip_s=0.0, timeout_s=5.0),
        transport=UrllibTransport(),
    )

    async def _scenario():
        echoed = await client.get("/echo", {"b": 2, "a": 1})
        posted = await client.post("/items", {"name": "x"})
        return echoed, posted

    echoed, posted = run_async(_scenario())
    assert echoed["path"] == "/echo?a=1&b=2"
    assert echoed["nonce"]
    assert posted == {"name": "x"}


def test_urllib_transport_returns_http_errors_as_responses(http_server):
    client = BaseApiClient(
        ApiSettings(base_url=http_server, min_round_trip_s=0.0, timeout_s=5.0),
    )

    with pytest.raises(ApiHttpError) as excinfo:
        run_async(client.get("/missing"))

    assert excinfo.value.status == 404
    assert excinfo.value.data == {"success": False, "message": "not found"}


def test_urllib_transport_connection_failure_is_status_zero():
    client = BaseApiClient(
        ApiSettings(base_url="http://127.0.0.1:9", min_round_trip_s=0.0, timeout_s=2.0),
    )

    with pytest.raises(ApiTransportError) as excinfo:
        run_async(client.get("/x"))

    assert excinfo.value.status == 0
