"""
mock_backend.py: BaseApiClient against the in-memory mock backend.

Shows cache hits, single-flight reads and invalidation after a write.

Usage:
    python examples/mock_backend.py
"""

import asyncio
import logging

from econ_trader.api import ApiSettings, BaseApiClient, MockTransport

backend = MockTransport(latency_s=0.1, verify_nonces=True)


@backend.route("GET", "/events")
async def list_events(request, store):
    return store.collection("events", [])


@backend.route("POST", "/events")
async def add_event(request, store):
    events = store.collection("events", [])
    events.append(request.json)
    return request.json


async def main() -> None:
    client = BaseApiClient(ApiSettings(base_url="https://mock.local"), transport=backend)

    # Three concurrent reads, one round trip.
    await asyncio.gather(*[client.get("/events", {"country": "US"}) for _ in range(3)])
    print("requests after concurrent reads:", len(backend.calls))

    await client.post("/events", {"code": "US-CPI", "country": "US"})
    events = await client.get("/events", {"country": "US"})
    print("events after write:", events)
    print("requests total:", len(backend.calls))


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main())
