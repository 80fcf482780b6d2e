"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Client for the econ-trader backend bridge.

User data and exchange data are cached under explicit keys. Explicit keys
are not reached by resource-path invalidation, so every mutation clears the
user-data entry itself once it succeeds.
"""

from __future__ import annotations

import logging
from typing import Any

from ..api import ApiSettings, BaseApiClient, GetOptions
from .schemas import (
    Exchange,
    ExchangeData,
    RegisterApiKeyRequest,
    ReservationDraft,
    ReservationRef,
    ReservationUpdate,
    UserDataResponse,
)

logger = logging.getLogger("econ_trader.services.econ_trader")

DEFAULT_BASE_URL = "https://econ-trader-l3avc.api-bridge.work"
USER_DATA_CACHE_KEY = "econ-trader.getUserData"
USER_DATA_TTL_S = 300.0
EXCHANGE_DATA_TTL_S = 60.0
_PREFIX = "/api/econ-trader"


def exchange_data_cache_key(account_unique_id: str) -> str:
    return f"econ-trader.getExchangeData.{account_unique_id}"


class EconTraderApiClient(BaseApiClient):
    """Accounts, exchange snapshots and reservations on the econ-trader bridge."""

    @classmethod
    def from_env(cls, **kwargs: Any) -> "EconTraderApiClient":
        return cls(ApiSettings.from_env(DEFAULT_BASE_URL), **kwargs)

    async def get_user_data(self) -> UserDataResponse:
        return await self.get(
            f"{_PREFIX}/user-data",
            response_schema=UserDataResponse,
            options=GetOptions(cache_key=USER_DATA_CACHE_KEY, ttl_s=USER_DATA_TTL_S),
        )

    async def get_exchange_data(self, account_unique_id: str) -> ExchangeData:
        return await self.get(
            f"{_PREFIX}/exchange-data/{account_unique_id}",
            response_schema=ExchangeData,
            options=GetOptions(
                cache_key=exchange_data_cache_key(account_unique_id),
                ttl_s=EXCHANGE_DATA_TTL_S,
            ),
        )

    async def register_api_key(
        self,
        *,
        exchange: Exchange,
        name: str,
        api_key: str,
        secret_key: str,
    ) -> None:
        logger.debug("registering api key exchange=%s name=%s", exchange, name)
        await self.post(
            f"{_PREFIX}/register-api-key",
            {"exchange": exchange, "name": name, "apiKey": api_key, "secretKey": secret_key},
            data_schema=RegisterApiKeyRequest,
        )
        self.forget_user_data()

    async def update_api_key(self, account_unique_id: str, name: str) -> None:
        await self.put(
            f"{_PREFIX}/update-api-keys",
            {"accountUniqueId": account_unique_id, "name": name},
        )
        self.forget_user_data()

    async def update_markets(
        self,
        account_unique_id: str,
        available_symbols: dict[str, list[str]],
    ) -> None:
        await self.put(
            f"{_PREFIX}/update-market-config",
            {"accountUniqueId": account_unique_id, "availableSymbols": available_symbols},
        )
        self.forget_user_data()

    async def toggle_account_status(self, account_unique_id: str, active: bool) -> None:
        await self.put(
            f"{_PREFIX}/update-api-keys",
            {"accountUniqueId": account_unique_id, "active": active},
        )
        self.forget_user_data()

    async def delete_account(self, account_unique_id: str) -> None:
        await self.delete(
            f"{_PREFIX}/delete-api-keys",
            {"accountUniqueId": account_unique_id},
        )
        self.forget_user_data()

    async def create_reservation(self, draft: ReservationDraft) -> None:
        logger.debug(
            "creating reservation unique_code=%s event_code=%s",
            draft.unique_code,
            draft.event_code,
        )
        await self.post(f"{_PREFIX}/add-reservation", draft)
        self.forget_user_data()

    async def update_reservation(self, update: ReservationUpdate) -> None:
        await self.put(f"{_PREFIX}/update-reservation", update)
        self.forget_user_data()

    async def delete_reservation(self, ref: ReservationRef) -> None:
        await self.delete(f"{_PREFIX}/delete-reservation", ref)
        self.forget_user_data()

    def forget_user_data(self) -> None:
        """Drop the cached user-data snapshot."""
        self.clear_cache_entry(USER_DATA_CACHE_KEY)
