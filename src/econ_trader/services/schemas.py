"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Wire models of the econ-trader backend bridge.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Exchange = Literal["Binance", "Bybit"]
Market = Literal["Coin-M", "USDS-M", "Linear", "Inverse"]
OrderSide = Literal["BUY", "SELL"]


class _WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Balance(_WireModel):
    asset: str
    balance: float
    equity: float
    unrealized_pnl: float
    available_balance: float
    update_time: int


class Position(_WireModel):
    symbol: str
    position_side: Literal["LONG", "SHORT", "BOTH"]
    volume: float
    un_realized_profit: float
    entry_price: float
    mark_price: float | None = None
    break_even_price: float | None = None
    liquidation_price: float
    is_hedged_mode: bool | None = None
    leverage: float
    margin_asset: str | None = None


class Order(_WireModel):
    exchange_order_id: str
    internal_order_id: str
    side: OrderSide
    symbol: str
    volume: float
    reduce_only: bool
    price: float | None = Field(default=None, ge=0)
    stop_price: float | None = Field(default=None, ge=0)
    status: str
    filled: float
    avg_price: float = Field(ge=0)
    entry_timestamp: int | None = Field(default=None, gt=0)
    filled_timestamp: int | None = Field(default=None, gt=0)
    last_update_timestamp: int | None = Field(default=None, gt=0)


class ReservationDraft(_WireModel):
    """Reservation fields supplied by the caller on creation."""

    unique_code: str
    event_code: str
    event_name: str
    account_id: str
    market: Market
    trigger_type: Literal["actual_vs_forecast", "actual_vs_previous", "actual_vs_specific"]
    condition: Literal["greater", "less"]
    symbol: str
    side: OrderSide
    volume: float
    order_type: Literal["LIMIT", "MARKET"]
    enabled: bool
    specific_value: float | None = None
    limit_price: float | None = None


class Reservation(ReservationDraft):
    id: str
    created_at: int = Field(gt=0)


class ReservationUpdate(_WireModel):
    """Partial reservation update; ``id`` and ``unique_code`` select the row."""

    id: str
    unique_code: str
    enabled: bool | None = None
    volume: float | None = None
    specific_value: float | None = None
    limit_price: float | None = None
    condition: Literal["greater", "less"] | None = None


class ReservationRef(_WireModel):
    id: str
    unique_code: str


class Account(_WireModel):
    api_key: str
    name: str
    active: bool
    available_symbols: dict[Market, list[str]] = Field(default_factory=dict)
    account_unique_id: str
    balances: dict[Market, list[Balance]] = Field(default_factory=dict)
    positions: dict[Market, list[Position]] = Field(default_factory=dict)
    orders: dict[Market, list[Order]] = Field(default_factory=dict)
    open_orders: dict[Market, list[Order]] = Field(default_factory=dict)
    exchange: Exchange
    markets: list[Market]
    created_at: int = Field(gt=0)
    updated_at: int = Field(gt=0)


class UserDataResponse(_WireModel):
    reservations: dict[str, list[Reservation]] | None = None
    accounts: dict[str, Account]


class ExchangeData(_WireModel):
    balances: dict[Market, list[Balance]] = Field(default_factory=dict)
    positions: dict[Market, list[Position]] = Field(default_factory=dict)
    orders: dict[Market, list[Order]] = Field(default_factory=dict)
    open_orders: dict[Market, list[Order]] = Field(default_factory=dict)


class RegisterApiKeyRequest(_WireModel):
    exchange: Exchange
    name: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    secret_key: str = Field(min_length=1)
