"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: services/__init__.py.
"""

from .auth import (
    AuthApiClient,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    RenewAccessTokenRequest,
    RenewAccessTokenResponse,
    VerifyTokenRequest,
    VerifyTokenResponse,
)
from .econ_trader import (
    USER_DATA_CACHE_KEY,
    EconTraderApiClient,
    exchange_data_cache_key,
)
from .schemas import (
    Account,
    ExchangeData,
    Reservation,
    ReservationDraft,
    ReservationRef,
    ReservationUpdate,
    UserDataResponse,
)

__all__ = [
    "Account",
    "AuthApiClient",
    "EconTraderApiClient",
    "ExchangeData",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "RenewAccessTokenRequest",
    "RenewAccessTokenResponse",
    "Reservation",
    "ReservationDraft",
    "ReservationRef",
    "ReservationUpdate",
    "USER_DATA_CACHE_KEY",
    "UserDataResponse",
    "VerifyTokenRequest",
    "VerifyTokenResponse",
    "exchange_data_cache_key",
]
