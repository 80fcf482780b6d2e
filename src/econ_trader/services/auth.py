"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Client for the single sign-on service.

Every call is a POST validated on both sides. The client never caches, and a
successful login or token renewal becomes the session's bearer token.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from pydantic import Field

from ..api import ApiSettings, BaseApiClient
from .schemas import _WireModel

logger = logging.getLogger("econ_trader.services.auth")

DEFAULT_BASE_URL = "https://c-sso-gc2uw.api-bridge.work"
_PREFIX = "/api/sso"
_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Credentials(_WireModel):
    email: str = Field(pattern=_EMAIL_PATTERN)
    password: str = Field(min_length=8)
    client_service_id: str


class RegisterRequest(Credentials):
    pass


class RegisterResponse(_WireModel):
    success: bool


class LoginRequest(Credentials):
    pass


class LoginResponse(_WireModel):
    token: str
    refresh_token: str


class RenewAccessTokenRequest(_WireModel):
    refresh_token: str


class RenewAccessTokenResponse(_WireModel):
    token: str


class VerifyTokenRequest(_WireModel):
    token: str


class VerifyTokenResponse(_WireModel):
    user_id: str
    email: str = Field(pattern=_EMAIL_PATTERN)


class AuthApiClient(BaseApiClient):
    """Registration, login and token checks against the SSO service."""

    def __init__(self, settings: ApiSettings, **kwargs: Any) -> None:
        if settings.cache_enabled:
            settings = dataclasses.replace(settings, cache_enabled=False)
        super().__init__(settings, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AuthApiClient":
        return cls(ApiSettings.from_env(DEFAULT_BASE_URL), **kwargs)

    async def register(self, payload: RegisterRequest | dict[str, Any]) -> RegisterResponse:
        return await self.post(
            f"{_PREFIX}/register",
            payload,
            response_schema=RegisterResponse,
            data_schema=RegisterRequest,
        )

    async def login(self, payload: LoginRequest | dict[str, Any]) -> LoginResponse:
        """Log in and keep the issued access token on this client's session."""
        response: LoginResponse = await self.post(
            f"{_PREFIX}/login",
            payload,
            response_schema=LoginResponse,
            data_schema=LoginRequest,
        )
        self.session.set_token(response.token)
        logger.debug("session token set after login")
        return response

    async def renew_access_token(
        self, payload: RenewAccessTokenRequest | dict[str, Any]
    ) -> RenewAccessTokenResponse:
        response: RenewAccessTokenResponse = await self.post(
            f"{_PREFIX}/renew-access-token",
            payload,
            response_schema=RenewAccessTokenResponse,
            data_schema=RenewAccessTokenRequest,
        )
        self.session.set_token(response.token)
        return response

    async def verify_token(self, payload: VerifyTokenRequest | dict[str, Any]) -> VerifyTokenResponse:
        return await self.post(
            f"{_PREFIX}/verify-token",
            payload,
            response_schema=VerifyTokenResponse,
            data_schema=VerifyTokenRequest,
        )
