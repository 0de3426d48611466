"""Bearer-token authorization for httpx."""

from __future__ import annotations

from typing import AsyncGenerator

import httpx

from core.interfaces.credentials import TokenProvider


class TokenCredentials(httpx.Auth):
    """Adds `Authorization: Bearer <token>` to every request.

    The token is asked from the provider on each request, so providers that
    cache and refresh tokens keep working for long-lived clients.
    """

    def __init__(self, token_provider: TokenProvider) -> None:
        self._token_provider = token_provider

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self._token_provider.get_token()
        request.headers["Authorization"] = f"Bearer {token}"
        yield request
