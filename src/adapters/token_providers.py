"""Token providers backed by a pre-issued bearer token.

Implementation:
- The token is read from settings (`CPR_ACCESS_TOKEN`) or passed in.
- No token is issued or refreshed here; an expired token is the caller's
  problem and shows up as a 401 from the service.
"""

from __future__ import annotations

import httpx

from core.config import CprSettings
from core.errors import TokenProviderError


class StaticTokenProvider:
    def __init__(self, token: str) -> None:
        self._token = token

    async def get_token(self) -> str:
        return self._token


class StaticTokenProviderFactory:
    """`TokenProviderFactory` handing out a fixed token."""

    def __init__(self, token: str | None) -> None:
        self._token = (token or "").strip()

    @classmethod
    def from_settings(cls, settings: CprSettings) -> "StaticTokenProviderFactory":
        return cls(settings.access_token)

    def get_provider(self, http_client: httpx.AsyncClient) -> StaticTokenProvider:
        if not self._token:
            raise TokenProviderError(
                "No access token configured. Set CPR_ACCESS_TOKEN or run `cpr doctor setup`."
            )
        return StaticTokenProvider(self._token)
