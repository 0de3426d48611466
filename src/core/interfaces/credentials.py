"""Credential contracts.

Why Protocol:
- Token issuance belongs to the identity platform, not to this client.
- Any object with the right shape (client credentials, managed identity,
  a pre-issued token, a test fake) can authorize CPR requests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class TokenProvider(Protocol):
    """Produces bearer tokens for outgoing requests."""

    async def get_token(self) -> str:
        """Return a bearer token valid for the next request.

        Raises `core.errors.TokenProviderError` when no token can be issued.
        """

        ...


@runtime_checkable
class TokenProviderFactory(Protocol):
    """Creates a `TokenProvider` bound to a transport.

    The factory receives the caller's `httpx.AsyncClient` so providers that
    talk to a token endpoint can reuse the same connection pool.
    """

    def get_provider(self, http_client: httpx.AsyncClient) -> TokenProvider:
        ...
