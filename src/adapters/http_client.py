"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and the user agent for every CPR call.
- Eases testing: callers can pass any `httpx.AsyncClient`, including one
  backed by `httpx.MockTransport`.

The client built here belongs to the caller. `CprClient` never closes it.
Redirects are not followed: a redirected POST would be replayed as a GET.
"""

from __future__ import annotations

import httpx

from core.config import CprSettings


def build_async_client(
    settings: CprSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults for the CPR service.

    Why a builder:
    - Centralizes timeouts/headers so every entry point behaves the same.
    - Keeps room for future policies (proxies, retries) in one place.
    """

    settings = settings or CprSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, text/plain;q=0.9",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
    )
