"""
Shared fixtures for cpr-client tests.

The CPR service is replaced by `StubService`, an `httpx.MockTransport`
handler that answers by (method, path) and records every request.
"""

from uuid import UUID

import httpx
import pytest

from core.domain.models import CprOptions
from core.services.cpr_client import CprClient

SUBSCRIPTION_ID = UUID("6f1b9a4e-3c2d-4e5f-8a7b-1c2d3e4f5a6b")
CONFIGURATION_ID = UUID("0a9b8c7d-6e5f-4a3b-2c1d-0e9f8a7b6c5d")
SERVICE_URI = "https://cpr.test/cpr/v1"
CPR = "0101701234"


def service_path(suffix: str) -> str:
    """Absolute URL path of an operation under the test subscription."""
    return f"/cpr/v1/subscriptions/{SUBSCRIPTION_ID}/cpr/{suffix}"


class StubService:
    """Answers requests from a (method, path) -> response table.

    Responses are stored as keyword arguments and built fresh per request.
    Unknown routes answer 404 with an empty body.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], tuple[int, dict]] = {}

    def respond(self, method: str, path: str, status_code: int, **kwargs) -> None:
        self._routes[(method, path)] = (status_code, kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, kwargs = self._routes.get((request.method, request.url.path), (404, {}))
        return httpx.Response(status_code, **kwargs)


class FakeTokenProvider:
    def __init__(self, token: str):
        self.token = token

    async def get_token(self) -> str:
        return self.token


class CountingTokenProviderFactory:
    """TokenProviderFactory fake that records how often it is asked."""

    def __init__(self, token: str = "token-123"):
        self.token = token
        self.calls = 0
        self.transports: list[httpx.AsyncClient] = []

    def get_provider(self, http_client: httpx.AsyncClient) -> FakeTokenProvider:
        self.calls += 1
        self.transports.append(http_client)
        return FakeTokenProvider(self.token)


@pytest.fixture
def options():
    return CprOptions(
        subscription_id=SUBSCRIPTION_ID,
        cpr_configuration_id=CONFIGURATION_ID,
        cpr_service_uri=SERVICE_URI,
    )


@pytest.fixture
def service():
    return StubService()


@pytest.fixture
def token_factory():
    return CountingTokenProviderFactory()


@pytest.fixture
async def http_client(service):
    async with httpx.AsyncClient(transport=httpx.MockTransport(service)) as client:
        yield client


@pytest.fixture
def cpr_client(http_client, token_factory, options):
    return CprClient(http_client, token_factory, options)
