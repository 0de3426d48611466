"""Operation client for the CPR service.

Responsibility:
- Map each remote operation to its HTTP method, path and query.
- Send it through the caller's `httpx.AsyncClient` with the given auth.
- Decode the body: typed models for 200, text (if any) for other statuses.

Every operation returns an async context manager yielding an
`OperationResponse`; the underlying `httpx.Response` is closed when the
block exits, whichever way it exits. Required inputs are checked when the
operation is called, before anything is sent.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, AsyncContextManager, AsyncIterator, Optional
from urllib.parse import quote
from uuid import UUID

import httpx
from pydantic import TypeAdapter, ValidationError

from core.domain.models import (
    CitizenDetailedResponse,
    CitizenEvent,
    CitizenResponse,
    CprProviderConfigurationModel,
    CprSubscriptionRequest,
    SubscribedCitizenEvents,
)
from core.errors import CprHttpError, CprSerializationError, CprValidationError

logger = logging.getLogger(__name__)

# A JSON `null` body decodes to None, like an empty one.
_CITIZEN = TypeAdapter(Optional[CitizenResponse])
_CITIZEN_DETAILS = TypeAdapter(Optional[CitizenDetailedResponse])
_CONFIGURATIONS = TypeAdapter(Optional[list[CprProviderConfigurationModel]])
_EVENTS = TypeAdapter(Optional[list[CitizenEvent]])
_SUBSCRIBED_EVENTS = TypeAdapter(Optional[SubscribedCitizenEvents])


@dataclass(frozen=True)
class OperationResponse:
    """Status code and decoded body of one remote operation."""

    status_code: int
    body: Any = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def _require(value: object, name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise CprValidationError(f"'{name}' cannot be null or empty")


def _require_page(page_no: int, page_size: int) -> None:
    if page_no < 1:
        raise CprValidationError(f"'page_no' must be 1 or greater, got {page_no}")
    if page_size < 1:
        raise CprValidationError(f"'page_size' must be 1 or greater, got {page_size}")


def _segment(value: object) -> str:
    return quote(str(value), safe="")


def _decode_typed(response: httpx.Response, adapter: TypeAdapter) -> Any:
    if not response.content:
        return None
    try:
        return adapter.validate_json(response.content)
    except ValidationError as exc:
        raise CprSerializationError(
            f"Unable to process the CPR service response ({response.request.url.path}): {exc}"
        ) from exc


def _decode_text(response: httpx.Response) -> str | None:
    """Return the body when it is textual (plain text or a JSON string)."""

    if not response.content:
        return None
    content_type = response.headers.get("content-type", "").lower()
    if content_type.startswith("text/"):
        return response.text
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, str) else None


class InternalClient:
    """Authenticated handle used to invoke CPR operations."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credentials: httpx.Auth,
        *,
        base_uri: str,
    ) -> None:
        self._http_client = http_client
        self._credentials = credentials
        self.base_uri = base_uri.rstrip("/")

    # ------------------------------------------------------------------
    # Citizen lookups
    # ------------------------------------------------------------------

    def get_by_cpr(
        self, *, subscription_id: UUID, cpr: str, configuration_id: UUID
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(cpr, "cpr")
        return self._send(
            "GET",
            f"subscriptions/{_segment(subscription_id)}/cpr/cpr/{_segment(cpr)}",
            params={"configurationId": str(configuration_id)},
            decoder=_CITIZEN,
        )

    def get_cpr_details_by_cpr(
        self, *, subscription_id: UUID, cpr: str, configuration_id: UUID
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(cpr, "cpr")
        return self._send(
            "GET",
            f"subscriptions/{_segment(subscription_id)}/cpr/cpr/{_segment(cpr)}/details",
            params={"configurationId": str(configuration_id)},
            decoder=_CITIZEN_DETAILS,
        )

    def get_by_id(
        self, *, subscription_id: UUID, id: UUID, configuration_id: UUID
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(id, "id")
        return self._send(
            "GET",
            f"subscriptions/{_segment(subscription_id)}/cpr/id/{_segment(id)}",
            params={"configurationId": str(configuration_id)},
            decoder=_CITIZEN,
        )

    def get_cpr_details_by_id(
        self, *, subscription_id: UUID, id: UUID, configuration_id: UUID
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(id, "id")
        return self._send(
            "GET",
            f"subscriptions/{_segment(subscription_id)}/cpr/id/{_segment(id)}/details",
            params={"configurationId": str(configuration_id)},
            decoder=_CITIZEN_DETAILS,
        )

    # ------------------------------------------------------------------
    # Configurations
    # ------------------------------------------------------------------

    def get_all_cpr_configurations_with_http_messages(
        self, *, subscription_id: UUID
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        return self._send(
            "GET",
            f"subscriptions/{_segment(subscription_id)}/cpr/configurations",
            decoder=_CONFIGURATIONS,
        )

    async def get_all_cpr_configurations(
        self, *, subscription_id: UUID
    ) -> list[CprProviderConfigurationModel]:
        """Return the configurations, raising `CprHttpError` for any non-200.

        An empty (or `null`) 200 body means the subscription has none.
        """

        async with self.get_all_cpr_configurations_with_http_messages(
            subscription_id=subscription_id
        ) as response:
            if response.status_code != 200:
                raise CprHttpError(response.status_code, response.body)
            return response.body if response.body is not None else []

    # ------------------------------------------------------------------
    # Event subscriptions
    # ------------------------------------------------------------------

    def subscribe_by_cpr(
        self, *, subscription_id: UUID, cpr: str, request: CprSubscriptionRequest
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(cpr, "cpr")
        return self._send(
            "POST",
            f"subscriptions/{_segment(subscription_id)}/cpr/events/subscription/cpr/{_segment(cpr)}",
            json=request.model_dump(mode="json", by_alias=True),
        )

    def subscribe_by_id(
        self, *, subscription_id: UUID, id: UUID, request: CprSubscriptionRequest
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(id, "id")
        return self._send(
            "POST",
            f"subscriptions/{_segment(subscription_id)}/cpr/events/subscription/id/{_segment(id)}",
            json=request.model_dump(mode="json", by_alias=True),
        )

    def unsubscribe_by_cpr(
        self, *, subscription_id: UUID, cpr: str, configuration_id: UUID
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(cpr, "cpr")
        return self._send(
            "DELETE",
            f"subscriptions/{_segment(subscription_id)}/cpr/events/subscription/cpr/{_segment(cpr)}",
            params={"configurationId": str(configuration_id)},
        )

    def unsubscribe_by_id(
        self, *, subscription_id: UUID, id: UUID, configuration_id: UUID
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(id, "id")
        return self._send(
            "DELETE",
            f"subscriptions/{_segment(subscription_id)}/cpr/events/subscription/id/{_segment(id)}",
            params={"configurationId": str(configuration_id)},
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def get_events(
        self,
        *,
        subscription_id: UUID,
        date_from: datetime,
        date_to: datetime,
        configuration_id: UUID,
        page_no: int,
        page_size: int,
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(date_from, "date_from")
        _require(date_to, "date_to")
        _require_page(page_no, page_size)
        return self._send(
            "GET",
            f"subscriptions/{_segment(subscription_id)}/cpr/events",
            params=self._event_query(date_from, date_to, configuration_id, page_no, page_size),
            decoder=_EVENTS,
        )

    def get_subscribed_events(
        self,
        *,
        subscription_id: UUID,
        date_from: datetime,
        date_to: datetime,
        configuration_id: UUID,
        page_no: int,
        page_size: int,
    ) -> AsyncContextManager[OperationResponse]:
        _require(subscription_id, "subscription_id")
        _require(date_from, "date_from")
        _require(date_to, "date_to")
        _require_page(page_no, page_size)
        return self._send(
            "GET",
            f"subscriptions/{_segment(subscription_id)}/cpr/events/subscribed",
            params=self._event_query(date_from, date_to, configuration_id, page_no, page_size),
            decoder=_SUBSCRIBED_EVENTS,
        )

    @staticmethod
    def _event_query(
        date_from: datetime,
        date_to: datetime,
        configuration_id: UUID,
        page_no: int,
        page_size: int,
    ) -> dict[str, str]:
        return {
            "dateFrom": date_from.isoformat(),
            "dateTo": date_to.isoformat(),
            "configurationId": str(configuration_id),
            "pageNo": str(page_no),
            "pageSize": str(page_size),
        }

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        decoder: TypeAdapter | None = None,
    ) -> AsyncIterator[OperationResponse]:
        request = self._http_client.build_request(
            method,
            f"{self.base_uri}/{path}",
            params=params,
            json=json,
        )
        response = await self._http_client.send(request, auth=self._credentials, stream=True)
        try:
            await response.aread()
            logger.debug("%s %s -> %s", method, request.url.path, response.status_code)
            if response.status_code == 200 and decoder is not None:
                body = _decode_typed(response, decoder)
            else:
                body = _decode_text(response)
            yield OperationResponse(status_code=response.status_code, body=body)
        finally:
            await response.aclose()
