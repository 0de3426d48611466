"""Get the details of a citizen from the CPR.

`CprClient` is the public entry point of the library. It maps each call to
one remote operation and translates the service's status codes:

- lookups and event queries return the typed body, `None` when the service
  answers 404, and raise `CprConfigurationError` otherwise;
- subscribe/unsubscribe return whether the service answered 2xx and never
  raise for a status code;
- configuration discovery returns the list as-is.

Missing inputs raise `CprValidationError` before anything is sent.
Serialization and token failures propagate unchanged.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from uuid import UUID

import httpx

from adapters.auth import TokenCredentials
from adapters.internal_client import InternalClient
from core.domain.models import (
    CitizenDetailedResponse,
    CitizenEvent,
    CitizenResponse,
    CprOptions,
    CprProviderConfigurationModel,
    CprSubscriptionRequest,
    SubscribedCitizenEvents,
)
from core.interfaces.credentials import TokenProviderFactory
from core.services.outcomes import resolve, succeeded

logger = logging.getLogger(__name__)


class CprClient:
    """Client for the CPR service of the Logic platform.

    Args:
        http_client: The transport to use. The caller manages this resource;
            it is never closed here.
        token_provider_factory: Creates the token provider authorizing requests.
        options: Subscription, CPR configuration and service address.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_provider_factory: TokenProviderFactory,
        options: CprOptions,
    ) -> None:
        if http_client is None:
            raise ValueError("http_client cannot be None")
        if token_provider_factory is None:
            raise ValueError("token_provider_factory cannot be None")
        if options is None:
            raise ValueError("options cannot be None")

        self._http_client = http_client
        self._token_provider_factory = token_provider_factory
        self._options = options

        self._internal_client: InternalClient | None = None
        self._internal_client_lock = threading.Lock()

    @property
    def options(self) -> CprOptions:
        return self._options

    # ------------------------------------------------------------------
    # Citizen lookups
    # ------------------------------------------------------------------

    async def get_citizen_by_cpr(self, cpr: str) -> CitizenResponse | None:
        """Get the details of a citizen by CPR number.

        Returns `None` if the CPR number isn't known to the service.
        """

        client = self._create_client()
        async with client.get_by_cpr(
            subscription_id=self._options.subscription_id,
            cpr=cpr,
            configuration_id=self._options.cpr_configuration_id,
        ) as response:
            return resolve(response)

    async def get_citizen_details_by_cpr(self, cpr: str) -> CitizenDetailedResponse | None:
        """Get more details of a citizen by CPR number, or `None`."""

        client = self._create_client()
        async with client.get_cpr_details_by_cpr(
            subscription_id=self._options.subscription_id,
            cpr=cpr,
            configuration_id=self._options.cpr_configuration_id,
        ) as response:
            return resolve(response)

    async def get_citizen_by_id(self, id: UUID) -> CitizenResponse | None:
        client = self._create_client()
        async with client.get_by_id(
            subscription_id=self._options.subscription_id,
            id=id,
            configuration_id=self._options.cpr_configuration_id,
        ) as response:
            return resolve(response)

    async def get_citizen_details_by_id(self, id: UUID) -> CitizenDetailedResponse | None:
        client = self._create_client()
        async with client.get_cpr_details_by_id(
            subscription_id=self._options.subscription_id,
            id=id,
            configuration_id=self._options.cpr_configuration_id,
        ) as response:
            return resolve(response)

    # ------------------------------------------------------------------
    # Configurations
    # ------------------------------------------------------------------

    async def get_all_cpr_configurations(self) -> list[CprProviderConfigurationModel]:
        """Get the CPR configurations of the Logic subscription."""

        client = self._create_client()
        return await client.get_all_cpr_configurations(
            subscription_id=self._options.subscription_id
        )

    # ------------------------------------------------------------------
    # Event subscriptions
    # ------------------------------------------------------------------

    async def subscribe_by_cpr(self, cpr: str) -> bool:
        client = self._create_client()
        async with client.subscribe_by_cpr(
            subscription_id=self._options.subscription_id,
            cpr=cpr,
            request=CprSubscriptionRequest(configuration_id=self._options.cpr_configuration_id),
        ) as response:
            return succeeded(response)

    async def subscribe_by_id(self, id: UUID) -> bool:
        client = self._create_client()
        async with client.subscribe_by_id(
            subscription_id=self._options.subscription_id,
            id=id,
            request=CprSubscriptionRequest(configuration_id=self._options.cpr_configuration_id),
        ) as response:
            return succeeded(response)

    async def unsubscribe_by_cpr(self, cpr: str) -> bool:
        client = self._create_client()
        async with client.unsubscribe_by_cpr(
            subscription_id=self._options.subscription_id,
            cpr=cpr,
            configuration_id=self._options.cpr_configuration_id,
        ) as response:
            return succeeded(response)

    async def unsubscribe_by_id(self, id: UUID) -> bool:
        client = self._create_client()
        async with client.unsubscribe_by_id(
            subscription_id=self._options.subscription_id,
            id=id,
            configuration_id=self._options.cpr_configuration_id,
        ) as response:
            return succeeded(response)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def get_all_cpr_events(
        self,
        date_from: datetime,
        date_to: datetime,
        page_no: int,
        page_size: int,
    ) -> list[CitizenEvent] | None:
        """Get citizen events for the period.

        Args:
            date_from: Query events from this date and time.
            date_to: Query events to this date and time.
            page_no: The page to query, starting at 1.
            page_size: The maximum number of results to return.
        """

        client = self._create_client()
        async with client.get_events(
            subscription_id=self._options.subscription_id,
            date_from=date_from,
            date_to=date_to,
            configuration_id=self._options.cpr_configuration_id,
            page_no=page_no,
            page_size=page_size,
        ) as response:
            return resolve(response)

    async def get_subscribed_cpr_events(
        self,
        date_from: datetime,
        date_to: datetime,
        page_no: int,
        page_size: int,
    ) -> SubscribedCitizenEvents | None:
        """Get events for subscribed citizens, one page at a time."""

        client = self._create_client()
        async with client.get_subscribed_events(
            subscription_id=self._options.subscription_id,
            date_from=date_from,
            date_to=date_to,
            configuration_id=self._options.cpr_configuration_id,
            page_no=page_no,
            page_size=page_size,
        ) as response:
            return resolve(response)

    def _create_client(self) -> InternalClient:
        if self._internal_client is not None:
            return self._internal_client

        with self._internal_client_lock:
            if self._internal_client is None:
                token_provider = self._token_provider_factory.get_provider(self._http_client)
                self._internal_client = InternalClient(
                    self._http_client,
                    TokenCredentials(token_provider),
                    base_uri=self._options.cpr_service_uri,
                )
                logger.debug("Created CPR operation client for %s", self._options.cpr_service_uri)

        return self._internal_client
