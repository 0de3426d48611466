"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation of the options a client is built with.
- A single place to decode the camelCase payloads of the CPR service.

Note:
- Citizen and event records are read-only projections. Fields the service
  adds later are kept (`extra="allow"`) and passed through untouched.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

DEFAULT_CPR_SERVICE_URI = "https://gateway.kmdlogic.io/cpr/v1"


class CprOptions(BaseModel):
    """Configuration a `CprClient` is built with.

    To access the CPR you need:
    - a Logic subscription,
    - a client credential issued for the Logic platform,
    - a CPR configuration for the distribution service being used.
    """

    model_config = ConfigDict(frozen=True)

    subscription_id: UUID = Field(
        ...,
        description="Logic subscription identifier.",
    )
    cpr_configuration_id: UUID = Field(
        ...,
        description="CPR configuration (upstream registry profile) to use.",
    )
    cpr_service_uri: str = Field(
        default=DEFAULT_CPR_SERVICE_URI,
        min_length=8,
        description="Base address of the CPR service.",
    )


class _ServiceModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


class CitizenAddress(_ServiceModel):
    street_name: str | None = None
    house_number: str | None = None
    floor: str | None = None
    door: str | None = None
    postal_code: str | None = None
    city: str | None = None
    municipality_code: str | None = None


class CitizenResponse(_ServiceModel):
    """Summary of a citizen record."""

    id: UUID | None = Field(default=None, description="CPR person identifier.")
    cpr: str | None = Field(default=None, description="CPR number.")
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    status: str | None = None
    address: CitizenAddress | None = None


class CitizenDetailedResponse(CitizenResponse):
    """Citizen record including civil status and protection flags."""

    middle_name: str | None = None
    civil_status: str | None = None
    citizenship: str | None = None
    place_of_birth: str | None = None
    deceased_date: date | None = None
    name_and_address_protection: bool | None = None


class CprProviderConfigurationModel(_ServiceModel):
    """A CPR configuration registered for a Logic subscription."""

    id: UUID | None = None
    name: str | None = None
    provider: str | None = None
    environment: str | None = None
    subscription_id: UUID | None = None


class CitizenEvent(_ServiceModel):
    id: UUID | None = None
    cpr: str | None = None
    event_type: str | None = None
    event_date: datetime | None = None


class SubscribedCitizenEvents(_ServiceModel):
    """One page of events for citizens the subscription is subscribed to."""

    total_count: int | None = None
    actual_count: int | None = None
    page_no: int | None = None
    page_size: int | None = None
    subscribed_events: list[CitizenEvent] = Field(default_factory=list)


class CprSubscriptionRequest(_ServiceModel):
    """Body of the subscribe operations."""

    configuration_id: UUID
