"""Status-code to outcome mapping shared by every CPR operation.

The service answers 404 when a record does not exist, which callers expect
while probing, and any other non-success status when the subscription or
the configuration is wrong. `resolve` turns a response into one of:

- the decoded body (200),
- `None` (404),
- a raised `CprConfigurationError` (anything else).

Each branch is a policy callable, so an operation can swap one without
repeating the switch.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from adapters.internal_client import OperationResponse
from core.errors import CprConfigurationError

logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_FALLBACK = "Invalid configuration provided to access CPR service"

Policy = Callable[[OperationResponse], Any]


def decoded_body(response: OperationResponse) -> Any:
    return response.body


def absent(response: OperationResponse) -> None:
    return None


def raise_configuration_error(response: OperationResponse) -> Any:
    message = response.body if isinstance(response.body, str) else CONFIGURATION_ERROR_FALLBACK
    logger.warning("CPR service rejected the call with %s: %s", response.status_code, message)
    raise CprConfigurationError(message, status_code=response.status_code)


def resolve(
    response: OperationResponse,
    *,
    on_success: Policy = decoded_body,
    on_not_found: Policy = absent,
    on_other: Policy = raise_configuration_error,
) -> Any:
    if response.status_code == 200:
        return on_success(response)
    if response.status_code == 404:
        return on_not_found(response)
    return on_other(response)


def succeeded(response: OperationResponse) -> bool:
    """Subscribe/unsubscribe outcome: 2xx is `True`, anything else `False`."""

    return response.is_success
