"""Error vocabulary for the CPR client.

Why a single module:
- Callers catch `CprError` to handle every failure this library raises.
- `CprConfigurationError` is the only error synthesized from a status code;
  the rest describe failures of inputs, credentials or payloads.
"""

from __future__ import annotations


class CprError(Exception):
    """Base exception for CPR client failures."""


class CprValidationError(CprError, ValueError):
    """A required input is missing or out of range (raised before any I/O)."""


class CprSerializationError(CprError):
    """The service response could not be decoded into the expected shape."""


class TokenProviderError(CprError):
    """Unable to issue an authorization token for the platform."""


class CprHttpError(CprError):
    """Raised for unexpected statuses from operations without a status mapping."""

    def __init__(self, status_code: int, body: object | None = None):
        detail = body if isinstance(body, str) and body else "no details"
        super().__init__(f"CPR service error {status_code}: {detail}")
        self.status_code = status_code
        self.body = body


class CprConfigurationError(CprError):
    """The service rejected the call for a reason other than "not found".

    Usually the subscription or the CPR configuration is wrong and has to be
    fixed before retrying.
    """

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
