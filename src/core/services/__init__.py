"""Services of the Core.

`CprClient` is the entry point library users construct.
"""

from core.services.cpr_client import CprClient

__all__ = ["CprClient"]
