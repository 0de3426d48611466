"""Configuration of the CPR client.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP, tokens) read configuration consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal
from uuid import UUID

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import DEFAULT_CPR_SERVICE_URI, CprOptions
from core.errors import CprValidationError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "cpr-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "cpr-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "cpr-client"
    return Path.home() / ".config" / "cpr-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# cpr-client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class CprSettings(BaseSettings):
    """Central configuration of the client and the CLI.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without polluting the Core.
    - A single configuration contract for the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="CPR_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    subscription_id: UUID | None = Field(
        default=None,
        description="Logic subscription identifier.",
    )
    cpr_configuration_id: UUID | None = Field(
        default=None,
        description="CPR configuration identifier.",
    )
    cpr_service_uri: str = Field(
        default=DEFAULT_CPR_SERVICE_URI,
        min_length=8,
        description="Base address of the CPR service.",
    )
    access_token: str | None = Field(
        default=None,
        description="Pre-issued Logic bearer token used by the CLI.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="cpr-client/0.1",
        min_length=1,
        description="User-Agent sent to the CPR service.",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Logging level for the CLI (DEBUG, INFO, WARNING, ...).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v

    def to_options(self) -> CprOptions:
        """Build the `CprOptions` a `CprClient` needs.

        Raises `CprValidationError` listing the settings that are missing.
        """

        missing = [
            f"CPR_{name.upper()}"
            for name in ("subscription_id", "cpr_configuration_id")
            if getattr(self, name) is None
        ]
        if missing:
            raise CprValidationError(f"Missing required settings: {', '.join(missing)}")

        return CprOptions(
            subscription_id=self.subscription_id,
            cpr_configuration_id=self.cpr_configuration_id,
            cpr_service_uri=self.cpr_service_uri,
        )


def load_settings(**overrides: object) -> CprSettings:
    """Read `CprSettings`, reporting malformed values as `CprValidationError`.

    The message names each offending variable (`CPR_...`) so the CLI can
    show it without a traceback.
    """

    try:
        return CprSettings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"CPR_{'_'.join(str(part) for part in error['loc']).upper()}: {error['msg']}"
            for error in exc.errors()
        )
        raise CprValidationError(f"Invalid settings: {problems}") from exc
