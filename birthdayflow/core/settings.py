"""Runtime settings resolved from the process environment.

Values are read once at startup. ``.env`` files are honoured but never override
variables that are already exported.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from babel import Locale, UnknownLocaleError
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError, CredentialsError


load_dotenv(override=False)

TOKEN_URI = "https://oauth2.googleapis.com/token"


def default_work_dir() -> Path:
    """Writable base for runtime files (logs)."""
    env = os.getenv("BIRTHDAYFLOW_WORK_DIR")
    if env:
        return Path(env)
    return Path.cwd() / "work"


class Settings(BaseModel):
    """Configuration consumed by the pipeline and the sheet source."""

    model_config = ConfigDict(frozen=True)

    timezone: str = "Europe/Zurich"
    output_dir: Path = Path("output")
    spreadsheet_id: str | None = None
    spreadsheet_range: str = "Sheet1!A:Z"
    service_account_email: str | None = None
    private_key: str | None = None
    locale: str = "de_CH"
    work_dir: Path = Field(default_factory=default_work_dir)

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value}") from exc
        return value

    @field_validator("locale")
    @classmethod
    def _check_locale(cls, value: str) -> str:
        try:
            Locale.parse(value)
        except (UnknownLocaleError, ValueError) as exc:
            raise ValueError(f"unknown locale: {value}") from exc
        return value

    @field_validator("private_key")
    @classmethod
    def _expand_newlines(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.replace("\\n", "\n")

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def log_dir(self) -> Path:
        return self.work_dir / "logs"

    def sheet_credentials(self) -> dict[str, str]:
        """Return service account info for google-auth, failing fast when incomplete."""

        if not self.spreadsheet_id:
            raise ConfigError("Environment variable GOOGLE_SHEETS_ID is missing.")
        if not self.service_account_email or not self.private_key:
            raise CredentialsError(
                "Service account credentials are missing. "
                "Set GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY."
            )
        return {
            "type": "service_account",
            "client_email": self.service_account_email,
            "private_key": self.private_key,
            "token_uri": TOKEN_URI,
        }


_ENV_FIELDS = {
    "TIMEZONE": "timezone",
    "OUTPUT_DIR": "output_dir",
    "GOOGLE_SHEETS_ID": "spreadsheet_id",
    "GOOGLE_SHEETS_RANGE": "spreadsheet_range",
    "GOOGLE_SERVICE_ACCOUNT_EMAIL": "service_account_email",
    "GOOGLE_PRIVATE_KEY": "private_key",
    "BIRTHDAY_LOCALE": "locale",
    "BIRTHDAYFLOW_WORK_DIR": "work_dir",
}


def load_settings(env: Mapping[str, str] | None = None, **overrides: object) -> Settings:
    """Build ``Settings`` from environment variables plus explicit overrides.

    Empty variables count as unset. ``overrides`` with a ``None`` value are ignored
    so CLI options can be passed through unconditionally.
    """

    source = os.environ if env is None else env
    values: dict[str, object] = {}
    for key, field in _ENV_FIELDS.items():
        raw = source.get(key)
        if raw is not None and raw.strip():
            values[field] = raw.strip() if field != "private_key" else raw
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
