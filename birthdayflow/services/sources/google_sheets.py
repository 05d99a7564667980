"""Google Sheets values API client (read-only)."""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from birthdayflow.core.errors import CredentialsError, SourceError
from birthdayflow.core.settings import Settings

from .base import Rows

LOGGER = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"
VALUES_URL = "https://sheets.googleapis.com/v4/spreadsheets/{spreadsheet_id}/values/{range}"
DEFAULT_TIMEOUT = 30.0


def build_session(credentials_info: Mapping[str, str]) -> requests.Session:
    """Create an authorized requests session from service account info."""

    try:
        credentials = service_account.Credentials.from_service_account_info(
            dict(credentials_info), scopes=[SHEETS_SCOPE]
        )
    except (ValueError, GoogleAuthError) as exc:
        raise CredentialsError(f"Service account credentials are invalid: {exc}") from exc
    return AuthorizedSession(credentials)


class GoogleSheetSource:
    """Fetch formatted cell values of one sheet range."""

    def __init__(
        self,
        spreadsheet_id: str,
        sheet_range: str,
        session: requests.Session,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self.session = session
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleSheetSource":
        info = settings.sheet_credentials()
        return cls(
            spreadsheet_id=str(settings.spreadsheet_id),
            sheet_range=settings.spreadsheet_range,
            session=build_session(info),
        )

    def fetch_rows(self) -> Rows:
        url = VALUES_URL.format(
            spreadsheet_id=quote(self.spreadsheet_id, safe=""),
            range=quote(self.sheet_range, safe=""),
        )
        LOGGER.info("Fetching sheet %s range %s", self.spreadsheet_id, self.sheet_range)
        try:
            response = self.session.get(
                url, params={"valueRenderOption": "FORMATTED_VALUE"}, timeout=self.timeout
            )
            response.raise_for_status()
            payload: Any = response.json()
        except (requests.RequestException, GoogleAuthError, ValueError) as exc:
            raise SourceError(f"Failed to fetch spreadsheet values: {exc}") from exc

        values = payload.get("values") if isinstance(payload, dict) else None
        rows: Rows = [[str(cell) for cell in row] for row in values or []]
        LOGGER.info("Sheet loaded: %s rows", len(rows))
        return rows
