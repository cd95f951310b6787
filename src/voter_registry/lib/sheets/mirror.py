"""Vote mirror — best-effort copy of the voted flag into a Google Sheet.

The mirror is a side channel: the voter service calls it after the database
update has succeeded and discards any error after logging it.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

import httpx
import jwt
from loguru import logger

from voter_registry.core.config import Settings
from voter_registry.lib.reconciler.matcher import normalize_original_id

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
TOKEN_LIFETIME = 3600
TOKEN_REFRESH_MARGIN = 60

ORIGINAL_ID_COLUMN = 11  # L
VOTED_COLUMN = "B"
VOTED_MARK = "Yes"


class SheetsMirrorError(Exception):
    """Raised when the spreadsheet cannot be read or written.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code from Google.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class VoteMirror(ABC):
    """Destination that mirrors a voter's voted flag."""

    @abstractmethod
    async def record_vote(self, voter: Any, voted: bool) -> None:
        """Mirror the new voted state of ``voter``.

        Args:
            voter: The updated voter (needs ``original_id``).
            voted: True after a vote, False after an unvote.
        """


class NullVoteMirror(VoteMirror):
    """Mirror used when no spreadsheet is configured."""

    async def record_vote(self, voter: Any, voted: bool) -> None:
        return None


class GoogleSheetsMirror(VoteMirror):
    """Writes ``Yes``/empty into column B of the row holding the voter's id.

    Authenticates as a service account by exchanging a signed JWT for an
    access token, which is reused until shortly before it expires.
    """

    def __init__(
        self,
        credentials: dict[str, Any],
        spreadsheet_id: str,
        sheet_name: str = "Sheet1",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._spreadsheet_id = spreadsheet_id
        self._sheet_name = sheet_name
        self._timeout = timeout
        self._transport = transport
        self._token: str | None = None
        self._token_expires_at = 0.0

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    def _values_url(self, cell_range: str) -> str:
        return f"{SHEETS_API_URL}/{self._spreadsheet_id}/values/{quote(f'{self._sheet_name}!{cell_range}', safe='')}"

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        """Return a cached access token or exchange a service-account assertion for a new one."""
        now = int(time.time())
        if self._token is not None and now < self._token_expires_at - TOKEN_REFRESH_MARGIN:
            return self._token

        token_uri = self._credentials.get("token_uri", DEFAULT_TOKEN_URI)
        claims = {
            "iss": self._credentials["client_email"],
            "scope": SHEETS_SCOPE,
            "aud": token_uri,
            "iat": now,
            "exp": now + TOKEN_LIFETIME,
        }
        headers = {"kid": self._credentials["private_key_id"]} if "private_key_id" in self._credentials else None
        assertion = jwt.encode(claims, self._credentials["private_key"], algorithm="RS256", headers=headers)

        response = await client.post(
            token_uri,
            data={"grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer", "assertion": assertion},
        )
        response.raise_for_status()
        payload = response.json()
        self._token = payload["access_token"]
        self._token_expires_at = now + int(payload.get("expires_in", TOKEN_LIFETIME))
        return self._token

    async def find_row(self, client: httpx.AsyncClient, token: str, original_id: int) -> int | None:
        """Return the 1-based sheet row whose column L holds ``original_id``."""
        response = await client.get(self._values_url("A:L"), headers={"Authorization": f"Bearer {token}"})
        response.raise_for_status()
        rows = response.json().get("values", [])
        for index, row in enumerate(rows):
            if len(row) <= ORIGINAL_ID_COLUMN:
                continue
            cell_id = normalize_original_id(row[ORIGINAL_ID_COLUMN])
            if cell_id is not None and cell_id == original_id:
                return index + 1
        return None

    async def record_vote(self, voter: Any, voted: bool) -> None:
        """Update the voted cell for ``voter``; missing rows are only logged.

        Raises:
            SheetsMirrorError: On transport, HTTP or credential errors.
        """
        if voter.original_id is None:
            logger.info(f"Voter {voter.id} has no original id; not mirrored to sheet")
            return

        try:
            async with self._client() as client:
                token = await self._access_token(client)
                row_number = await self.find_row(client, token, voter.original_id)
                if row_number is None:
                    logger.info(f"Voter ID {voter.original_id} not found in sheet")
                    return

                response = await client.put(
                    self._values_url(f"{VOTED_COLUMN}{row_number}"),
                    params={"valueInputOption": "RAW"},
                    headers={"Authorization": f"Bearer {token}"},
                    json={"values": [[VOTED_MARK if voted else ""]]},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SheetsMirrorError(
                f"Google Sheets returned HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise SheetsMirrorError(f"Google Sheets request failed: {e}") from e
        except (KeyError, jwt.PyJWTError, ValueError) as e:
            raise SheetsMirrorError(f"Invalid service account credentials: {e}") from e

        action = "Updated" if voted else "Cleared vote in"
        logger.info(f"{action} Google Sheet row {row_number} for voter {voter.original_id}")


def build_vote_mirror(settings: Settings) -> VoteMirror:
    """Create the configured mirror, or a no-op mirror when unconfigured."""
    if not settings.sheets_enabled:
        logger.info("Google Sheets not configured - skipping")
        return NullVoteMirror()

    try:
        credentials = json.loads(settings.google_service_account_key or "")
    except json.JSONDecodeError as e:
        logger.error(f"Error initializing Google Sheets: {e}")
        return NullVoteMirror()

    logger.info("Google Sheets API initialized")
    return GoogleSheetsMirror(
        credentials,
        spreadsheet_id=settings.google_sheet_id or "",
        sheet_name=settings.google_sheet_name,
        timeout=settings.sheets_timeout,
    )
