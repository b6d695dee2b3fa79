"""Remote roster lookup over a PostgREST-style REST endpoint."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from pycheckin._constants import (
    DEFAULT_ROSTER_CODE_COLUMN,
    DEFAULT_ROSTER_TABLE,
    DISPLAY_NAME_COLUMNS,
    USER_AGENT,
)
from pycheckin._redact import redact_for_log
from pycheckin.config import CheckInConfig
from pycheckin.exceptions import CheckInConfigError, CheckInError, RosterLookupError
from pycheckin.models.roster import RosterRecord

_logger = logging.getLogger(__name__)


def record_from_row(row: Mapping[str, Any], *, code_column: str = DEFAULT_ROSTER_CODE_COLUMN) -> RosterRecord:
    """Convert a roster row into a :class:`RosterRecord`.

    The display name comes from the first non-empty name column; every
    other scalar, non-null column is kept as string metadata.
    """
    code = row.get(code_column)
    if isinstance(code, int) and not isinstance(code, bool):
        code = str(code)
    if not isinstance(code, str) or not code.strip():
        raise RosterLookupError(f"Roster row has no usable '{code_column}' value")

    display_name = code
    name_column: str | None = None
    for column in DISPLAY_NAME_COLUMNS:
        value = row.get(column)
        if isinstance(value, str) and value.strip():
            display_name = value.strip()
            name_column = column
            break

    metadata: dict[str, str] = {}
    for key, value in row.items():
        if key in (code_column, name_column) or value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            metadata[key] = str(value)

    return RosterRecord(code=code, display_name=display_name, metadata=metadata)


class HttpRosterLookup:
    """Roster lookup against a ``/rest/v1/<table>`` endpoint.

    Usage::

        async with HttpRosterLookup(url, api_key=key) as roster:
            record = await roster.lookup("STUDENT-0042")

    An external ``aiohttp.ClientSession`` may be passed in; it is then
    left open on exit.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        table: str = DEFAULT_ROSTER_TABLE,
        code_column: str = DEFAULT_ROSTER_CODE_COLUMN,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        if not base_url:
            raise CheckInConfigError("Roster base URL is required")
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._table = table
        self._code_column = code_column
        self._external_session = session is not None
        self._http_session = session

    @classmethod
    def from_config(cls, config: CheckInConfig, *, session: aiohttp.ClientSession | None = None) -> HttpRosterLookup:
        if not config.roster_url:
            raise CheckInConfigError("roster_url is not configured (set CHECKIN_ROSTER_URL)")
        return cls(
            config.roster_url,
            api_key=config.roster_api_key,
            table=config.roster_table,
            code_column=config.roster_code_column,
            session=session,
        )

    @property
    def endpoint(self) -> str:
        return f"/rest/v1/{self._table}"

    async def __aenter__(self) -> HttpRosterLookup:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise CheckInError("Roster client not initialized. Use 'async with HttpRosterLookup(...) as roster:'")
        return self._http_session

    def _headers(self) -> dict[str, str]:
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["authorization"] = f"Bearer {self._api_key}"
        return headers

    async def lookup(self, code: str) -> RosterRecord | None:
        """Fetch the row whose code column equals ``code``."""
        http = self._require_session()
        endpoint = self.endpoint
        url = f"{self._base_url}{endpoint}"
        params = {self._code_column: f"eq.{code}", "select": "*", "limit": "1"}

        _logger.debug("GET %s code=%s", url, code)

        try:
            async with http.get(url, params=params, headers=self._headers()) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise RosterLookupError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except RosterLookupError:
            raise
        except aiohttp.ClientError as exc:
            raise RosterLookupError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise RosterLookupError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc

        try:
            rows = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RosterLookupError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(rows, list):
            raise RosterLookupError(f"Expected a list of rows from {endpoint}", endpoint=endpoint)

        _logger.debug("Roster response: %s", redact_for_log(rows))

        if not rows:
            return None
        row = rows[0]
        if not isinstance(row, dict):
            raise RosterLookupError(f"Malformed roster row from {endpoint}", endpoint=endpoint)
        return record_from_row(row, code_column=self._code_column)
