from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from studio_desk.application.exceptions import UpstreamUnavailable
from studio_desk.core.config import settings


class GoogleSheetsClient:
    """Read-only access to a spreadsheet through the Sheets v4 `values` endpoint (API key auth)."""

    def __init__(
        self,
        sheet_id: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._sheet_id = sheet_id or settings.GOOGLE_SHEET_ID
        self._api_key = api_key or settings.GOOGLE_API_KEY
        self._base_url = (base_url or settings.SHEETS_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._sheet_id or not self._api_key:
            raise ValueError("GOOGLE_SHEET_ID and GOOGLE_API_KEY are required for Google Sheets")

    def get_values(self, range_name: str) -> list[list[str]]:
        """Return the rows of `range_name` (e.g. "Monday!A:F") as trimmed strings."""
        url = f"{self._base_url}/{self._sheet_id}/values/{quote(range_name, safe='')}"
        try:
            response = self._client.get(url, params={"key": self._api_key})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            self._logger.error("Sheets request failed", extra={"reason": range_name, "error": str(e)})
            raise UpstreamUnavailable(f"Could not read {range_name}: {e}") from e
        except ValueError as e:
            raise UpstreamUnavailable(f"Sheets returned invalid JSON for {range_name}") from e

        rows = data.get("values") or []
        return [[str(cell).strip() if cell is not None else "" for cell in row] for row in rows]
