"""Financial Modeling Prep client for annual income statements.

One endpoint is used:
  - income-statement/{symbol}?period=annual  — one JSON object per fiscal year,
    most recent first

Every failure (missing key, transport error, non-2xx status, body that is not
a list of income-statement records) is raised as FetchError with a message
fit for display. One request per call, no retry.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from income_dashboard.config import get_config
from income_dashboard.models import IncomeStatementRecord

log = logging.getLogger(__name__)

INCOME_STATEMENT_PATH = "income-statement/{symbol}"


class DashboardError(Exception):
    """Base error for the income dashboard."""


class FetchError(DashboardError):
    """The income statements could not be retrieved or parsed."""


class FMPClient:
    """Thin HTTP client for the FMP v3 REST API."""

    def __init__(self, api_key: str, base_url: str, timeout: float = 30.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request_json(self, path: str, params: dict[str, Any]) -> Any:
        """GET a path under base_url and return the decoded JSON body."""
        if not self.api_key:
            raise FetchError("FMP API key is not configured (set FMP_API_KEY)")

        url = f"{self.base_url}/{path}"
        params = {**params, "apikey": self.api_key}
        try:
            resp = requests.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"Failed to fetch data: {exc}") from exc

        if not resp.ok:
            raise FetchError(f"Failed to fetch data: HTTP {resp.status_code} from {path}")

        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(f"Failed to fetch data: response from {path} is not JSON") from exc

    def fetch_income_statements(
        self,
        symbol: str,
        period: str = "annual",
    ) -> list[IncomeStatementRecord]:
        """Fetch and parse every income statement the API returns for *symbol*."""
        path = INCOME_STATEMENT_PATH.format(symbol=symbol)
        log.info("Fetching %s income statements for %s", period, symbol)
        payload = self._request_json(path, {"period": period})

        # FMP reports bad keys and quota problems as a 200 with an object body
        if isinstance(payload, dict):
            message = payload.get("Error Message") or payload.get("error") or "unexpected response"
            raise FetchError(f"Failed to fetch data: {message}")
        if not isinstance(payload, list):
            raise FetchError("Failed to fetch data: expected a list of income statements")

        records = []
        for i, item in enumerate(payload):
            try:
                records.append(IncomeStatementRecord.model_validate(item))
            except ValidationError as exc:
                fields = ", ".join(str(e["loc"][0]) for e in exc.errors() if e.get("loc"))
                raise FetchError(
                    f"Malformed income statement at position {i} ({fields or 'record'})"
                ) from exc

        log.info("Fetched %d income statements for %s", len(records), symbol)
        return records


def get_fmp_client() -> FMPClient:
    """Build a client from the shared Settings."""
    config = get_config()
    return FMPClient(
        api_key=config.fmp_api_key,
        base_url=config.fmp_base_url,
        timeout=config.request_timeout,
    )
