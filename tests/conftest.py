"""Shared pytest fixtures — sample FMP payloads and a stub client."""

from __future__ import annotations

import pytest

from income_dashboard.config import reset_config
from income_dashboard.models import IncomeStatementRecord


# Apple annual income statements, as FMP returns them (most recent first)
_PAYLOAD = [
    {"date": "2023-09-30", "symbol": "AAPL", "reportedCurrency": "USD", "calendarYear": "2023",
     "period": "FY", "revenue": 383285000000, "grossProfit": 169148000000,
     "operatingIncome": 114301000000, "netIncome": 96995000000, "eps": 6.16},
    {"date": "2022-09-24", "symbol": "AAPL", "reportedCurrency": "USD", "calendarYear": "2022",
     "period": "FY", "revenue": 394328000000, "grossProfit": 170782000000,
     "operatingIncome": 119437000000, "netIncome": 99803000000, "eps": 6.15},
    {"date": "2021-09-25", "symbol": "AAPL", "reportedCurrency": "USD", "calendarYear": "2021",
     "period": "FY", "revenue": 365817000000, "grossProfit": 152836000000,
     "operatingIncome": 108949000000, "netIncome": 94680000000, "eps": 5.67},
    {"date": "2020-09-26", "symbol": "AAPL", "reportedCurrency": "USD", "calendarYear": "2020",
     "period": "FY", "revenue": 274515000000, "grossProfit": 104956000000,
     "operatingIncome": 66288000000, "netIncome": 57411000000, "eps": 3.31},
    {"date": "2019-09-28", "symbol": "AAPL", "reportedCurrency": "USD", "calendarYear": "2019",
     "period": "FY", "revenue": 260174000000, "grossProfit": 98392000000,
     "operatingIncome": 63930000000, "netIncome": 55256000000, "eps": 2.99},
]


@pytest.fixture(autouse=True)
def _env(monkeypatch, tmp_path):
    """Known settings for every test; nothing read from a local .env."""
    monkeypatch.setenv("FMP_API_KEY", "test-key")
    monkeypatch.setenv("DASHBOARD_SYMBOL", "AAPL")
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def payload() -> list[dict]:
    return [dict(item) for item in _PAYLOAD]


@pytest.fixture
def records(payload) -> list[IncomeStatementRecord]:
    return [IncomeStatementRecord.model_validate(item) for item in payload]


def make_record(date: str, revenue: float, net_income: float = 0.0,
                operating_income: float = 0.0, eps: float | None = 1.0) -> IncomeStatementRecord:
    return IncomeStatementRecord(
        date=date,
        revenue=revenue,
        net_income=net_income,
        gross_profit=0.0,
        operating_income=operating_income,
        eps=eps,
    )


class StubClient:
    """Stands in for FMPClient: returns canned records or raises."""

    def __init__(self, records=None, exc: Exception | None = None):
        self.records = records or []
        self.exc = exc
        self.calls: list[tuple[str, str]] = []

    def fetch_income_statements(self, symbol: str, period: str = "annual"):
        self.calls.append((symbol, period))
        if self.exc is not None:
            raise self.exc
        return list(self.records)


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None, text: str | None = None):
        self.status_code = status_code
        self._body = body
        self._text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._text is not None:
            raise ValueError("No JSON object could be decoded")
        return self._body
