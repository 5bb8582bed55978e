"""Display formatting for the income-statement table."""

from __future__ import annotations

import datetime as dt
from typing import Sequence

import pandas as pd

from income_dashboard.models import IncomeStatementRecord

TABLE_COLUMNS = ["Date", "Revenue", "Net Income", "Gross Profit", "EPS", "Operating Income"]


def format_currency(v: float | None) -> str:
    """Whole US dollars with thousands separators, e.g. $383,285,000,000."""
    if v is None:
        return "N/A"
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.0f}"


def format_billions(v: float | None) -> str:
    """Compact billions, e.g. $383.29B."""
    if v is None:
        return "N/A"
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v) / 1e9:,.2f}B"


def format_eps(v: float | None) -> str:
    if v is None:
        return "N/A"
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):.2f}"


def format_percent(v: float | None) -> str:
    return "N/A" if v is None else f"{v:.2f}%"


def format_date(d: dt.date) -> str:
    """Long table date, e.g. 'Sep 30, 2023'."""
    return f"{d:%b} {d.day}, {d.year}"


def table_rows(records: Sequence[IncomeStatementRecord]) -> list[dict[str, str]]:
    """One display dict per record, in the order given."""
    return [
        {
            "Date": format_date(r.date),
            "Revenue": format_currency(r.revenue),
            "Net Income": format_currency(r.net_income),
            "Gross Profit": format_currency(r.gross_profit),
            "EPS": format_eps(r.eps),
            "Operating Income": format_currency(r.operating_income),
        }
        for r in records
    ]


def records_frame(records: Sequence[IncomeStatementRecord]) -> pd.DataFrame:
    """Formatted table as a DataFrame (columns in TABLE_COLUMNS order)."""
    return pd.DataFrame(table_rows(records), columns=TABLE_COLUMNS)
