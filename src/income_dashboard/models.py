"""Pydantic models for income-statement records and dashboard state."""

from __future__ import annotations

import datetime as dt
import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def _safe(v: Any) -> float | None:
    """Convert a value to float, returning None for invalid/missing values."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
    try:
        f = float(v)
        if math.isnan(f) or math.isinf(f):
            return None
        return f
    except (TypeError, ValueError, OverflowError):
        return None


# ---------------------------------------------------------------------------
# Fetched data
# ---------------------------------------------------------------------------

class IncomeStatementRecord(BaseModel):
    """One fiscal period of an income statement, as returned by the API.

    Amounts are in currency units (not scaled). Extra provider fields are
    dropped. Instances are frozen so a fetched sequence can be hashed for
    memoization.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    date: dt.date
    revenue: float
    net_income: float = Field(alias="netIncome")
    gross_profit: float = Field(alias="grossProfit")
    operating_income: float = Field(alias="operatingIncome")
    eps: float | None = None

    @property
    def year(self) -> int:
        return self.date.year


class FetchStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Filtering & sorting
# ---------------------------------------------------------------------------

_YEAR_FIELDS = ("start_year", "end_year")


class FilterCriteria(BaseModel):
    """Six optional bounds.  None means no constraint.

    Raw user input is accepted as-is: blanks, non-numeric text and
    non-finite numbers all collapse to None instead of failing validation.
    Year bounds are truncated to whole years.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start_year: int | None = Field(default=None, alias="startYear")
    end_year: int | None = Field(default=None, alias="endYear")
    min_revenue: float | None = Field(default=None, alias="minRevenue")
    max_revenue: float | None = Field(default=None, alias="maxRevenue")
    min_net_income: float | None = Field(default=None, alias="minNetIncome")
    max_net_income: float | None = Field(default=None, alias="maxNetIncome")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_bound(cls, v: Any, info: ValidationInfo) -> float | int | None:
        f = _safe(v)
        if f is not None and info.field_name in _YEAR_FIELDS:
            return math.trunc(f)
        return f

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class SortKey(str, Enum):
    DATE = "date"
    REVENUE = "revenue"
    NET_INCOME = "netIncome"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: SortKey = SortKey.DATE
    direction: SortDirection = SortDirection.ASC

    def toggled(self, key: SortKey | str) -> SortSpec:
        """Spec after the user selects *key*.

        Selecting the active key flips the direction; any other key starts
        ascending.
        """
        key = SortKey(key)
        if key == self.key:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return SortSpec(key=key, direction=flipped)
        return SortSpec(key=key, direction=SortDirection.ASC)


# ---------------------------------------------------------------------------
# Derived output
# ---------------------------------------------------------------------------

class ChartPoint(BaseModel):
    """One chart-ready period.  operating_margin_percent is None when undefined."""
    label: str
    revenue_billions: float
    operating_margin_percent: float | None = None
    net_income_billions: float


class DashboardSnapshot(BaseModel):
    """Serializable view of the controller for tool output."""
    symbol: str
    status: FetchStatus
    error: str | None = None
    filters: FilterCriteria = FilterCriteria()
    sort: SortSpec = SortSpec()
    total_records: int = 0
    rows: list[dict] = []
    chart_series: list[ChartPoint] = []
