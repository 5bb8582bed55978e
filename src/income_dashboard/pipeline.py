"""Filter / sort / derive pipeline over fetched income statements.

Data flow:
  1. filter_records()       → keep records inside every active bound (ANDed)
  2. sort_records()         → stable order by one key, asc or desc
  3. derive_chart_series()  → billions, operating margin %, chronological order

All three are pure: inputs are never mutated and every call returns a new
list.  filter_and_sort() memoizes steps 1+2 on (records, criteria, spec).
"""

from __future__ import annotations

import datetime as dt
import math
from functools import lru_cache
from typing import Callable, Iterable, Sequence

from income_dashboard.models import (
    ChartPoint,
    FilterCriteria,
    IncomeStatementRecord,
    SortDirection,
    SortKey,
    SortSpec,
)

BILLION = 1e9

Predicate = Callable[[IncomeStatementRecord], bool]


# ═══════════════════════════════════════════════════════════════════════════
#  Filter
# ═══════════════════════════════════════════════════════════════════════════

def _predicates(criteria: FilterCriteria) -> list[Predicate]:
    """Build one predicate per bound that is set."""
    preds: list[Predicate] = []
    c = criteria
    if c.start_year is not None:
        preds.append(lambda r: r.year >= c.start_year)
    if c.end_year is not None:
        preds.append(lambda r: r.year <= c.end_year)
    if c.min_revenue is not None:
        preds.append(lambda r: r.revenue >= c.min_revenue)
    if c.max_revenue is not None:
        preds.append(lambda r: r.revenue <= c.max_revenue)
    if c.min_net_income is not None:
        preds.append(lambda r: r.net_income >= c.min_net_income)
    if c.max_net_income is not None:
        preds.append(lambda r: r.net_income <= c.max_net_income)
    return preds


def filter_records(
    records: Iterable[IncomeStatementRecord],
    criteria: FilterCriteria,
) -> list[IncomeStatementRecord]:
    """Return the records that satisfy every active bound in *criteria*."""
    preds = _predicates(criteria)
    return [r for r in records if all(p(r) for p in preds)]


# ═══════════════════════════════════════════════════════════════════════════
#  Sort
# ═══════════════════════════════════════════════════════════════════════════

_SORT_FIELDS: dict[SortKey, Callable[[IncomeStatementRecord], object]] = {
    SortKey.DATE: lambda r: r.date,
    SortKey.REVENUE: lambda r: r.revenue,
    SortKey.NET_INCOME: lambda r: r.net_income,
}


def sort_records(
    records: Iterable[IncomeStatementRecord],
    spec: SortSpec,
) -> list[IncomeStatementRecord]:
    """Return a new list ordered by spec.key.

    sorted() is stable and reverse=True keeps equal keys in input order,
    so ties never move in either direction.
    """
    return sorted(
        records,
        key=_SORT_FIELDS[spec.key],
        reverse=spec.direction == SortDirection.DESC,
    )


@lru_cache(maxsize=64)
def _filter_and_sort_cached(
    records: tuple[IncomeStatementRecord, ...],
    criteria: FilterCriteria,
    spec: SortSpec,
) -> tuple[IncomeStatementRecord, ...]:
    return tuple(sort_records(filter_records(records, criteria), spec))


def filter_and_sort(
    records: Sequence[IncomeStatementRecord],
    criteria: FilterCriteria,
    spec: SortSpec,
) -> list[IncomeStatementRecord]:
    """filter_records() then sort_records(), memoized on the full input."""
    return list(_filter_and_sort_cached(tuple(records), criteria, spec))


# ═══════════════════════════════════════════════════════════════════════════
#  Derived chart series
# ═══════════════════════════════════════════════════════════════════════════

def operating_margin_percent(record: IncomeStatementRecord) -> float | None:
    """Operating income / revenue as a percentage (2 dp).  None when undefined."""
    if not record.revenue:
        return None
    pct = record.operating_income / record.revenue * 100
    if math.isnan(pct) or math.isinf(pct):
        return None
    return round(pct, 2)


def chart_label(d: dt.date) -> str:
    """Abbreviated month + year, e.g. 'Sep 2023'."""
    return d.strftime("%b %Y")


def derive_chart_series(records: Sequence[IncomeStatementRecord]) -> list[ChartPoint]:
    """Map records to chart points and reverse them.

    The table shows the most recent period first; charts read left to
    right, so the mapped sequence is flipped.
    """
    points = [
        ChartPoint(
            label=chart_label(r.date),
            revenue_billions=r.revenue / BILLION,
            operating_margin_percent=operating_margin_percent(r),
            net_income_billions=r.net_income / BILLION,
        )
        for r in records
    ]
    points.reverse()
    return points
