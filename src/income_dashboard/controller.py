"""Dashboard state owner.

DashboardController holds everything the views read (fetched records,
filters, sort spec, fetch status) and exposes the only ways to change it:

  - start() / load()  → one-shot background fetch (loading → ready | error)
  - set_filters()     → replace the FilterCriteria (update_filter() for one field)
  - set_sort()        → toggle-select a sort key
  - set_status()      → record a fetch outcome

Derived views (rows, chart_series, table_rows, snapshot) are recomputed on
every read from the current state via the memoized pipeline.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Sequence

from income_dashboard.config import get_config
from income_dashboard.fmp_client import FetchError, FMPClient, get_fmp_client
from income_dashboard.formatting import table_rows
from income_dashboard.models import (
    ChartPoint,
    DashboardSnapshot,
    FetchStatus,
    FilterCriteria,
    IncomeStatementRecord,
    SortDirection,
    SortKey,
    SortSpec,
)
from income_dashboard.pipeline import derive_chart_series, filter_and_sort

log = logging.getLogger(__name__)

# Table opens most-recent-first
DEFAULT_SORT = SortSpec(key=SortKey.DATE, direction=SortDirection.DESC)

_FILTER_FIELDS: dict[str, str] = {}
for _name, _field in FilterCriteria.model_fields.items():
    _FILTER_FIELDS[_name] = _name
    if _field.alias:
        _FILTER_FIELDS[_field.alias] = _name


class DashboardController:
    """Single owner of dashboard state for one symbol."""

    def __init__(
        self,
        symbol: str | None = None,
        client: FMPClient | None = None,
        period: str | None = None,
    ):
        config = get_config()
        self.symbol = (symbol or config.dashboard_symbol).upper()
        self.period = period or config.statement_period
        self._client = client

        self._records: tuple[IncomeStatementRecord, ...] = ()
        self.filters = FilterCriteria()
        self.sort = DEFAULT_SORT
        self.status = FetchStatus.LOADING
        self.error: str | None = None

        self._lock = threading.Lock()
        self._future: Future | None = None

    # ── Fetch ─────────────────────────────────────────────────────────

    def start(self) -> Future:
        """Launch the fetch in the background.  Later calls return the same future."""
        with self._lock:
            if self._future is None:
                executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="income-fetch")
                self._future = executor.submit(self._fetch)
                # Worker thread exits once the single task is done
                executor.shutdown(wait=False)
            return self._future

    def load(self) -> FetchStatus:
        """Start the fetch if needed and block until it settles."""
        return self.start().result()

    def _fetch(self) -> FetchStatus:
        try:
            client = self._client or get_fmp_client()
            records = client.fetch_income_statements(self.symbol, self.period)
        except FetchError as exc:
            log.warning("Income statement fetch failed for %s: %s", self.symbol, exc)
            self.set_status(FetchStatus.ERROR, error=str(exc))
        except Exception as exc:
            log.exception("Unexpected error fetching income statements for %s", self.symbol)
            self.set_status(FetchStatus.ERROR, error=f"Failed to fetch data: {exc}")
        else:
            self.set_status(FetchStatus.READY, records=records)
        return self.status

    # ── Mutation entry points ─────────────────────────────────────────

    def set_status(
        self,
        status: FetchStatus | str,
        error: str | None = None,
        records: Sequence[IncomeStatementRecord] | None = None,
    ) -> None:
        """Record a fetch outcome.

        READY stores *records* and clears any error; ERROR drops records so
        no partial data is shown.
        """
        status = FetchStatus(status)
        with self._lock:
            if status == FetchStatus.ERROR:
                self._records = ()
                self.error = error or "Failed to fetch data"
            elif status == FetchStatus.READY:
                self._records = tuple(records or ())
                self.error = None
            else:
                self.error = None
            self.status = status

    def set_filters(self, criteria: FilterCriteria | None = None, **raw: Any) -> FilterCriteria:
        """Replace the filters, either with *criteria* or from raw field values."""
        if criteria is None:
            criteria = FilterCriteria.model_validate(raw)
        self.filters = criteria
        return criteria

    def update_filter(self, name: str, value: Any) -> FilterCriteria:
        """Change one bound (by field name or camelCase alias), keeping the rest."""
        field = _FILTER_FIELDS.get(name)
        if field is None:
            raise ValueError(f"Unknown filter: {name}")
        values = self.filters.model_dump()
        values[field] = value
        return self.set_filters(FilterCriteria.model_validate(values))

    def set_sort(self, key: SortKey | str | SortSpec) -> SortSpec:
        """Select a sort key.  Re-selecting the active key flips direction."""
        if isinstance(key, SortSpec):
            self.sort = key
        else:
            self.sort = self.sort.toggled(key)
        return self.sort

    # ── Derived views ─────────────────────────────────────────────────

    @property
    def records(self) -> tuple[IncomeStatementRecord, ...]:
        return self._records

    def view_rows(self, criteria: FilterCriteria, spec: SortSpec) -> list[IncomeStatementRecord]:
        """Records under an explicit filter/sort, leaving the stored view alone."""
        if self.status != FetchStatus.READY:
            return []
        return filter_and_sort(self._records, criteria, spec)

    @property
    def rows(self) -> list[IncomeStatementRecord]:
        """Filtered and sorted records; empty unless the fetch succeeded."""
        return self.view_rows(self.filters, self.sort)

    @property
    def chart_series(self) -> list[ChartPoint]:
        return derive_chart_series(self.rows)

    @property
    def table_rows(self) -> list[dict[str, str]]:
        return table_rows(self.rows)

    def snapshot(
        self,
        criteria: FilterCriteria | None = None,
        spec: SortSpec | None = None,
    ) -> DashboardSnapshot:
        """Serializable view; *criteria*/*spec* default to the stored filters and sort."""
        criteria = self.filters if criteria is None else criteria
        spec = self.sort if spec is None else spec
        rows = self.view_rows(criteria, spec)
        return DashboardSnapshot(
            symbol=self.symbol,
            status=self.status,
            error=self.error,
            filters=criteria,
            sort=spec,
            total_records=len(self._records),
            rows=[r.model_dump(mode="json", by_alias=True) for r in rows],
            chart_series=derive_chart_series(rows),
        )
