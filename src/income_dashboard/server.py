"""Income-Dashboard: MCP server exposing the income-statement dashboard.

Tool hierarchy
──────────────
    1. get_status             — fetch state for the configured symbol
    2. get_dashboard          — status + filtered/sorted rows + chart series
    3. get_income_statements  — formatted table rows only
    4. get_chart_series       — chart points only (earliest period first)

Every tool accepts the same optional filter bounds and sort selection.
The first call triggers the one-shot fetch and waits for it to settle.
"""

from __future__ import annotations

import logging
import threading

from fastmcp import FastMCP

from income_dashboard.config import get_config
from income_dashboard.controller import DashboardController
from income_dashboard.formatting import table_rows
from income_dashboard.models import FilterCriteria, SortDirection, SortKey, SortSpec
from income_dashboard.pipeline import derive_chart_series


mcp = FastMCP(name="Income-Dashboard")

# Lazy singleton — the fetch runs on first use. Tools only read from it;
# each call builds its own filter/sort so concurrent calls never mix views.
_controller: DashboardController | None = None
_controller_lock = threading.Lock()


def _get_controller() -> DashboardController:
    global _controller
    with _controller_lock:
        if _controller is None:
            _controller = DashboardController()
        controller = _controller
    controller.load()
    return controller


def _view(
    start_year: int | None,
    end_year: int | None,
    min_revenue: float | None,
    max_revenue: float | None,
    min_net_income: float | None,
    max_net_income: float | None,
    sort_key: str,
    sort_direction: str,
) -> tuple[FilterCriteria, SortSpec]:
    """Filter and sort for one tool call, built from its arguments."""
    criteria = FilterCriteria(
        start_year=start_year,
        end_year=end_year,
        min_revenue=min_revenue,
        max_revenue=max_revenue,
        min_net_income=min_net_income,
        max_net_income=max_net_income,
    )
    spec = SortSpec(key=SortKey(sort_key), direction=SortDirection(sort_direction))
    return criteria, spec


@mcp.tool()
def get_status() -> dict:
    """Fetch status for the configured symbol: loading, ready or error (+ message)."""
    c = _get_controller()
    return {"symbol": c.symbol, "status": c.status.value, "error": c.error,
            "total_records": len(c.records)}


@mcp.tool()
def get_dashboard(
    start_year: int | None = None,
    end_year: int | None = None,
    min_revenue: float | None = None,
    max_revenue: float | None = None,
    min_net_income: float | None = None,
    max_net_income: float | None = None,
    sort_key: str = "date",
    sort_direction: str = "desc",
) -> dict:
    """Full dashboard view for the configured symbol.

    Args:
        start_year / end_year: inclusive fiscal-year bounds
        min_revenue / max_revenue: inclusive revenue bounds in dollars
        min_net_income / max_net_income: inclusive net-income bounds in dollars
        sort_key: 'date', 'revenue' or 'netIncome'
        sort_direction: 'asc' or 'desc' (default most recent first)

    Returns status, the filtered/sorted records and the derived chart series.
    On a failed fetch only the status and error message are populated.
    """
    criteria, spec = _view(start_year, end_year, min_revenue, max_revenue,
                           min_net_income, max_net_income, sort_key, sort_direction)
    return _get_controller().snapshot(criteria, spec).model_dump(mode="json")


@mcp.tool()
def get_income_statements(
    start_year: int | None = None,
    end_year: int | None = None,
    min_revenue: float | None = None,
    max_revenue: float | None = None,
    min_net_income: float | None = None,
    max_net_income: float | None = None,
    sort_key: str = "date",
    sort_direction: str = "desc",
) -> list[dict]:
    """Formatted income-statement table rows (Date, Revenue, Net Income, ...)."""
    criteria, spec = _view(start_year, end_year, min_revenue, max_revenue,
                           min_net_income, max_net_income, sort_key, sort_direction)
    return table_rows(_get_controller().view_rows(criteria, spec))


@mcp.tool()
def get_chart_series(
    start_year: int | None = None,
    end_year: int | None = None,
    min_revenue: float | None = None,
    max_revenue: float | None = None,
    min_net_income: float | None = None,
    max_net_income: float | None = None,
    sort_key: str = "date",
    sort_direction: str = "desc",
) -> list[dict]:
    """Chart points: label, revenue and net income in billions, operating margin %.

    operating_margin_percent is null for periods with zero revenue.
    """
    criteria, spec = _view(start_year, end_year, min_revenue, max_revenue,
                           min_net_income, max_net_income, sort_key, sort_direction)
    rows = _get_controller().view_rows(criteria, spec)
    return [p.model_dump() for p in derive_chart_series(rows)]


# ═══════════════════════════════════════════════════════════════════════════
#  ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import sys

    logging.basicConfig(level=get_config().log_level.upper())

    # python -m income_dashboard.server --sse  for remote hosting;
    # default is STDIO for local MCP clients
    if "--sse" in sys.argv:
        mcp.run(transport="sse")
    else:
        mcp.run()
