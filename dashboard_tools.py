#!/usr/bin/env python3
"""Standalone CLI to view the income-statement dashboard from the terminal.

Usage — run any of these from the project root:

  # Formatted table (most recent first)
  python dashboard_tools.py table
  python dashboard_tools.py table MSFT

  # Filters and sort as key=value pairs
  python dashboard_tools.py table AAPL startYear=2020 sort=revenue
  python dashboard_tools.py table AAPL minRevenue=380000000000 sort=netIncome sort=netIncome

  # Chart series (earliest period first)
  python dashboard_tools.py chart AAPL endYear=2022

  # Fetch status only
  python dashboard_tools.py status

Repeating sort=<key> toggles the direction, like clicking a column header
twice. FMP_API_KEY must be set in the environment or .env.
"""

from __future__ import annotations

import logging
import os
import sys

# Ensure the src directory is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))


def _header(title: str):
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def _load(symbol: str | None, options: list[str]):
    """Build a controller, apply key=value options, and run the fetch.

    Returns None (after printing why) when an option names an unknown
    filter or sort key.
    """
    from income_dashboard.controller import DashboardController

    controller = DashboardController(symbol=symbol)
    for opt in options:
        name, _, value = opt.partition("=")
        try:
            if name == "sort":
                controller.set_sort(value)
            else:
                controller.update_filter(name, value)
        except ValueError:
            label = f"sort key: {value}" if name == "sort" else f"filter: {name}"
            print(f"Unknown {label}")
            print("Filters: startYear endYear minRevenue maxRevenue minNetIncome maxNetIncome")
            print("Sort keys: date revenue netIncome")
            return None
    controller.load()
    return controller


def _report_error(controller) -> bool:
    if controller.error:
        print(f"  ERROR: {controller.error}")
        return True
    return False


def cmd_table(symbol: str | None, options: list[str]):
    """Print the filtered/sorted income-statement table."""
    c = _load(symbol, options)
    if c is None:
        return
    _header(f"Income Statements: {c.symbol} | sort={c.sort.key.value} {c.sort.direction.value}")
    if _report_error(c):
        return
    from income_dashboard.formatting import records_frame
    frame = records_frame(c.rows)
    if frame.empty:
        print("  No records match the filters.")
        return
    print(frame.to_string(index=False))
    print(f"\n  Showing {len(frame)} of {len(c.records)} record(s)")


def cmd_chart(symbol: str | None, options: list[str]):
    """Print the derived chart series."""
    c = _load(symbol, options)
    if c is None:
        return
    _header(f"Chart Series: {c.symbol}")
    if _report_error(c):
        return
    from income_dashboard.formatting import format_percent
    series = c.chart_series
    if not series:
        print("  No records match the filters.")
        return
    print(f"  {'Period':10s}  {'Revenue (B)':>12s}  {'Op Margin':>10s}  {'Net Income (B)':>15s}")
    print(f"  {'-'*10}  {'-'*12}  {'-'*10}  {'-'*15}")
    for p in series:
        print(f"  {p.label:10s}  {p.revenue_billions:>12.3f}  "
              f"{format_percent(p.operating_margin_percent):>10s}  {p.net_income_billions:>15.3f}")


def cmd_status(symbol: str | None, options: list[str]):
    """Run the fetch and report its outcome."""
    c = _load(symbol, options)
    if c is None:
        return
    _header(f"Status: {c.symbol}")
    print(f"  Status:   {c.status.value}")
    print(f"  Records:  {len(c.records)}")
    if c.records:
        from income_dashboard.formatting import format_billions, format_date
        latest = max(c.records, key=lambda r: r.date)
        print(f"  Latest:   {format_date(latest.date)}  revenue {format_billions(latest.revenue)}")
    if c.error:
        print(f"  Error:    {c.error}")


COMMANDS = {
    "table": (cmd_table, "[symbol] [key=value ...]"),
    "chart": (cmd_chart, "[symbol] [key=value ...]"),
    "status": (cmd_status, "[symbol]"),
}


def main():
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help", "help"):
        print("\nIncome Dashboard — Terminal Viewer")
        print("=" * 36)
        print("\nUsage: python dashboard_tools.py <command> [args]\n")
        print("Commands:")
        for cmd, (_, args) in COMMANDS.items():
            print(f"  {cmd:8s}  {args}")
        print()
        print("Filter keys: startYear endYear minRevenue maxRevenue minNetIncome maxNetIncome")
        print("Sort keys:   sort=date | sort=revenue | sort=netIncome")
        return

    cmd_name = sys.argv[1].lower()
    if cmd_name not in COMMANDS:
        print(f"Unknown command: {cmd_name}")
        print(f"Available: {', '.join(COMMANDS.keys())}")
        return

    from income_dashboard.config import get_config
    logging.basicConfig(level=get_config().log_level.upper())

    fn, _ = COMMANDS[cmd_name]
    args = sys.argv[2:]
    symbol = None
    if args and "=" not in args[0]:
        symbol = args.pop(0)
    fn(symbol, args)


if __name__ == "__main__":
    main()
