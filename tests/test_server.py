"""Tests for the MCP tool surface."""

import threading

import pytest

from income_dashboard import server
from income_dashboard.controller import DEFAULT_SORT, DashboardController
from income_dashboard.models import FilterCriteria, SortDirection, SortKey

from conftest import StubClient


def _call(tool, **kwargs):
    """Invoke a registered tool's underlying function."""
    return getattr(tool, "fn", tool)(**kwargs)


@pytest.fixture
def controller(monkeypatch, records):
    c = DashboardController(client=StubClient(records=records))
    c.load()
    monkeypatch.setattr(server, "_controller", c)
    return c


def test_server_name():
    assert server.mcp.name == "Income-Dashboard"


def test_view_builds_filters_and_sort():
    criteria, spec = server._view(2021, None, None, None, None, 98e9, "revenue", "desc")
    assert criteria == FilterCriteria(start_year=2021, max_net_income=98e9)
    assert spec.key == SortKey.REVENUE
    assert spec.direction == SortDirection.DESC


def test_view_rejects_unknown_sort():
    with pytest.raises(ValueError):
        server._view(None, None, None, None, None, None, "eps", "asc")


def test_tools_leave_controller_view_untouched(controller):
    rows = _call(server.get_income_statements, start_year=2021, max_net_income=98e9,
                 sort_key="revenue", sort_direction="desc")
    assert [r["Date"] for r in rows] == ["Sep 30, 2023", "Sep 25, 2021"]
    assert controller.filters == FilterCriteria()
    assert controller.sort == DEFAULT_SORT


def test_chart_series_tool(controller):
    points = _call(server.get_chart_series, end_year=2020)
    assert [p["label"] for p in points] == ["Sep 2019", "Sep 2020"]


def test_dashboard_tool_reports_its_own_view(controller):
    snap = _call(server.get_dashboard, start_year=2022, sort_key="date", sort_direction="asc")
    assert snap["status"] == "ready"
    assert snap["filters"]["start_year"] == 2022
    assert snap["sort"] == {"key": "date", "direction": "asc"}
    assert [r["date"] for r in snap["rows"]] == ["2022-09-24", "2023-09-30"]


def test_concurrent_tool_calls_keep_their_own_filters(controller):
    barrier = threading.Barrier(2)
    results: dict[str, set] = {"only2023": set(), "upto2019": set()}

    def run(name, **kwargs):
        barrier.wait()
        for _ in range(200):
            rows = _call(server.get_income_statements, **kwargs)
            results[name].add(tuple(r["Date"] for r in rows))

    threads = [
        threading.Thread(target=run, args=("only2023",), kwargs={"start_year": 2023}),
        threading.Thread(target=run, args=("upto2019",), kwargs={"end_year": 2019}),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results["only2023"] == {("Sep 30, 2023",)}
    assert results["upto2019"] == {("Sep 28, 2019",)}


def test_get_controller_is_lazy_singleton(monkeypatch, records):
    created = []
    client = StubClient(records=records)

    class _Controller(DashboardController):
        def __init__(self):
            super().__init__(client=client)
            created.append(self)

    monkeypatch.setattr(server, "DashboardController", _Controller)
    monkeypatch.setattr(server, "_controller", None)

    barrier = threading.Barrier(4)
    seen = []

    def first_call():
        barrier.wait()
        seen.append(server._get_controller())

    threads = [threading.Thread(target=first_call) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(created) == 1
    assert all(c is created[0] for c in seen)
    assert len(client.calls) == 1
    assert created[0].status.value == "ready"
