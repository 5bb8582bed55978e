"""Tests for the terminal viewer's argument handling."""

import sys

import pytest

import dashboard_tools
from income_dashboard import fmp_client

from conftest import FakeResponse


@pytest.fixture
def fetches(monkeypatch, payload):
    recorded = []

    def fake_get(url, params=None, timeout=None, **kwargs):
        recorded.append(url)
        return FakeResponse(200, payload)

    monkeypatch.setattr(fmp_client.requests, "get", fake_get)
    return recorded


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["dashboard_tools.py", *args])
    dashboard_tools.main()


def test_unknown_filter_is_reported(monkeypatch, capsys, fetches):
    _run(monkeypatch, "table", "AAPL", "minEps=1")
    out = capsys.readouterr().out
    assert "Unknown filter: minEps" in out
    assert fetches == []


def test_unknown_sort_key_is_reported(monkeypatch, capsys, fetches):
    _run(monkeypatch, "chart", "sort=eps")
    out = capsys.readouterr().out
    assert "Unknown sort key: eps" in out
    assert fetches == []


def test_table_with_filters(monkeypatch, capsys, fetches):
    _run(monkeypatch, "table", "AAPL", "startYear=2022", "sort=revenue")
    out = capsys.readouterr().out
    assert "sort=revenue asc" in out
    assert "Sep 24, 2022" in out
    assert "Sep 25, 2021" not in out
    assert "Showing 2 of 5 record(s)" in out
    assert len(fetches) == 1
