"""Tests for the end-of-run summary."""

import io

import pytest
from rich.console import Console

from pkgstats.crawler.models import RepoResult
from pkgstats.store.report import build_table, print_report, summarize


@pytest.fixture
def results():
    return {
        "org/a": RepoResult(name="org/a", used=True, stars=10),
        "org/b": RepoResult(name="org/b", used=False, stars=50),
        "org/c": RepoResult(name="org/c", used=True, stars=30),
    }


def test_summarize(results):
    assert summarize(results) == {
        "repositories_cached": 3,
        "repositories_using": 2,
        "stars_using": 40,
    }


def test_table_is_limited_to_top(results):
    table = build_table("acme/widget", results, top=1)
    assert table.row_count == 1


def test_table_lists_only_users(results):
    assert build_table("acme/widget", results, top=10).row_count == 2


def test_print_report(results, monkeypatch):
    buf = io.StringIO()
    monkeypatch.setattr(
        "pkgstats.store.report.console",
        Console(file=buf, color_system=None, highlight=False, width=120),
    )

    print_report("acme/widget", results, top=0)

    out = buf.getvalue()
    assert "Repositories in cache: 3" in out
    assert "Using acme/widget: 2" in out
    assert "Combined stars of users: 40" in out
