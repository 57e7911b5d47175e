"""Tests for the repository scanner."""

import pytest

from conftest import PACKAGE, FakeGitHub, RecordingContext, go_mod, make_candidate
from pkgstats.crawler.models import RepoResult, SearchSession
from pkgstats.crawler.scanner import RepositoryScanner
from pkgstats.errors import ScanError


def _session(client, cache=None, repo_delay=7):
    return SearchSession(package=PACKAGE, client=client, cache=cache or {}, repo_delay=repo_delay)


def test_scans_each_candidate(session, fake_client, context):
    scanner = RepositoryScanner(session, context)
    results = scanner.scan_page(fake_client.pages[0])

    assert results == {
        "org/repo1": RepoResult(name="org/repo1", used=True, stars=5000),
        "org/repo2": RepoResult(name="org/repo2", used=False, stars=3000),
    }


def test_results_keep_candidate_order(session, fake_client, context):
    results = RepositoryScanner(session, context).scan_page(fake_client.pages[0])
    assert list(results) == ["org/repo1", "org/repo2"]


def test_delay_after_every_scanned_repository(session, fake_client, context):
    RepositoryScanner(session, context).scan_page(fake_client.pages[0])
    assert context.sleeps == [7, 7]


@pytest.mark.parametrize("flag", ["archived", "disabled", "fork"])
def test_ineligible_repositories_are_skipped(flag, context):
    client = FakeGitHub()
    repo = make_candidate("org/skip", **{flag: True})

    results = RepositoryScanner(_session(client), context).scan_page([repo])

    assert results == {}
    assert client.scanned() == []
    assert context.sleeps == []


def test_cached_repository_is_reemitted_unchanged(cached_result, context):
    client = FakeGitHub()
    session = _session(client, cache={cached_result.name: cached_result})

    results = RepositoryScanner(session, context).scan_page(
        [make_candidate(cached_result.name, stars=1)]
    )

    assert results[cached_result.name] is cached_result
    assert client.scanned() == []
    assert context.sleeps == []


def test_archived_cached_repository_is_not_emitted(cached_result, context):
    session = _session(FakeGitHub(), cache={cached_result.name: cached_result})
    repo = make_candidate(cached_result.name, archived=True)

    assert RepositoryScanner(session, context).scan_page([repo]) == {}


def test_code_search_error_skips_repository_but_still_throttles(context):
    client = FakeGitHub(
        manifests={"org/ok": ["go.mod"]},
        files={("org/ok", "go.mod"): go_mod(f"{PACKAGE} v1.0.0")},
    )
    client.failing_code_search.add("org/limited")

    results = RepositoryScanner(_session(client), context).scan_page([
        make_candidate("org/limited"),
        make_candidate("org/ok"),
    ])

    assert list(results) == ["org/ok"]
    assert context.sleeps == [7, 7]


def test_cancellation_returns_partial_results(fake_client):
    context = RecordingContext(cancel_on_sleep=1)
    session = _session(fake_client)
    candidates = fake_client.pages[0] + [make_candidate("org/repo3")]

    results = RepositoryScanner(session, context).scan_page(candidates)

    assert list(results) == ["org/repo1"]
    assert fake_client.scanned() == ["org/repo1"]


def test_cancelled_before_start_scans_nothing(session, fake_client, context):
    context.cancel()
    assert RepositoryScanner(session, context).scan_page(fake_client.pages[0]) == {}
    assert fake_client.scanned() == []


def test_aborted_context_raises(session, fake_client, context):
    context.abort(RuntimeError("deadline exceeded"))
    with pytest.raises(ScanError, match="deadline exceeded"):
        RepositoryScanner(session, context).scan_page(fake_client.pages[0])


def test_zero_delay_does_not_sleep(fake_client, context):
    RepositoryScanner(_session(fake_client, repo_delay=0), context).scan_page(fake_client.pages[0])
    assert context.sleeps == []
