"""Shared test fixtures."""

import pytest
from github import GithubException

from pkgstats.context import Context
from pkgstats.crawler.models import (
    ManifestMatch,
    RepoCandidate,
    RepoResult,
    RepositoryPage,
    SearchSession,
)

PACKAGE = "acme/widget"


def make_candidate(full_name: str, stars: int = 1000, **flags) -> RepoCandidate:
    owner, name = full_name.split("/")
    return RepoCandidate(full_name=full_name, owner=owner, name=name, stars=stars, **flags)


def go_mod(*requires: str, module: str = "example.com/app") -> bytes:
    """Build go.mod bytes with a require block."""
    lines = [f"module {module}", "", "go 1.22", "", "require ("]
    lines.extend(f"\t{req}" for req in requires)
    lines.append(")")
    return ("\n".join(lines) + "\n").encode()


class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(
        self,
        pages: list[list[RepoCandidate]] | None = None,
        manifests: dict[str, list[str]] | None = None,
        files: dict[tuple[str, str], bytes | Exception] | None = None,
    ):
        self.pages = pages or []
        self.manifests = manifests or {}
        self.files = files or {}
        self.failing_pages: set[int] = set()
        self.failing_code_search: set[str] = set()
        self.calls: list[tuple] = []

    def search_repositories(self, query, sort="stars", order="desc", per_page=50, page=1):
        self.calls.append(("search_repositories", page))
        if page in self.failing_pages:
            raise GithubException(500, {"message": "search unavailable"}, None)
        next_page = page + 1 if page < len(self.pages) else None
        candidates = self.pages[page - 1] if self.pages else []
        return RepositoryPage(candidates=list(candidates), page=page, next_page=next_page)

    def search_manifests(self, package, repo_full_name, filename="go.mod"):
        self.calls.append(("search_manifests", repo_full_name))
        if repo_full_name in self.failing_code_search:
            raise GithubException(403, {"message": "rate limit exceeded"}, None)
        return [ManifestMatch(path=p) for p in self.manifests.get(repo_full_name, [])]

    def download_file(self, repo_full_name, file_path):
        self.calls.append(("download_file", repo_full_name, file_path))
        data = self.files[(repo_full_name, file_path)]
        if isinstance(data, Exception):
            raise data
        return data

    def scanned(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "search_manifests"]


class RecordingContext(Context):
    """Context that records sleeps instead of blocking.

    ``cancel_on_sleep=n`` cancels during the n-th sleep.
    """

    def __init__(self, cancel_on_sleep: int | None = None):
        super().__init__()
        self.sleeps: list[float] = []
        self.cancel_on_sleep = cancel_on_sleep

    def sleep(self, seconds: float) -> bool:
        self.sleeps.append(seconds)
        if self.cancel_on_sleep is not None and len(self.sleeps) >= self.cancel_on_sleep:
            self.cancel()
        return not self.done()


@pytest.fixture
def context():
    return RecordingContext()


@pytest.fixture
def fake_client():
    """Two repositories on one page: one uses the package, one only indirectly."""
    return FakeGitHub(
        pages=[[
            make_candidate("org/repo1", stars=5000),
            make_candidate("org/repo2", stars=3000),
        ]],
        manifests={
            "org/repo1": ["go.mod"],
            "org/repo2": ["go.mod"],
        },
        files={
            ("org/repo1", "go.mod"): go_mod(f"{PACKAGE} v1.2.0"),
            ("org/repo2", "go.mod"): go_mod(f"{PACKAGE} v1.1.0 // indirect"),
        },
    )


@pytest.fixture
def session(fake_client):
    return SearchSession(
        package=PACKAGE,
        client=fake_client,
        cache={},
        pagination_delay=7,
        repo_delay=7,
    )


@pytest.fixture
def cached_result():
    return RepoResult(name="org/cached", used=True, stars=9000)
