"""Shared data models for the repository search."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RepoResult:
    """Whether a repository directly requires the package."""
    name: str
    used: bool
    stars: int


@dataclass
class RepoCandidate:
    """Repository metadata from a search page."""
    full_name: str
    owner: str
    name: str
    stars: int = 0
    archived: bool = False
    disabled: bool = False
    fork: bool = False

    @property
    def eligible(self) -> bool:
        return not (self.archived or self.disabled or self.fork)


@dataclass
class RepositoryPage:
    """One page of repository search results."""
    candidates: list[RepoCandidate]
    page: int
    next_page: int | None = None


@dataclass
class ManifestMatch:
    """A manifest file located by code search."""
    path: str
    html_url: str = ""


@dataclass
class SearchSession:
    """State for a single run. Never persisted."""
    package: str
    client: Any
    cache: dict[str, RepoResult] = field(default_factory=dict)
    pagination_delay: float = 7.0
    repo_delay: float = 7.0
    manifest_filename: str = "go.mod"
