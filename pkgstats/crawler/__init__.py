"""Repository search and scanning."""

from .models import RepoCandidate, RepoResult, RepositoryPage, ManifestMatch, SearchSession
from .github_client import GitHubClient

__all__ = [
    "RepoCandidate",
    "RepoResult",
    "RepositoryPage",
    "ManifestMatch",
    "SearchSession",
    "GitHubClient",
]
