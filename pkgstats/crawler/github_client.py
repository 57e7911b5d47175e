"""GitHub API client for repository search and manifest access."""

from github import Auth, Github, GithubException
from rich.console import Console

from ..errors import ManifestDownloadError
from .models import ManifestMatch, RepoCandidate, RepositoryPage

console = Console()

# GitHub never returns more than this many results for a search query.
SEARCH_RESULT_LIMIT = 1000

# Largest page the search API will serve.
MAX_PER_PAGE = 100


class GitHubClient:
    """Client for interacting with GitHub API."""

    def __init__(self, token: str, per_page: int = 50):
        per_page = min(per_page, MAX_PER_PAGE)
        self.per_page = per_page
        self.gh = Github(auth=Auth.Token(token), per_page=per_page)

    def authenticate(self) -> bool:
        """Verify authentication and connection."""
        try:
            user = self.gh.get_user()
            console.print(f"[green]✓[/green] Connected to GitHub")
            console.print(f"  User: {user.login}")
            return True
        except GithubException as e:
            console.print(f"[red]✗[/red] Authentication failed: {e}")
            return False

    def search_repositories(
        self,
        query: str,
        sort: str = "stars",
        order: str = "desc",
        per_page: int | None = None,
        page: int = 1,
    ) -> RepositoryPage:
        """Fetch one page (1-based) of repository search results."""
        if per_page is not None:
            per_page = min(per_page, MAX_PER_PAGE)
            if per_page != self.per_page:
                self.per_page = per_page
                self.gh.per_page = per_page

        results = self.gh.search_repositories(query, sort=sort, order=order)
        repos = results.get_page(page - 1)
        candidates = [self._repo_to_candidate(repo) for repo in repos]

        # A short page is the last one. A full page may be followed by an empty one.
        next_page = None
        if len(candidates) == self.per_page and page * self.per_page < SEARCH_RESULT_LIMIT:
            next_page = page + 1

        return RepositoryPage(candidates=candidates, page=page, next_page=next_page)

    def search_manifests(
        self,
        package: str,
        repo_full_name: str,
        filename: str = "go.mod",
    ) -> list[ManifestMatch]:
        """Find manifest files in a repository that mention the package."""
        results = self.gh.search_code(
            f"{package} repo:{repo_full_name} filename:{filename}"
        )
        return [
            ManifestMatch(path=item.path, html_url=item.html_url or "")
            for item in results.get_page(0)
        ]

    def download_file(self, repo_full_name: str, file_path: str) -> bytes:
        """Get raw file content."""
        try:
            repo = self.gh.get_repo(repo_full_name, lazy=True)
            content = repo.get_contents(file_path)
        except GithubException as e:
            raise ManifestDownloadError(
                f"could not download {repo_full_name}/{file_path}: {e}"
            ) from e

        if isinstance(content, list):
            raise ManifestDownloadError(
                f"{repo_full_name}/{file_path} is a directory"
            )
        # Files over 1 MB come back without inline content.
        if content.encoding != "base64":
            raise ManifestDownloadError(
                f"{repo_full_name}/{file_path} has unsupported encoding: {content.encoding}"
            )
        return content.decoded_content

    def _repo_to_candidate(self, repo) -> RepoCandidate:
        """Convert a PyGithub repository object to RepoCandidate."""
        return RepoCandidate(
            full_name=repo.full_name,
            owner=repo.owner.login if repo.owner else repo.full_name.split("/")[0],
            name=repo.name,
            stars=repo.stargazers_count or 0,
            archived=bool(repo.archived),
            disabled=bool(getattr(repo, "disabled", False)),
            fork=bool(repo.fork),
        )
