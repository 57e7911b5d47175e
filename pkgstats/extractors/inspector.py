"""Checks whether a repository directly requires a Go module."""

from github import GithubException
from rich.console import Console

from ..crawler.models import RepoCandidate
from ..errors import ManifestDownloadError, ManifestParseError, ManifestSearchError
from .gomod import parse_go_mod

console = Console()


class ManifestInspector:
    """Locates a repository's go.mod files and looks for a direct requirement."""

    def __init__(self, client, manifest_filename: str = "go.mod"):
        self.client = client
        self.manifest_filename = manifest_filename

    def inspect(self, repo: RepoCandidate | str, package: str) -> bool:
        """Return True if any manifest in ``repo`` directly requires ``package``.

        Download and parse failures only skip the affected file. A failing
        code search raises ManifestSearchError.
        """
        full_name = repo.full_name if isinstance(repo, RepoCandidate) else repo

        try:
            matches = self.client.search_manifests(
                package, full_name, self.manifest_filename
            )
        except (GithubException, OSError) as e:
            raise ManifestSearchError(
                f"code search failed for {full_name}: {e}"
            ) from e

        console.print(f"  {len(matches)} {self.manifest_filename} file(s) in {full_name}")

        for match in matches:
            try:
                data = self.client.download_file(full_name, match.path)
            except (ManifestDownloadError, GithubException, OSError) as e:
                console.print(f"  [red]✗[/red] Error downloading {match.path}: {e}")
                continue

            try:
                mod = parse_go_mod(data)
            except ManifestParseError as e:
                console.print(f"  [red]✗[/red] Error parsing {match.path}: {e}")
                continue

            req = mod.direct_requirement(package)
            if req is not None:
                console.print(
                    f"  [green]✓[/green] Found {package}@{req.version} in {full_name}"
                )
                return True

        return False
