"""Sequential, rate-limited scanning of a page of repositories."""

from rich.console import Console

from ..context import Context
from ..errors import ManifestSearchError, ScanError
from ..extractors.inspector import ManifestInspector
from .models import RepoCandidate, RepoResult, SearchSession

console = Console()


class RepositoryScanner:
    """Inspects the candidates of one search page, one at a time."""

    def __init__(
        self,
        session: SearchSession,
        context: Context,
        inspector: ManifestInspector | None = None,
    ):
        self.session = session
        self.context = context
        self.inspector = inspector or ManifestInspector(
            session.client, session.manifest_filename
        )
        # Results of the page currently being scanned.
        self.pending: dict[str, RepoResult] = {}

    def scan_page(self, candidates: list[RepoCandidate]) -> dict[str, RepoResult]:
        """Scan candidates in order and return results keyed by full name.

        Cached repositories are returned as cached without being scanned.
        On cancellation the results gathered so far are returned.
        """
        results: dict[str, RepoResult] = {}
        self.pending = results

        for repo in candidates:
            if self.context.done():
                if self.context.cancelled():
                    console.print("[yellow]Context canceled, stopping scan...[/yellow]")
                    return results
                raise ScanError(f"scan stopped: {self.context.err()}")

            if not repo.eligible:
                console.print(
                    f"[yellow]Skipping archived, disabled or forked repository: "
                    f"{repo.full_name}[/yellow]"
                )
                continue

            cached = self.session.cache.get(repo.full_name)
            if cached is not None:
                previous = "found" if cached.used else "not found"
                console.print(f"Skipping repository: {repo.full_name} previously {previous}")
                results[repo.full_name] = cached
                continue

            console.print(f"Checking repository: {repo.full_name}")
            try:
                used = self.inspector.inspect(repo, self.session.package)
            except ManifestSearchError as e:
                console.print(f"[red]✗[/red] {e}")
            else:
                if not used:
                    console.print(
                        f"  Package {self.session.package} not found in {repo.full_name}"
                    )
                results[repo.full_name] = RepoResult(
                    name=repo.full_name,
                    used=used,
                    stars=repo.stars,
                )

            self._throttle()

        return results

    def _throttle(self) -> None:
        delay = self.session.repo_delay
        if delay <= 0:
            return
        console.print(f"[dim]Sleeping for {delay:g} seconds between repositories[/dim]")
        if not self.context.sleep(delay):
            console.print("[dim]Sleep was interrupted[/dim]")
