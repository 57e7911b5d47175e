"""Paginated repository search driving the scanner page by page."""

from enum import Enum

from github import GithubException
from rich.console import Console

from ..context import Context
from ..errors import ScanError, SearchError
from ..store.cache import merge_results
from .models import RepoResult, SearchSession
from .scanner import RepositoryScanner

console = Console()


class SearchState(str, Enum):
    """States of the search loop."""

    FETCHING = "fetching"
    SCANNING = "scanning"
    DELAYING = "delaying"
    DONE = "done"
    CANCELLED = "cancelled"


class SearchController:
    """Walks the search result pages and collects scan results.

    Usage::

        controller = SearchController(session, context)
        results = controller.run("language:go stars:>1000")
    """

    def __init__(
        self,
        session: SearchSession,
        context: Context,
        scanner: RepositoryScanner | None = None,
    ):
        self.session = session
        self.context = context
        self.scanner = scanner or RepositoryScanner(session, context)
        self.state: SearchState | None = None
        self.history: list[SearchState] = []
        self.pages_scanned = 0
        self.results: dict[str, RepoResult] = {}

    def _set_state(self, state: SearchState) -> None:
        self.state = state
        self.history.append(state)

    def collected(self) -> dict[str, RepoResult]:
        """Results gathered so far, including a page still being scanned."""
        return merge_results(self.results, getattr(self.scanner, "pending", {}))

    def run(
        self,
        query: str,
        sort: str = "stars",
        order: str = "desc",
        per_page: int = 50,
    ) -> dict[str, RepoResult]:
        """Search, scan every page and return the accumulated results.

        Cancellation returns what was collected so far. A failed search call
        raises SearchError with the partial results attached.
        """
        self.results = results = {}
        page = 1
        self._set_state(SearchState.FETCHING)

        while True:
            if self.context.done():
                if self.context.cancelled():
                    console.print("[yellow]Context canceled, stopping search...[/yellow]")
                    self._set_state(SearchState.CANCELLED)
                    return results
                raise SearchError(f"search stopped: {self.context.err()}", partial=results)

            if self.state == SearchState.FETCHING:
                console.print(f"[blue]Searching page {page}: {query}[/blue]")
                try:
                    result_page = self.session.client.search_repositories(
                        query, sort=sort, order=order, per_page=per_page, page=page
                    )
                except (GithubException, OSError) as e:
                    raise SearchError(
                        f"error searching repositories: {e}", partial=results
                    ) from e
                self._set_state(SearchState.SCANNING)

            elif self.state == SearchState.SCANNING:
                try:
                    page_results = self.scanner.scan_page(result_page.candidates)
                except ScanError as e:
                    console.print(f"[red]✗[/red] Error scanning page {page}: {e}")
                    page_results = {}
                results = self.results = merge_results(results, page_results)
                self.pages_scanned += 1

                if result_page.next_page is None:
                    console.print(f"[bold]Search finished after {self.pages_scanned} page(s)[/bold]")
                    self._set_state(SearchState.DONE)
                    return results
                self._set_state(SearchState.DELAYING)

            elif self.state == SearchState.DELAYING:
                delay = self.session.pagination_delay
                if delay > 0:
                    console.print(f"[dim]Sleeping for {delay:g} seconds between pages[/dim]")
                    if not self.context.sleep(delay):
                        console.print("[dim]Sleep was interrupted[/dim]")
                page = result_page.next_page
                self._set_state(SearchState.FETCHING)
