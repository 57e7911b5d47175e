"""Main entry point for pkgstats."""

import argparse
import os
import sys
from pathlib import Path

from rich.console import Console

from .config import apply_overrides, load_config
from .context import Context
from .crawler.github_client import GitHubClient
from .crawler.models import RepoResult, SearchSession
from .crawler.search import SearchController
from .errors import PkgstatsError, SearchError
from .store.cache import CacheStore, cache_path_for, merge_results
from .store.report import print_report
from .supervisor import Supervisor

console = Console()


def run_search(
    config: dict,
    package: str,
    client,
    context: Context,
) -> dict[str, RepoResult]:
    """Load the cache, search for new repositories and persist the merged set.

    Partial results are persisted when the search is cancelled or fails.
    """
    cache_path = cache_path_for(package, config["cache"]["dir"])
    search_config = config["search"]

    with CacheStore(cache_path) as store:
        cached = store.load()

        session = SearchSession(
            package=package,
            client=client,
            cache=cached,
            pagination_delay=float(config["delays"]["pagination"]),
            repo_delay=float(config["delays"]["repository"]),
            manifest_filename=config["manifest"]["filename"],
        )
        controller = SearchController(session, context)

        try:
            found = controller.run(
                search_config["query"],
                sort=search_config["sort"],
                order=search_config["order"],
                per_page=int(search_config["per_page"]),
            )
        except Exception as e:
            partial = e.partial if isinstance(e, SearchError) else {}
            console.print("[yellow]Search failed, saving partial results[/yellow]")
            store.persist(merge_results(cached, merge_results(partial, controller.collected())))
            raise

        results = merge_results(cached, found)
        store.persist(results)

    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="pkgstats - Find popular GitHub repositories that directly require a Go module"
    )
    parser.add_argument(
        "--pkg",
        help="Go module path to search for, e.g. github.com/samber/lo",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("GITHUB_TOKEN"),
        help="GitHub access token (default: $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--cache-dir",
        help="Directory holding the per-package cache files (default: cache)",
    )
    parser.add_argument(
        "--query",
        help="Repository search query (default: 'language:go stars:>1000')",
    )
    parser.add_argument(
        "--per-page",
        type=int,
        help="Repositories per search page (default: 50)",
    )
    parser.add_argument(
        "--pagination-delay",
        type=float,
        help="Seconds to wait between search pages (default: 7)",
    )
    parser.add_argument(
        "--repo-delay",
        type=float,
        help="Seconds to wait after each scanned repository (default: 7)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=20,
        help="Number of repositories to show in the summary, 0 to disable (default: 20)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.pkg or not args.token:
        parser.error("missing package name (--pkg) or GitHub access token (--token)")

    config = load_config(Path(args.config) if args.config else None)
    config = apply_overrides(config, args)

    client = GitHubClient(token=args.token, per_page=int(config["search"]["per_page"]))
    if not client.authenticate():
        raise SystemExit(1)

    console.print(f"[blue]Searching for repositories using {args.pkg}[/blue]")

    outcome: dict[str, dict[str, RepoResult]] = {}

    def pipeline(context: Context) -> None:
        outcome["results"] = run_search(config, args.pkg, client, context)

    supervisor = Supervisor()
    try:
        supervisor.run(pipeline)
    except PkgstatsError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if "results" in outcome:
        print_report(args.pkg, outcome["results"], top=args.top)


if __name__ == "__main__":
    main(sys.argv[1:])
