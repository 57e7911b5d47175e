"""Console summary of a finished run."""

from rich.console import Console
from rich.table import Table

from ..crawler.models import RepoResult
from .cache import sort_results

console = Console()


def summarize(results: dict[str, RepoResult]) -> dict:
    """Count scanned repositories and how many use the package."""
    used = [r for r in results.values() if r.used]
    return {
        "repositories_cached": len(results),
        "repositories_using": len(used),
        "stars_using": sum(r.stars for r in used),
    }


def build_table(package: str, results: dict[str, RepoResult], top: int = 20) -> Table:
    """Table of the most starred repositories that directly require ``package``."""
    table = Table(title=f"Top repositories using {package}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Repository")
    table.add_column("Stars", justify="right")

    using = [r for r in sort_results(results) if r.used]
    for rank, result in enumerate(using[:top], start=1):
        table.add_row(str(rank), result.name, f"{result.stars:,}")
    return table


def print_report(package: str, results: dict[str, RepoResult], top: int = 20) -> None:
    summary = summarize(results)
    console.print(f"\n[bold]Search Complete[/bold]")
    console.print(f"  Repositories in cache: {summary['repositories_cached']}")
    console.print(f"  Using {package}: {summary['repositories_using']}")
    console.print(f"  Combined stars of users: {summary['stars_using']:,}")

    if top > 0 and summary["repositories_using"]:
        console.print(build_table(package, results, top=top))
