"""CSV cache of already-scanned repositories.

One file per package under the cache directory. Rows are
``owner/name,true|false,stars`` with no header, sorted by stars descending.
The file is truncated and rewritten in place on every persist, so an
interrupted write can leave it partially written.
"""

import csv
import io
from pathlib import Path

from rich.console import Console

from ..crawler.models import RepoResult
from ..errors import CacheCorruptError, CacheIOError

console = Console()

DEFAULT_CACHE_DIR = "cache"


def cache_path_for(package: str, cache_dir: Path | str = DEFAULT_CACHE_DIR) -> Path:
    """Get the cache file path for a package."""
    return Path(cache_dir) / f"{package.replace('/', '-')}.csv"


def ensure_cache_dir(cache_dir: Path | str) -> Path:
    """Create the cache directory if it doesn't exist."""
    path = Path(cache_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheIOError(f"error creating cache directory {path}: {e}") from e
    return path


def merge_results(
    base: dict[str, RepoResult],
    new: dict[str, RepoResult],
) -> dict[str, RepoResult]:
    """Union of two result maps. Entries already in ``base`` are never replaced."""
    merged = dict(base)
    for name, result in new.items():
        if name not in merged:
            merged[name] = result
    return merged


def sort_results(results: dict[str, RepoResult]) -> list[RepoResult]:
    """Order results by stars, most popular first. Ties keep insertion order."""
    return sorted(results.values(), key=lambda r: r.stars, reverse=True)


def parse_rows(rows) -> dict[str, RepoResult]:
    """Build results from CSV rows, rejecting anything malformed."""
    results: dict[str, RepoResult] = {}
    for lineno, row in enumerate(rows, start=1):
        if not row:
            continue
        if len(row) != 3:
            raise CacheCorruptError(
                f"row {lineno}: expected 3 fields, got {len(row)}"
            )
        name, used, stars = row
        if not (stars.isascii() and stars.isdigit()):
            raise CacheCorruptError(
                f"row {lineno}: invalid value for star count: {stars!r}"
            )
        results[name] = RepoResult(name=name, used=used == "true", stars=int(stars))
    return results


def format_rows(results: dict[str, RepoResult]) -> str:
    """Serialize results to CSV text in persisted order."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for result in sort_results(results):
        writer.writerow([result.name, "true" if result.used else "false", result.stars])
    return buf.getvalue()


class CacheStore:
    """Owns the cache file for the duration of a run.

    Usage::

        with CacheStore(cache_path_for(pkg)) as store:
            cached = store.load()
            ...
            store.persist(results)
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._file = None

    def __enter__(self) -> "CacheStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """Open the cache file for reading and writing, creating it if absent."""
        ensure_cache_dir(self.path.parent)
        try:
            self.path.touch(exist_ok=True)
            self._file = self.path.open("r+", encoding="utf-8", newline="")
        except OSError as e:
            raise CacheIOError(f"error opening file {self.path}: {e}") from e

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def load(self) -> dict[str, RepoResult]:
        """Read every cached result."""
        if self._file is None:
            if not self.path.exists():
                return {}
            try:
                text = self.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise CacheIOError(f"error reading file {self.path}: {e}") from e
        else:
            try:
                self._file.seek(0)
                text = self._file.read()
            except (OSError, UnicodeDecodeError) as e:
                raise CacheIOError(f"error reading file {self.path}: {e}") from e

        results = parse_rows(csv.reader(io.StringIO(text)))
        console.print(f"Loaded {len(results)} cached repositories from {self.path}")
        return results

    def persist(self, results: dict[str, RepoResult]) -> None:
        """Truncate the file and rewrite it with ``results``."""
        text = format_rows(results)
        try:
            if self._file is None:
                ensure_cache_dir(self.path.parent)
                with self.path.open("w", encoding="utf-8", newline="") as f:
                    f.write(text)
            else:
                self._file.seek(0)
                self._file.truncate()
                self._file.write(text)
                self._file.flush()
        except OSError as e:
            raise CacheIOError(f"error writing to file {self.path}: {e}") from e

        console.print(f"[green]✓[/green] Wrote {len(results)} repositories to {self.path}")
