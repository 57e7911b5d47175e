"""Exceptions raised by the search pipeline.

Kept in one module so the CLI can catch pipeline failures without importing
the crawler or store machinery.
"""


class PkgstatsError(Exception):
    """Base for all pkgstats errors."""


class CacheError(PkgstatsError):
    """Base for cache file errors."""


class CacheIOError(CacheError):
    """Raised when the cache directory or file cannot be created, read or written."""


class CacheCorruptError(CacheError):
    """Raised when a cached row cannot be parsed back into a result."""


class ManifestError(PkgstatsError):
    """Base for manifest lookup errors."""


class ManifestSearchError(ManifestError):
    """Raised when the code search for manifests in a repository fails."""


class ManifestDownloadError(ManifestError):
    """Raised when a manifest file cannot be downloaded."""


class ManifestParseError(ManifestError):
    """Raised when a go.mod file is malformed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class ScanError(PkgstatsError):
    """Raised when a page of repositories cannot be scanned."""


class SearchError(PkgstatsError):
    """Raised when the repository search itself fails.

    ``partial`` holds whatever was collected before the failure so the caller
    can still persist it.
    """

    def __init__(self, message: str, partial: dict | None = None):
        super().__init__(message)
        self.partial = partial if partial is not None else {}


class ContextCancelled(PkgstatsError):
    """Cancellation reason set on a context. Not a failure."""
