"""Find popular GitHub repositories that directly require a Go module."""

__version__ = "0.1.0"
