"""Result cache and reporting."""

from .cache import CacheStore, cache_path_for, merge_results
from .report import print_report

__all__ = ["CacheStore", "cache_path_for", "merge_results", "print_report"]
