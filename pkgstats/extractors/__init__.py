"""Manifest parsing and inspection."""

from .gomod import GoModFile, Requirement, parse_go_mod
from .inspector import ManifestInspector

__all__ = ["GoModFile", "Requirement", "parse_go_mod", "ManifestInspector"]
