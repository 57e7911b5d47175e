"""Run configuration: defaults, optional YAML file, CLI overrides."""

import copy
from pathlib import Path

import yaml
from rich.console import Console

console = Console()

DEFAULT_CONFIG = {
    "search": {
        "query": "language:go stars:>1000",
        "sort": "stars",
        "order": "desc",
        "per_page": 50,
    },
    "delays": {
        "pagination": 7,
        "repository": 7,
    },
    "cache": {
        "dir": "cache",
    },
    "manifest": {
        "filename": "go.mod",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> dict:
    """Load configuration from YAML file on top of the defaults."""
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    if not config_path.exists():
        console.print(f"[red]Error:[/red] Config file not found: {config_path}")
        raise SystemExit(1)

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        console.print(f"[red]Error:[/red] Invalid config file {config_path}: {e}")
        raise SystemExit(1)

    if not isinstance(data, dict):
        console.print(f"[red]Error:[/red] Config file must be a mapping: {config_path}")
        raise SystemExit(1)

    return _deep_merge(DEFAULT_CONFIG, data)


def apply_overrides(config: dict, args) -> dict:
    """Apply CLI flags that were explicitly given."""
    overrides = {
        ("search", "query"): getattr(args, "query", None),
        ("search", "per_page"): getattr(args, "per_page", None),
        ("delays", "pagination"): getattr(args, "pagination_delay", None),
        ("delays", "repository"): getattr(args, "repo_delay", None),
        ("cache", "dir"): getattr(args, "cache_dir", None),
    }
    config = copy.deepcopy(config)
    for (section, key), value in overrides.items():
        if value is not None:
            config.setdefault(section, {})[key] = value
    return config
