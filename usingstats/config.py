"""Configuration loading for usingstats (.usingstats.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".usingstats.yml"
DEFAULT_GENERATED_FILES = ("GlobalUsings.g.cs",)
DEFAULT_GRAMMAR = "tree_sitter_c_sharp"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class UsingStatsConfig:
    """Represents the settings defined in .usingstats.yml."""

    root: Path
    count: Optional[int] = None
    no_warn: bool = False
    max_workers: Optional[int] = None
    generated_files: List[str] = field(default_factory=lambda: list(DEFAULT_GENERATED_FILES))
    exclude_paths: List[str] = field(default_factory=list)
    grammar: str = DEFAULT_GRAMMAR


def load_config(config_path: Path, *, required: bool = False) -> UsingStatsConfig:
    """Load configuration from disk.

    ``config_path`` may be a directory (the config file is looked up inside
    it), a descriptor file (looked up next to it) or the config file itself.
    A missing file yields defaults unless ``required`` is set.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        return UsingStatsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = UsingStatsConfig(root=root)

    if "count" in data:
        config.count = _as_non_negative_int(data["count"], "count")
    if "no_warn" in data:
        config.no_warn = _as_bool(data["no_warn"], "no_warn")
    if "max_workers" in data:
        workers = _as_non_negative_int(data["max_workers"], "max_workers")
        if workers == 0:
            raise ConfigError("max_workers must be a positive integer")
        config.max_workers = workers
    if "generated_files" in data:
        config.generated_files = _as_str_list(data["generated_files"], "generated_files")
    if "exclude_paths" in data:
        config.exclude_paths = _as_str_list(data["exclude_paths"], "exclude_paths")
    if "grammar" in data:
        grammar = data["grammar"]
        if not isinstance(grammar, str) or not grammar.strip():
            raise ConfigError("grammar must be a module name")
        config.grammar = grammar.strip()

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix.lower() in {".sln", ".csproj"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_non_negative_int(value: Any, key: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
    if value < 0:
        raise ConfigError(f"{key} must not be negative")
    return value


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key} must be true or false")


def _as_str_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(f"{key} must be a list of strings")


__all__ = ["CONFIG_FILENAME", "ConfigError", "UsingStatsConfig", "load_config"]
