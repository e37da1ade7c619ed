"""Configuration loading for markscan (.markscan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .constants import (
    CONFIG_FILE_NAME,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_ROOT_TYPE,
    DEFAULT_SRC_DIR,
    MARKER_ATTRIBUTE,
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OutputConfig:
    """How the schema snapshot and type definitions are written."""

    pretty: bool = True
    indent: int = 2
    types: bool = True
    comments: bool = True
    root_type: str = DEFAULT_ROOT_TYPE


@dataclass
class ScannerConfig:
    """Represents the settings defined in .markscan.yml."""

    root: Path
    src_dir: Path
    output_dir: Path
    marker: str = MARKER_ATTRIBUTE
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    sort: bool = False
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def for_root(cls, root: Path) -> "ScannerConfig":
        root = root.expanduser().resolve()
        return cls(root=root, src_dir=root / DEFAULT_SRC_DIR, output_dir=root / DEFAULT_OUTPUT_DIR)


def load_config(config_path: Path) -> ScannerConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ScannerConfig.for_root(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    config = ScannerConfig.for_root(root)

    src_dir = _as_str(data.get("src_dir"))
    if src_dir:
        config.src_dir = _resolve_dir(root, src_dir)
    output_dir = _as_str(data.get("output_dir"))
    if output_dir:
        config.output_dir = _resolve_dir(root, output_dir)

    marker = _as_str(data.get("marker"))
    if marker:
        config.marker = marker.strip()

    if "include" in data:
        include = _as_str_list(data.get("include"))
        if include:
            config.include = include
    if "exclude" in data:
        config.exclude = _as_str_list(data.get("exclude"))

    sort = _as_bool(data.get("sort"))
    if sort is not None:
        config.sort = sort

    output_data = _as_dict(data.get("output"))
    if output_data:
        output = config.output
        pretty = _as_bool(output_data.get("pretty"))
        if pretty is not None:
            output.pretty = pretty
        indent = _as_int(output_data.get("indent"))
        if indent is not None and indent >= 0:
            output.indent = indent
        types = _as_bool(output_data.get("types"))
        if types is not None:
            output.types = types
        comments = _as_bool(output_data.get("comments"))
        if comments is not None:
            output.comments = comments
        root_type = _as_str(output_data.get("root_type"))
        if root_type:
            output.root_type = root_type

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _resolve_dir(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


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


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["ConfigError", "OutputConfig", "ScannerConfig", "load_config"]
