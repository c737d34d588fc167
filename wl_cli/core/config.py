"""Configuration loading."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from wl_cli.core.constants import DEFAULT_VALIDATION_THRESHOLDS, SUGGESTION_CONFIDENCE_THRESHOLD


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("WL_CONFIG_FILE", "~/.config/wl/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    return {
        "defaults": {
            "summary_format": "markdown",
        },
        "classification": {
            "suggestion_threshold": SUGGESTION_CONFIDENCE_THRESHOLD,
            "rules": {},
        },
        "validation": dict(DEFAULT_VALIDATION_THRESHOLDS),
        "logging": {
            "level": "WARNING",
        },
    }


DEFAULT_CONFIG: Dict[str, Any] = _default_config()


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except Exception as exc:
        if suffix in {".toml", ""}:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()

    if cfg_path.exists():
        cfg = _deep_merge(cfg, _read_config(cfg_path))

    return cfg


def resolve_log_level(config: Dict[str, Any], verbose: bool = False, quiet: bool = False) -> str:
    """CLI flags win over WL_LOG_LEVEL, which wins over the config file."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "ERROR"
    raw = os.getenv("WL_LOG_LEVEL") or config.get("logging", {}).get("level") or "WARNING"
    return str(raw).upper()
