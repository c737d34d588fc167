"""Runtime state container for CLI context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from rich.console import Console

from wl_cli.core.validate import ValidationThresholds


@dataclass
class CLIState:
    """CLI runtime options, loaded configuration and the engine settings derived from it."""

    json_output: bool
    plain_output: bool
    verbose: bool
    quiet: bool
    config_path: Path
    config: Dict[str, Any]
    console: Console
    rules: List[Tuple[str, List[str]]]
    thresholds: ValidationThresholds
