"""Logging setup routed through rich."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> None:
    """Configure the package logger to emit through a RichHandler on stderr."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger = logging.getLogger("wl_cli")
    logger.handlers = [handler]
    logger.setLevel(numeric_level)
    logger.propagate = False
