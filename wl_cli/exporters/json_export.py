"""JSON export helpers."""

from __future__ import annotations

import json
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any


def to_jsonable(payload: Any) -> Any:
    """Convert engine records (anything with ``to_dict``), enums and dates to plain JSON types."""
    if hasattr(payload, "to_dict"):
        return to_jsonable(payload.to_dict())
    if isinstance(payload, Enum):
        return payload.value
    if isinstance(payload, date):
        return payload.isoformat()
    if isinstance(payload, dict):
        return {str(key): to_jsonable(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [to_jsonable(item) for item in payload]
    return payload


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_jsonable(payload), indent=2) + "\n")
    return path
