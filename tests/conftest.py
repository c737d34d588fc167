from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
from typer.testing import CliRunner

from wl_cli.core.models import WorkloadEntry


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("WL_CONFIG_FILE", str(path))
    monkeypatch.delenv("WL_LOG_LEVEL", raising=False)
    return path


@pytest.fixture()
def make_entry() -> Callable[..., WorkloadEntry]:
    def _make(**overrides: Any) -> WorkloadEntry:
        fields: Dict[str, Any] = {
            "id": 1,
            "date": date(2024, 1, 15),
            "time_in": "09:00",
            "time_out": "10:30",
            "total_hours": 1.5,
            "activity": "Delivered lecture",
            "user_id": 7,
        }
        fields.update(overrides)
        return WorkloadEntry(**fields)

    return _make


@pytest.fixture()
def sample_records() -> List[Dict[str, Any]]:
    return [
        {
            "id": 11,
            "date": "2024-01-15",
            "timeIn": "11:00",
            "timeOut": "12:00",
            "totalHours": 1.0,
            "activity": "Lecture on graph algorithms",
            "userId": 7,
            "category": "lecture",
        },
        {
            "id": 12,
            "date": "2024-01-16",
            "timeIn": "14:00",
            "timeOut": "17:00",
            "totalHours": 3.0,
            "activity": "Hands-on lab practical",
            "userId": 7,
        },
        {
            "id": 13,
            "date": "2024-01-22",
            "timeIn": "10:00",
            "timeOut": "12:00",
            "totalHours": 2.0,
            "activity": "Faculty meeting and planning",
            "userId": 7,
        },
        {
            "id": 14,
            "date": "2024-01-22",
            "timeIn": "13:00",
            "timeOut": "15:00",
            "totalHours": 2.0,
            "activity": "Grading exam papers",
            "userId": 8,
        },
    ]


@pytest.fixture()
def write_temp_json(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload, indent=2) + "\n")
        return path

    return _write


@pytest.fixture()
def write_temp_text(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write
