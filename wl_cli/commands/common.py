"""Shared command helpers."""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer

from wl_cli.core.state import CLIState
from wl_cli.exporters.json_export import to_jsonable


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    data = to_jsonable(payload)
    if state.plain_output:
        typer.echo(json.dumps(data, separators=(",", ":")))
        return
    state.console.print_json(data=data)


def fail_input(state: CLIState, message: str) -> NoReturn:
    """Report malformed input and exit with code 2."""
    if state.json_output:
        print_json_payload(state, {"status": "error", "error": message})
    else:
        typer.echo(f"Input error: {message}")
    raise typer.Exit(code=2)
