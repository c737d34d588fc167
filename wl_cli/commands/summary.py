"""Workload summary command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml

from wl_cli.commands.common import fail_input, get_state, print_json_payload
from wl_cli.core.analysis import build_summary, summary_to_markdown
from wl_cli.exporters.json_export import write_json
from wl_cli.utils.date_ranges import in_range, parse_date, validate_date
from wl_cli.utils.parsing import EntryFormatError, InvalidTimeFormat, load_entries


def summary_command(
    ctx: typer.Context,
    entries_file: Path = typer.Option(
        ..., "--entries", exists=True, dir_okay=False, help="JSON/YAML file with time entries"
    ),
    user: Optional[str] = typer.Option(None, help="Only include entries for this user"),
    start_date: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD", callback=validate_date),
    end_date: Optional[str] = typer.Option(None, help="End date YYYY-MM-DD", callback=validate_date),
    output_format: Optional[str] = typer.Option(
        None, "--format", help="Output format: markdown|json (default: summary_format from config)"
    ),
    output_file: Optional[Path] = typer.Option(None, help="Write result to file"),
) -> None:
    """Summarize logged hours by category and week."""
    state = get_state(ctx)
    output_format = output_format or state.config.get("defaults", {}).get("summary_format", "markdown")
    if output_format not in {"markdown", "json"}:
        raise typer.BadParameter("--format must be one of: markdown, json")

    try:
        entries = load_entries(entries_file)
    except (InvalidTimeFormat, EntryFormatError) as exc:
        fail_input(state, str(exc))
    except yaml.YAMLError as exc:
        fail_input(state, f"Could not parse input file: {exc}")

    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None
    selected = [entry for entry in entries if in_range(entry.date, start, end)]
    report = build_summary(selected, user_id=user, rules=state.rules)

    if state.json_output or output_format == "json":
        if output_file:
            write_json(output_file, report)
        print_json_payload(state, report)
        return

    markdown = summary_to_markdown(report)
    if output_file:
        output_file.write_text(markdown)
    state.console.print(markdown)
