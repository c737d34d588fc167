"""Time-entry validation command."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import typer
import yaml

from wl_cli.commands.common import fail_input, get_state, print_json_payload
from wl_cli.core.classify import resolve_category
from wl_cli.core.models import WorkloadEntry
from wl_cli.core.validate import needs_review, validate_workload, validation_notes
from wl_cli.exporters.json_export import write_json
from wl_cli.utils.date_ranges import validate_date
from wl_cli.utils.formatting import format_confidence, format_issue_line, issues_table
from wl_cli.utils.parsing import (
    EntryFormatError,
    InvalidTimeFormat,
    entry_from_record,
    load_entries,
    load_entries_input,
)


def _coerce_id(value: Optional[str]) -> Optional[Union[int, str]]:
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def _entry_from_flags(
    entry_date: Optional[str],
    time_in: Optional[str],
    time_out: Optional[str],
    hours: Optional[float],
    activity: Optional[str],
    user: Optional[str],
    entry_id: Optional[str],
    subject: Optional[str],
    category: Optional[str],
) -> WorkloadEntry:
    record: Dict[str, Any] = {
        "id": _coerce_id(entry_id),
        "date": entry_date,
        "timeIn": time_in,
        "timeOut": time_out,
        "totalHours": hours,
        "activity": activity,
        "userId": _coerce_id(user),
        "subject": subject,
        "category": category,
    }
    return entry_from_record(record)


def _load_entry(entry_file: Path) -> WorkloadEntry:
    records = load_entries_input(entry_file)
    if len(records) != 1:
        raise EntryFormatError(f"{entry_file} must contain exactly one entry, found {len(records)}")
    return entry_from_record(records[0])


def validate_command(
    ctx: typer.Context,
    entry_file: Optional[Path] = typer.Option(
        None, "--entry", exists=True, dir_okay=False, help="JSON/YAML file holding the new entry"
    ),
    existing_file: Optional[Path] = typer.Option(
        None, "--existing", exists=True, dir_okay=False, help="JSON/YAML file with the user's existing entries"
    ),
    entry_date: Optional[str] = typer.Option(None, "--date", help="Entry date YYYY-MM-DD", callback=validate_date),
    time_in: Optional[str] = typer.Option(None, help="Start time HH:MM"),
    time_out: Optional[str] = typer.Option(None, help="End time HH:MM"),
    hours: Optional[float] = typer.Option(None, help="Total hours (computed from times when omitted)"),
    activity: Optional[str] = typer.Option(None, help="Activity description"),
    user: Optional[str] = typer.Option(None, help="User identifier"),
    entry_id: Optional[str] = typer.Option(None, "--id", help="Entry identifier"),
    subject: Optional[str] = typer.Option(None, help="Subject name"),
    category: Optional[str] = typer.Option(None, help="Declared category"),
    output_file: Optional[Path] = typer.Option(None, help="Write result JSON to file"),
) -> None:
    """Validate a time entry against existing entries."""
    state = get_state(ctx)

    try:
        if entry_file is not None:
            entry = _load_entry(entry_file)
        else:
            entry = _entry_from_flags(
                entry_date, time_in, time_out, hours, activity, user, entry_id, subject, category
            )
        existing: List[WorkloadEntry] = load_entries(existing_file)
        result = validate_workload(entry, existing, thresholds=state.thresholds, rules=state.rules)
    except (InvalidTimeFormat, EntryFormatError) as exc:
        fail_input(state, str(exc))
    except yaml.YAMLError as exc:
        fail_input(state, f"Could not parse input file: {exc}")

    resolved = resolve_category(
        entry.activity,
        declared=entry.category,
        threshold=state.thresholds.suggestion_confidence,
        rules=state.rules,
    )
    notes = validation_notes(result)
    payload = {
        "entry": entry,
        "category": resolved,
        "validation": result,
        "notes": notes,
        "needsReview": needs_review(result),
    }

    if output_file:
        write_json(output_file, payload)

    if state.json_output:
        print_json_payload(state, payload)
    else:
        verdict = "valid" if result.is_valid else "needs review"
        state.console.print(
            f"Entry {entry.date.isoformat()} {entry.time_in}-{entry.time_out} "
            f"({entry.total_hours:g}h): {verdict}, "
            f"confidence {format_confidence(result.confidence)}"
        )
        state.console.print(f"Category: {resolved}")
        if result.issues:
            if state.plain_output:
                for issue in result.issues:
                    state.console.print(format_issue_line(issue))
            else:
                state.console.print(issues_table(result.issues))
            state.console.print(f"Notes: {notes}")
        else:
            state.console.print("No issues found.")
        for suggestion in result.suggestions:
            state.console.print(f"Suggestion: {suggestion}")

    if needs_review(result):
        raise typer.Exit(code=1)
