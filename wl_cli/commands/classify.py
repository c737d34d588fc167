"""Activity classification command."""

from __future__ import annotations

from typing import Optional

import typer

from wl_cli.commands.common import get_state, print_json_payload
from wl_cli.core.classify import category_scores, classify, classify_with_context
from wl_cli.utils.formatting import format_classification


def classify_command(
    ctx: typer.Context,
    activity: str = typer.Argument(..., help="Free-text activity description"),
    subject: Optional[str] = typer.Option(None, help="Subject name used as context"),
    duration: Optional[float] = typer.Option(None, help="Session duration in hours"),
    explain: bool = typer.Option(False, help="Show keyword scores per category"),
) -> None:
    """Infer the workload category of an activity."""
    state = get_state(ctx)
    if duration is not None and duration < 0:
        raise typer.BadParameter("--duration must be non-negative")

    if subject is None and duration is None:
        result = classify(activity, state.rules)
    else:
        result = classify_with_context(activity, subject=subject, duration=duration, rules=state.rules)
    scores = category_scores(activity, state.rules)

    if state.json_output:
        payload = result.to_dict()
        if explain:
            payload["scores"] = dict(scores)
        print_json_payload(state, payload)
        return

    state.console.print(format_classification(result))
    if explain:
        for category, score in scores:
            state.console.print(f"- {category}: {score}")
