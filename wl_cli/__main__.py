"""Entry point for workload-cli."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
from rich.console import Console

from wl_cli import __version__
from wl_cli.commands.classify import classify_command
from wl_cli.commands.summary import summary_command
from wl_cli.commands.validate import validate_command
from wl_cli.core.classify import classification_rules_from_config
from wl_cli.core.config import ConfigError, default_config_path, load_config, resolve_log_level
from wl_cli.core.state import CLIState
from wl_cli.core.validate import ValidationThresholds, thresholds_from_config
from wl_cli.utils.logging import setup_logging

app = typer.Typer(
    add_completion=False,
    help="Workload classification and time-entry validation",
    invoke_without_command=True,
)


def _engine_settings(cfg: Dict[str, Any]) -> Tuple[List[Tuple[str, List[str]]], ValidationThresholds]:
    """Keyword rules and validation limits derived from the loaded config."""
    try:
        thresholds = thresholds_from_config(cfg)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid [validation] value: {exc}") from exc
    return classification_rules_from_config(cfg), thresholds


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress console output and warnings"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Load config, set up logging and store engine settings on the context."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
        setup_logging(resolve_log_level(cfg, verbose=verbose, quiet=quiet))
        rules, thresholds = _engine_settings(cfg)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    ctx.obj = CLIState(
        json_output=json_output,
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=Console(quiet=quiet, no_color=plain_output),
        rules=rules,
        thresholds=thresholds,
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


app.command("classify")(classify_command)
app.command("validate")(validate_command)
app.command("summary")(summary_command)


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
