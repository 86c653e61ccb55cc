"""CLI entry point for votetracker.

This module provides the Typer-based CLI with commands:
- votetracker run: Fetch one snapshot and update the rolling window
- votetracker validate: Validate configuration
- votetracker status: Show the current window

Exit codes:
- 0: Success (including a duplicate-timestamp skip)
- 1: Configuration error
- 2: Fetch or parse failure (state untouched)
- 4: Fatal error (state could not be written)
"""

from __future__ import annotations

import asyncio
import contextlib
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from votetracker import __version__
from votetracker.config import load_config
from votetracker.config.loader import ConfigError
from votetracker.contest import ContestAPIError, ContestError
from votetracker.logging import configure_logging, get_logger, log_fetch_failed
from votetracker.paths import get_default_state_path
from votetracker.state import StateSaveError, StateStore
from votetracker.tracker import update_once
from votetracker.window import Outcome

if TYPE_CHECKING:
    from votetracker.config.schema import Config
    from votetracker.state import RollingRecord


class ExitCode(IntEnum):
    """CLI exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    FETCH_ERROR = 2
    FATAL_ERROR = 4


app = typer.Typer(
    name="votetracker",
    help="Track per-participant contest vote increments over a rolling window.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"votetracker {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Track per-participant contest vote increments."""


def _load_config_or_exit(config: Path | None) -> Config:
    try:
        return load_config(config)
    except ConfigError as e:
        typer.echo(
            typer.style(f"✗ Configuration error: {e}", fg=typer.colors.RED),
            err=True,
        )
        raise typer.Exit(ExitCode.CONFIG_ERROR) from e


def _resolve_state_path(cfg: Config | None, state_file: Path | None) -> Path:
    if state_file is not None:
        return state_file
    if cfg is not None:
        return cfg.state.get_path()
    return get_default_state_path()


@app.command()
def validate(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """Validate configuration without fetching.

    Exits with code 0 if valid, or code 1 if there are errors.
    """
    configure_logging(verbose=verbose, json_output=False)

    cfg = _load_config_or_exit(config)
    typer.echo(typer.style("✓ Configuration is valid", fg=typer.colors.GREEN))

    if verbose:
        window = cfg.window
        typer.echo("\nConfiguration summary:")
        typer.echo(f"  Contest URL: {cfg.contest.url}")
        typer.echo(f"  Named participants: {len(cfg.contest.participants)}")
        typer.echo(f"  Window: {window.max_entries} rows ({window.timezone})")
        typer.echo(f"  Baseline policy: {window.baseline_policy.value}")
        typer.echo(f"  Rebase after update: {'yes' if window.rebase else 'no'}")
        typer.echo(f"  Missing participants: {window.missing_participants.value}")
        typer.echo(f"  State file: {cfg.state.get_path()}")

    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def run(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file.",
        ),
    ] = None,
    state_file: Annotated[
        Path | None,
        typer.Option(
            "--state-file",
            help="State file path (overrides config).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Compute the update without writing the state file.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """Fetch one snapshot and update the rolling window.

    Intended to be launched by a periodic scheduler (cron, CI); each run
    applies at most one update and exits.
    """
    configure_logging(verbose=verbose)
    log = get_logger("votetracker.cli")

    cfg = _load_config_or_exit(config)
    store = StateStore(_resolve_state_path(cfg, state_file))
    log.debug("Using state file", path=str(store.path))

    try:
        result = asyncio.run(update_once(cfg, store, dry_run=dry_run))
    except ContestError as e:
        status_code = e.status_code if isinstance(e, ContestAPIError) else None
        log_fetch_failed(url=cfg.contest.url, error=str(e), status_code=status_code)
        typer.echo(typer.style(f"✗ Error: {e}", fg=typer.colors.RED), err=True)
        raise typer.Exit(ExitCode.FETCH_ERROR) from e
    except StateSaveError as e:
        log.exception("State save failed", path=str(e.path))
        typer.echo(typer.style(f"✗ {e}", fg=typer.colors.RED), err=True)
        raise typer.Exit(ExitCode.FATAL_ERROR) from e

    if result.outcome == Outcome.DUPLICATE:
        typer.echo(typer.style("Duplicate timestamp, skipping update.", fg=typer.colors.YELLOW))
    elif result.outcome == Outcome.BASELINE_SET:
        typer.echo(typer.style("Baseline set.", fg=typer.colors.YELLOW))
    else:
        typer.echo(typer.style(f"✓ Updated @ {result.label}", fg=typer.colors.GREEN))

    if dry_run and result.should_persist:
        typer.echo(
            typer.style(
                "🔍 Dry-run mode: state file not written",
                fg=typer.colors.CYAN,
            )
        )

    raise typer.Exit(ExitCode.SUCCESS)


def _format_delta(value: int | None) -> str:
    if value is None:
        return "-"
    return f"{value:+d}"


def _render_window(record: RollingRecord) -> list[str]:
    """Render the window as participant rows by time columns."""
    names = sorted(record.vote_increments)
    name_width = max((len(n) for n in names), default=4)
    col_width = max((len(t) for t in record.times), default=8)

    header = " " * name_width + "".join(f"  {t:>{col_width}}" for t in record.times)
    lines = [header]
    for name in names:
        cells = "".join(
            f"  {_format_delta(v):>{col_width}}" for v in record.vote_increments[name]
        )
        lines.append(f"{name:<{name_width}}{cells}")
    return lines


@app.command()
def status(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file.",
        ),
    ] = None,
    state_file: Annotated[
        Path | None,
        typer.Option(
            "--state-file",
            help="State file path (overrides config).",
        ),
    ] = None,
) -> None:
    """Show the current rolling window.

    Uses the config's state path when a config file is found, otherwise
    the default XDG location.
    """
    cfg: Config | None = None
    if config is not None:
        cfg = _load_config_or_exit(config)
    elif state_file is None:
        with contextlib.suppress(ConfigError):
            cfg = load_config()

    store = StateStore(_resolve_state_path(cfg, state_file))

    if not store.exists:
        typer.echo(
            typer.style(f"No state file found at {store.path}", fg=typer.colors.YELLOW)
        )
        typer.echo("Run 'votetracker run' to initialize.")
        raise typer.Exit(ExitCode.SUCCESS)

    record = store.load()

    typer.echo(typer.style("Votetracker Status", bold=True))
    typer.echo("─" * 40)
    typer.echo(f"State file: {store.path}")

    window = f"{record.row_count}"
    if cfg is not None:
        window += f"/{cfg.window.max_entries}"
    typer.echo(f"Rows: {window}")

    if record.baseline_votes is None:
        typer.echo("Baseline: (not set)")
    else:
        typer.echo(f"Baseline: {len(record.baseline_votes)} participant(s)")

    if record.times:
        typer.echo()
        typer.echo(typer.style("Increments:", bold=True))
        for line in _render_window(record):
            typer.echo(f"  {line}")

    raise typer.Exit(ExitCode.SUCCESS)
