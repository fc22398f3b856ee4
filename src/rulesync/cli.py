"""rulesync CLI — Typer application with update, sync, diff, check, and init commands."""

from __future__ import annotations

import signal
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from rulesync import __version__

app = typer.Typer(
    name="rulesync",
    help="Keep a Prometheus rule file in sync with a remote rule source.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_RULES_DIR_ARG = typer.Argument(
    ..., exists=True, file_okay=False, dir_okay=True, help="Directory holding the rule file",
)


def _load(config: Optional[str], verbose: bool):
    """Load config and set up logging, exit 2 on failure."""
    from rulesync.config.loader import load_config
    from rulesync.errors import ConfigError
    from rulesync.log import configure_logging

    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if verbose:
        cfg.logging.level = "debug"
    configure_logging(cfg.logging.level, json=cfg.logging.json)
    return cfg


def _build(cfg, path: Path):
    """Return (reconciler, source, rule file path)."""
    from rulesync.reconciler import Reconciler
    from rulesync.source import build_source

    reconciler = Reconciler(cfg)
    source = build_source(cfg.source, base_dir=Path.cwd())
    return reconciler, source, path / cfg.rules.file_name


def _report(outcome, format: str) -> None:
    from rulesync.output import json_report, terminal

    if format == "json":
        print(json_report.render(outcome))
    else:
        terminal.render(outcome, console=console)


def _check_format(format: str) -> None:
    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)


# ── update ────────────────────────────────────────────────────────────────────


@app.command()
def update(
    path: Path = _RULES_DIR_ARG,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .rulesync.toml"),
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between passes"),
    once: bool = typer.Option(False, "--once", help="Run a single pass and exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Poll the rule source and keep the rule file in PATH up to date."""
    from rulesync.scheduler import Scheduler

    cfg = _load(config, verbose)
    if interval is not None:
        if interval <= 0:
            console.print(f"[bold red]Invalid interval:[/bold red] {interval}")
            raise typer.Exit(code=2)
        cfg.schedule.interval = interval

    reconciler, source, rule_file = _build(cfg, path)
    scheduler = Scheduler(
        reconciler,
        source,
        rule_file,
        cfg.schedule.interval,
        max_passes=1 if once else None,
    )

    def _shutdown(signum, _frame) -> None:
        scheduler.stop()

    previous = {
        signum: signal.signal(signum, _shutdown)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        scheduler.run()
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    if once and (scheduler.last_outcome is None or scheduler.last_outcome.failed):
        raise typer.Exit(code=1)


# ── sync ──────────────────────────────────────────────────────────────────────


@app.command()
def sync(
    path: Path = _RULES_DIR_ARG,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .rulesync.toml"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run one reconciliation pass against the rule file in PATH."""
    _check_format(format)
    cfg = _load(config, verbose)
    reconciler, source, rule_file = _build(cfg, path)

    outcome = reconciler.reconcile(source, rule_file)
    _report(outcome, format)

    if outcome.failed:
        raise typer.Exit(code=1)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    path: Path = _RULES_DIR_ARG,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .rulesync.toml"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Show what a sync would change, without writing or reloading."""
    _check_format(format)
    cfg = _load(config, verbose)
    reconciler, source, rule_file = _build(cfg, path)

    outcome = reconciler.plan(source, rule_file)
    _report(outcome, format)

    if outcome.failed:
        raise typer.Exit(code=1)


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Rule files to check"),
) -> None:
    """Check rule files for syntax errors."""
    from rulesync.errors import ParseError
    from rulesync.output import terminal
    from rulesync.rules.rulefile import load_rule_file
    from rulesync.rules.validator import rule_problems

    results = []
    for file in files:
        try:
            groups = load_rule_file(file)
        except ParseError as exc:
            results.append((str(file), 0, [str(exc)]))
            continue
        problems = [
            f"{group.name}/{rule.name}: {problem}"
            for group in groups
            for rule in group.rules
            for problem in rule_problems(rule)
        ]
        results.append((str(file), groups.rule_count, problems))

    terminal.render_check(results, console=console)
    if any(problems for _, _, problems in results):
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .rulesync.toml in the current directory."""
    from rulesync.config.defaults import DEFAULT_TOML
    from rulesync.config.loader import CONFIG_FILE_NAME

    config_path = Path.cwd() / CONFIG_FILE_NAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILE_NAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"rulesync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """rulesync — keep a Prometheus rule file in sync with a remote rule source."""
