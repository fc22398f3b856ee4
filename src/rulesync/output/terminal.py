"""Rich terminal reporter — change tables and pass verdicts."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from rulesync.reconciler import Outcome, OutcomeKind
from rulesync.rules.models import RuleKey

_CHANGE_STYLE = {
    "added": "bold black on green",
    "updated": "bold black on yellow",
    "deleted": "bold white on red",
}

_CHANGE_ICON = {
    "added": "+",
    "updated": "~",
    "deleted": "-",
}


def _change_pill(change: str) -> Text:
    style = _CHANGE_STYLE.get(change, "")
    icon = _CHANGE_ICON.get(change, "")
    return Text(f" {icon} {change.upper()} ", style=style)


def _rows(outcome: Outcome) -> List[Tuple[str, RuleKey]]:
    if outcome.diff is None:
        return []
    rows: List[Tuple[str, RuleKey]] = []
    for change, keys in (
        ("added", outcome.diff.added),
        ("updated", outcome.diff.updated),
        ("deleted", outcome.diff.deleted),
    ):
        rows.extend((change, key) for key in sorted(keys))
    return rows


def render(outcome: Outcome, *, show_summary: bool = True, console: Console | None = None) -> None:
    """Print a pass outcome to the terminal using Rich."""
    console = console or Console(stderr=True)

    if outcome.failed:
        console.print()
        console.print(
            f"[bold red]✗ {outcome.kind.value.replace('_', ' ').upper()}[/bold red] {escape(outcome.reason or '')}"
        )
        _print_rejected(console, outcome)
        return

    rows = _rows(outcome)
    if not rows:
        console.print()
        console.print("[bold green]✓ Rule file is up to date.[/bold green]")
    else:
        console.print()
        table = Table(
            title="Pending Rule Changes" if outcome.dry_run else "Rule Changes",
            show_lines=False,
            title_style="bold",
            border_style="dim",
        )
        table.add_column("Change", justify="center", width=13)
        table.add_column("Group", style="magenta")
        table.add_column("Rule", style="cyan", min_width=20)
        for change, key in rows:
            table.add_row(_change_pill(change), key.group, key.rule)
        console.print(table)

    _print_rejected(console, outcome)

    if show_summary:
        _print_summary(console, outcome)

    console.print()
    if outcome.dry_run and rows:
        console.print("[bold yellow]Dry run — nothing was written.[/bold yellow]")
    elif outcome.kind == OutcomeKind.APPLIED:
        console.print("[bold green]✓ Rule file written.[/bold green]")
        if outcome.reload_error:
            console.print(f"[yellow]⚠  Reload failed:[/yellow] {escape(outcome.reload_error)}")


def _print_rejected(console: Console, outcome: Outcome) -> None:
    if not outcome.rejected:
        return
    console.print()
    console.print(f"[bold yellow]Rejected {len(outcome.rejected)} record(s):[/bold yellow]")
    for rejection in outcome.rejected:
        console.print(f"  [cyan]{escape(rejection.name or '<unnamed>')}[/cyan]  {escape(rejection.reason)}")


def _print_summary(console: Console, outcome: Outcome) -> None:
    diff = outcome.diff
    console.print()
    console.print(f"[dim]Added:[/dim]     {len(diff.added) if diff else 0}")
    console.print(f"[dim]Updated:[/dim]   {len(diff.updated) if diff else 0}")
    console.print(f"[dim]Deleted:[/dim]   {len(diff.deleted) if diff else 0}")
    console.print(f"[dim]Rejected:[/dim]  {len(outcome.rejected)}")
    console.print(f"[dim]Duration:[/dim]  {outcome.duration_ms:.0f}ms")


def render_check(results: Iterable[Tuple[str, int, List[str]]], console: Console | None = None) -> None:
    """Print ``(path, rule_count, problems)`` triples from ``rulesync check``."""
    console = console or Console(stderr=True)
    for path, count, problems in results:
        if problems:
            console.print(f"[red]✗[/red] {path}: {len(problems)} problem(s)", soft_wrap=True)
            for problem in problems:
                console.print(f"    {escape(problem)}", soft_wrap=True)
        else:
            console.print(f"[green]✓[/green] {path}: {count} rule(s) found", soft_wrap=True)
