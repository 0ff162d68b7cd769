"""Rich terminal summary of matched migration findings."""
from __future__ import annotations

from rich.console import Console
from rich.table import Table

from migrascope.models import Category, Culprit, DOWNTIME_CATEGORIES, MatchResult, SqlMigration

console = Console()

CATEGORY_TITLES = {
    Category.ERRORS: "[bold red]Errors[/bold red]",
    Category.WARNINGS: "[bold yellow]Warnings[/bold yellow]",
    Category.FORWARD_DOWNTIMES: "[bold magenta]Forward downtimes[/bold magenta]",
    Category.BACKWARD_DOWNTIMES: "[magenta]Backward downtimes[/magenta]",
}


def describe_culprits(culprit: Culprit) -> str:
    """One-line description of a culprit payload."""
    payload = culprit.culprits
    if isinstance(payload, SqlMigration):
        ops = ", ".join(u.operation for u in payload.unsafe_sqls if u.operation) or "-"
        return f"{ops} (reverse)" if payload.is_reverse else ops
    if not payload:
        return "-"
    return "lines " + ", ".join(str(n) for n in payload)


def _category_table(category: Category, culprits: list[Culprit]) -> Table:
    table = Table(title=CATEGORY_TITLES[category], title_justify="left")
    table.add_column("App", style="cyan")
    table.add_column("Migration")
    table.add_column(
        "Unsafe operations" if category in DOWNTIME_CATEGORIES else "Culprits",
    )
    for culprit in culprits:
        table.add_row(culprit.application, culprit.migration, describe_culprits(culprit))
    return table


def render(result: MatchResult, out: Console | None = None) -> None:
    out = out or console
    if result.is_empty():
        out.print("[green]No findings for the changed migrations.[/green]")
        return

    out.print(f"[bold]{result.total()} finding(s) in changed migrations[/bold]")
    for category in Category:
        culprits = result.for_category(category)
        if culprits:
            out.print()
            out.print(_category_table(category, culprits))
