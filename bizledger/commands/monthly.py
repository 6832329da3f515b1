"""Monthly totals, close and history commands."""

import sqlite3
from typing import Any

import typer
from rich.table import Table

from bizledger.commands.common import build_ledger, console, fail, print_json
from bizledger.config import resolve_owner
from bizledger.dates import month_range
from bizledger.domain.errors import LedgerError
from bizledger.domain.ledger import (
    format_money_display,
    history_payload,
    net_result,
    totals_payload,
)
from bizledger.domain.models import CATEGORY_ORDER, ZERO, Money, MonthlyHistory, MonthlyTotals


def render_totals_table(rows: list[MonthlyTotals]) -> Table:
    """Build the current-month totals table."""
    _, _, label = month_range(rows[0].period)
    table = Table(title=f"Totals for {label}")
    table.add_column("Category", style="magenta")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Gains", justify="right", style="green")
    table.add_column("Net", justify="right")

    for row in rows:
        net = net_result(row.total_expenses, row.total_gains)
        table.add_row(
            row.category.label,
            format_money_display(row.total_expenses),
            format_money_display(row.total_gains),
            format_money_display(net, include_sign=True),
        )
    return table


def render_history_table(records: list[MonthlyHistory]) -> Table:
    """Build the closed-months table, one row per month."""
    table = Table(title="Closed months")
    table.add_column("Month", style="cyan")
    for category in CATEGORY_ORDER:
        table.add_column(category.label, justify="right")
    table.add_column("Net", justify="right")

    for record in records:
        _, _, label = month_range(record.period)
        cells = []
        net = ZERO
        for category in CATEGORY_ORDER:
            entry = record.amounts_for(category)
            cells.append(f"-{format_money_display(entry.expenses)} / +{format_money_display(entry.gains)}")
            net = Money(net + net_result(entry.expenses, entry.gains))
        table.add_row(label, *cells, format_money_display(net, include_sign=True))
    return table


def totals_command(settings: dict[str, Any], owner: str | None, as_json: bool = False) -> None:
    """Show the current month's totals per category."""
    try:
        owner_id = resolve_owner(owner, settings)
        rows = build_ledger(settings).get_current_month_totals(owner_id)
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    if as_json:
        print_json([totals_payload(row) for row in rows])
        return

    console.print(render_totals_table(rows))


def set_totals_command(
    settings: dict[str, Any],
    owner: str | None,
    category: str,
    expenses: str,
    gains: str,
) -> None:
    """Overwrite a category's totals for the current month."""
    try:
        owner_id = resolve_owner(owner, settings)
        row = build_ledger(settings).set_category_totals(owner_id, category, expenses, gains)
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    console.print(f"[green]✓[/green] {row.category.label} totals set:")
    console.print(f"  Expenses: {format_money_display(row.total_expenses)}")
    console.print(f"  Gains: {format_money_display(row.total_gains)}")
    console.print("[dim]Adding, editing or deleting a transaction in this category recalculates these totals[/dim]")


def close_command(settings: dict[str, Any], owner: str | None, yes: bool = False) -> None:
    """Archive the current month into history."""
    try:
        owner_id = resolve_owner(owner, settings)
        ledger = build_ledger(settings)
        rows = ledger.get_current_month_totals(owner_id)

        if not yes:
            console.print(render_totals_table(rows))
            if not typer.confirm("Close this month? Totals will be archived and reset", default=False):
                console.print("[yellow]Close cancelled[/yellow]")
                return

        record = ledger.close_month(owner_id)
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    _, _, label = month_range(record.period)
    console.print(f"[green]✓[/green] Closed {label}")
    console.print("[dim]Use 'bizledger history' to view archived months[/dim]")


def history_command(settings: dict[str, Any], owner: str | None, limit: int = 12, as_json: bool = False) -> None:
    """Show archived months, most recent first."""
    try:
        owner_id = resolve_owner(owner, settings)
        records = build_ledger(settings).get_history(owner_id, limit)
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    if as_json:
        print_json([history_payload(record) for record in records])
        return

    if not records:
        console.print("[yellow]No closed months yet[/yellow]")
        return

    console.print(render_history_table(records))
