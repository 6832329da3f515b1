"""Transaction management commands (list, add, edit, delete)."""

import sqlite3
from typing import Any

from rich.table import Table

from bizledger.commands.common import build_ledger, console, fail, parse_date, print_json
from bizledger.config import resolve_owner
from bizledger.domain.errors import LedgerError
from bizledger.domain.ledger import format_money_display, parse_category, transaction_payload
from bizledger.domain.models import Transaction, TransactionKind


def format_amount(txn: Transaction) -> str:
    """Colored amount: red for expenses, green for gains."""
    if txn.kind == TransactionKind.EXPENSE:
        return f"[red]-{format_money_display(txn.amount)}[/red]"
    return f"[green]+{format_money_display(txn.amount)}[/green]"


def print_transaction(txn: Transaction) -> None:
    console.print(f"  ID: {txn.id}")
    console.print(f"  Date: {txn.occurred_at:%Y-%m-%d %H:%M}")
    console.print(f"  Category: {txn.category.label}")
    console.print(f"  Description: {txn.description}")
    console.print(f"  Amount: {format_amount(txn)}")


def list_command(settings: dict[str, Any], owner: str | None, category: str, as_json: bool = False) -> None:
    """List the current month's transactions in a category."""
    try:
        owner_id = resolve_owner(owner, settings)
        transactions = build_ledger(settings).list_transactions(owner_id, category)
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    if as_json:
        print_json([transaction_payload(txn) for txn in transactions])
        return

    label = parse_category(category).label
    if not transactions:
        console.print(f"[yellow]No transactions this month for {label}[/yellow]")
        return

    table = Table(title=f"{label} (showing {len(transactions)})")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("ID", style="dim")

    for txn in transactions:
        table.add_row(f"{txn.occurred_at:%Y-%m-%d}", txn.description, format_amount(txn), txn.id)

    console.print(table)


def add_command(
    settings: dict[str, Any],
    owner: str | None,
    category: str,
    kind: str,
    description: str,
    amount: str,
    date: str | None = None,
) -> None:
    """Add a transaction.

    Args:
        settings: Loaded settings.
        owner: Owner override from the command line.
        category: Category identifier.
        kind: "expense" or "gain".
        description: Transaction description.
        amount: Decimal amount string (e.g. "50.00").
        date: Optional date (YYYY-MM-DD, DD/MM/YYYY, or other formats). Defaults to now.
    """
    try:
        owner_id = resolve_owner(owner, settings)
        occurred_at = parse_date(date) if date else None
        txn = build_ledger(settings).create_transaction(owner_id, category, kind, description, amount, occurred_at)
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    console.print("[green]✓[/green] Transaction added:")
    print_transaction(txn)


def edit_command(
    settings: dict[str, Any],
    owner: str | None,
    txn_id: str,
    category: str | None = None,
    kind: str | None = None,
    description: str | None = None,
    amount: str | None = None,
    date: str | None = None,
) -> None:
    """Edit fields of an existing transaction."""
    if all(value is None for value in (category, kind, description, amount, date)):
        fail("Nothing to change (pass at least one of --category, --kind, --description, --amount, --date)")

    try:
        owner_id = resolve_owner(owner, settings)
        occurred_at = parse_date(date) if date else None
        txn = build_ledger(settings).update_transaction(
            owner_id,
            txn_id,
            category=category,
            kind=kind,
            description=description,
            amount=amount,
            occurred_at=occurred_at,
        )
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    console.print("[green]✓[/green] Transaction updated:")
    print_transaction(txn)


def delete_command(settings: dict[str, Any], owner: str | None, txn_id: str) -> None:
    """Delete a transaction."""
    try:
        owner_id = resolve_owner(owner, settings)
        build_ledger(settings).delete_transaction(owner_id, txn_id)
    except (LedgerError, sqlite3.Error) as e:
        fail(f"Error: {e}")

    console.print(f"[green]✓[/green] Deleted transaction {txn_id}")
