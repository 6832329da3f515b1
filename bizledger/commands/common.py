"""Helpers shared by the command modules."""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

import pandas as pd
import typer
from rich.console import Console

from bizledger.aggregator import MonthlyLedger
from bizledger.domain.errors import ValidationError
from bizledger.domain.ledger import to_local_naive
from bizledger.store import MemoryStore, SqliteStore, database_exists, get_db_path

console = Console()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def settings_db_path(settings: dict[str, Any]) -> Path:
    """Database path from settings, falling back to the XDG default."""
    configured = settings.get("db_path")
    return Path(configured).expanduser() if configured else get_db_path()


def build_ledger(settings: dict[str, Any]) -> MonthlyLedger:
    """Construct the ledger for the configured backend.

    Exits if the SQLite database has not been initialized.
    """
    if settings["backend"] == "memory":
        return MonthlyLedger(MemoryStore())

    db_path = settings_db_path(settings)
    if not database_exists(db_path):
        fail("Database not found. Run 'bizledger init' first.")
    return MonthlyLedger(SqliteStore(db_path))


def parse_date(value: str) -> datetime:
    """Normalize a user-supplied date or datetime.

    Raises:
        ValidationError: If pandas cannot parse the value.
    """
    try:
        parsed = pd.to_datetime(value, dayfirst=True, format="mixed")
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid date format: {e}") from None
    if pd.isna(parsed):
        raise ValidationError(f"Invalid date format: {value!r}")
    return to_local_naive(parsed.to_pydatetime())


def print_json(payload: Any) -> None:
    """Print a JSON document, bypassing rich rendering."""
    typer.echo(json.dumps(payload, indent=2))
