"""Database schema initialization."""

import os
import sqlite3
from pathlib import Path

from bizledger.domain.models import CATEGORY_ORDER


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "bizledger" / "bizledger.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def history_columns() -> list[str]:
    """Column names holding the archived expense/gain pair of each category."""
    columns = []
    for category in CATEGORY_ORDER:
        columns.append(f"{category.value}_expenses")
        columns.append(f"{category.value}_gains")
    return columns


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Monetary amounts are stored as TEXT decimal strings so no value passes
    through a binary float.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                category TEXT NOT NULL,
                kind TEXT NOT NULL,
                description TEXT NOT NULL,
                amount TEXT NOT NULL,
                occurred_at TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS monthly_totals (
                id TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                category TEXT NOT NULL,
                month INTEGER NOT NULL,
                year INTEGER NOT NULL,
                total_expenses TEXT NOT NULL DEFAULT '0.00',
                total_gains TEXT NOT NULL DEFAULT '0.00',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE (owner, category, month, year)
            )
        """
        )

        amount_columns = ",\n".join(f"                {name} TEXT NOT NULL" for name in history_columns())
        cursor.execute(
            f"""
            CREATE TABLE IF NOT EXISTS monthly_history (
                id TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                month INTEGER NOT NULL,
                year INTEGER NOT NULL,
{amount_columns},
                closed_at TEXT NOT NULL,
                UNIQUE (owner, month, year)
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_owner_category ON transactions(owner, category, occurred_at)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_history_owner_period ON monthly_history(owner, year, month)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
