"""SQLite ledger store."""

import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from bizledger.domain.errors import MonthAlreadyClosedError
from bizledger.domain.models import (
    CATEGORY_ORDER,
    Category,
    CategoryAmounts,
    Money,
    MonthlyHistory,
    MonthlyTotals,
    OwnerId,
    Period,
    Transaction,
    TransactionId,
    TransactionKind,
)
from bizledger.store.base import LedgerStore
from bizledger.store.schema import get_db_path, history_columns

TRANSACTION_COLUMNS = "id, owner, category, kind, description, amount, occurred_at, created_at, updated_at"
TOTALS_COLUMNS = "id, owner, category, month, year, total_expenses, total_gains, created_at, updated_at"


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=TransactionId(row["id"]),
        owner=OwnerId(row["owner"]),
        category=Category(row["category"]),
        kind=TransactionKind(row["kind"]),
        description=row["description"],
        amount=Money(Decimal(row["amount"])),
        occurred_at=datetime.fromisoformat(row["occurred_at"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_totals(row: sqlite3.Row) -> MonthlyTotals:
    return MonthlyTotals(
        id=row["id"],
        owner=OwnerId(row["owner"]),
        category=Category(row["category"]),
        month=row["month"],
        year=row["year"],
        total_expenses=Money(Decimal(row["total_expenses"])),
        total_gains=Money(Decimal(row["total_gains"])),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_history(row: sqlite3.Row) -> MonthlyHistory:
    entries = tuple(
        CategoryAmounts(
            category=category,
            expenses=Money(Decimal(row[f"{category.value}_expenses"])),
            gains=Money(Decimal(row[f"{category.value}_gains"])),
        )
        for category in CATEGORY_ORDER
    )
    return MonthlyHistory(
        id=row["id"],
        owner=OwnerId(row["owner"]),
        month=row["month"],
        year=row["year"],
        entries=entries,
        closed_at=datetime.fromisoformat(row["closed_at"]),
    )


def _transaction_params(txn: Transaction) -> tuple[str, ...]:
    return (
        txn.id,
        txn.owner,
        txn.category.value,
        txn.kind.value,
        txn.description,
        str(txn.amount),
        txn.occurred_at.isoformat(),
        txn.created_at.isoformat(),
        txn.updated_at.isoformat(),
    )


class SqliteStore(LedgerStore):
    """LedgerStore persisted in a SQLite database file.

    The schema must exist already (see `init_database`). Each operation opens
    its own connection and commits before returning.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()

    def _connect(self) -> sqlite3.Connection:
        """Create a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def add_transaction(self, txn: Transaction) -> None:
        """Insert a new transaction.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"INSERT INTO transactions ({TRANSACTION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    _transaction_params(txn),
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    def get_transaction(self, txn_id: TransactionId) -> Transaction | None:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE id = ?", (txn_id,))
            row = cursor.fetchone()
            return _row_to_transaction(row) if row else None

    def replace_transaction(self, txn: Transaction) -> None:
        """Overwrite every column of an existing transaction.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        params = _transaction_params(txn)
        with self._connect() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    UPDATE transactions
                    SET owner = ?, category = ?, kind = ?, description = ?, amount = ?,
                        occurred_at = ?, created_at = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (*params[1:], params[0]),
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    def remove_transaction(self, txn_id: TransactionId) -> None:
        with self._connect() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM transactions WHERE id = ?", (txn_id,))
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    def list_transactions(self, owner: OwnerId, category: Category) -> list[Transaction]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE owner = ? AND category = ?",
                (owner, category.value),
            )
            return [_row_to_transaction(row) for row in cursor.fetchall()]

    def get_totals(self, owner: OwnerId, period: Period) -> list[MonthlyTotals]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {TOTALS_COLUMNS} FROM monthly_totals WHERE owner = ? AND month = ? AND year = ?",
                (owner, period.month, period.year),
            )
            return [_row_to_totals(row) for row in cursor.fetchall()]

    def save_totals(self, row: MonthlyTotals) -> None:
        """Insert or replace the totals row for (owner, category, month, year).

        Raises:
            sqlite3.Error: If database operation fails.
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO monthly_totals ({TOTALS_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(owner, category, month, year) DO UPDATE SET
                        total_expenses = excluded.total_expenses,
                        total_gains = excluded.total_gains,
                        updated_at = excluded.updated_at
                    """,
                    (
                        row.id,
                        row.owner,
                        row.category.value,
                        row.month,
                        row.year,
                        str(row.total_expenses),
                        str(row.total_gains),
                        row.created_at.isoformat(),
                        row.updated_at.isoformat(),
                    ),
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    def find_history(self, owner: OwnerId, period: Period) -> MonthlyHistory | None:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM monthly_history WHERE owner = ? AND month = ? AND year = ?",
                (owner, period.month, period.year),
            )
            row = cursor.fetchone()
            return _row_to_history(row) if row else None

    def list_history(self, owner: OwnerId, limit: int) -> list[MonthlyHistory]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM monthly_history WHERE owner = ? ORDER BY year DESC, month DESC LIMIT ?",
                (owner, limit),
            )
            return [_row_to_history(row) for row in cursor.fetchall()]

    def archive_month(self, record: MonthlyHistory) -> None:
        """Insert the history record and delete its period's totals in one transaction.

        Raises:
            MonthAlreadyClosedError: If the period already has a history record.
            sqlite3.Error: If database operation fails.
        """
        amount_columns = history_columns()
        columns = ["id", "owner", "month", "year", *amount_columns, "closed_at"]
        values: list[object] = [record.id, record.owner, record.month, record.year]
        for category in CATEGORY_ORDER:
            entry = record.amounts_for(category)
            values.extend([str(entry.expenses), str(entry.gains)])
        values.append(record.closed_at.isoformat())
        placeholders = ", ".join("?" for _ in columns)

        with self._connect() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"INSERT INTO monthly_history ({', '.join(columns)}) VALUES ({placeholders})",
                    values,
                )
                cursor.execute(
                    "DELETE FROM monthly_totals WHERE owner = ? AND month = ? AND year = ?",
                    (record.owner, record.month, record.year),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise MonthAlreadyClosedError(f"{record.period} is already closed") from e
            except sqlite3.Error:
                conn.rollback()
                raise
