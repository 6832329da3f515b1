"""Tests for the SQLite store and schema."""

import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from bizledger.domain.errors import MonthAlreadyClosedError
from bizledger.domain.models import (
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
from bizledger.store import SqliteStore, database_exists, init_database
from bizledger.store.schema import history_columns

NOW = datetime(2025, 3, 15, 12, 0)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "data" / "bizledger.db"
    init_database(path)
    return path


@pytest.fixture
def sqlite_store(db_path: Path) -> SqliteStore:
    return SqliteStore(db_path)


def make_totals(owner: str, category: Category, expenses: str, gains: str, month: int = 3) -> MonthlyTotals:
    return MonthlyTotals(
        id=f"{owner}-{category.value}-{month}",
        owner=OwnerId(owner),
        category=category,
        month=month,
        year=2025,
        total_expenses=Money(Decimal(expenses)),
        total_gains=Money(Decimal(gains)),
        created_at=NOW,
        updated_at=NOW,
    )


def make_history(owner: str, month: int, record_id: str = "") -> MonthlyHistory:
    return MonthlyHistory(
        id=record_id or f"{owner}-history-{month}",
        owner=OwnerId(owner),
        month=month,
        year=2025,
        entries=(
            CategoryAmounts(Category.PLR_NACIONAL, Money(Decimal("50.00")), Money(Decimal("120.00"))),
            CategoryAmounts(Category.PLR_INTERNACIONAL, Money(Decimal("0.00")), Money(Decimal("0.00"))),
            CategoryAmounts(Category.MARCA_ROUPAS, Money(Decimal("0.10")), Money(Decimal("0.20"))),
        ),
        closed_at=NOW,
    )


class TestSchema:
    """Tests for init_database."""

    def test_creates_parent_directory_and_tables(self, db_path: Path) -> None:
        """Should create the three record tables."""
        assert database_exists(db_path)

        conn = sqlite3.connect(db_path)
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        conn.close()

        assert {"transactions", "monthly_totals", "monthly_history"} <= tables

    def test_is_rerunnable(self, db_path: Path) -> None:
        init_database(db_path)
        assert database_exists(db_path)

    def test_history_columns_cover_every_category(self) -> None:
        assert history_columns() == [
            "plr_nacional_expenses",
            "plr_nacional_gains",
            "plr_internacional_expenses",
            "plr_internacional_gains",
            "marca_roupas_expenses",
            "marca_roupas_gains",
        ]


class TestTransactions:
    """Tests for transaction persistence."""

    def test_round_trips_decimal_as_text(self, sqlite_store: SqliteStore, db_path: Path) -> None:
        """Should store the exact decimal string."""
        txn = Transaction(
            id=TransactionId("t1"),
            owner=OwnerId("alice"),
            category=Category.MARCA_ROUPAS,
            kind=TransactionKind.GAIN,
            description="Venda",
            amount=Money(Decimal("0.10")),
            occurred_at=NOW,
            created_at=NOW,
            updated_at=NOW,
        )
        sqlite_store.add_transaction(txn)

        assert sqlite_store.get_transaction(TransactionId("t1")) == txn
        conn = sqlite3.connect(db_path)
        stored = conn.execute("SELECT amount, typeof(amount) FROM transactions").fetchone()
        conn.close()
        assert stored == ("0.10", "text")

    def test_missing_transaction_is_none(self, sqlite_store: SqliteStore) -> None:
        assert sqlite_store.get_transaction(TransactionId("nope")) is None


class TestTotals:
    """Tests for monthly totals persistence."""

    def test_save_upserts_by_owner_category_period(self, sqlite_store: SqliteStore) -> None:
        """Should keep a single row per (owner, category, month, year)."""
        sqlite_store.save_totals(make_totals("alice", Category.PLR_NACIONAL, "1.00", "2.00"))
        replacement = make_totals("alice", Category.PLR_NACIONAL, "3.00", "4.00")
        sqlite_store.save_totals(replacement)

        rows = sqlite_store.get_totals(OwnerId("alice"), Period(2025, 3))

        assert len(rows) == 1
        assert (rows[0].total_expenses, rows[0].total_gains) == (Decimal("3.00"), Decimal("4.00"))

    def test_get_totals_filters_owner_and_period(self, sqlite_store: SqliteStore) -> None:
        sqlite_store.save_totals(make_totals("alice", Category.PLR_NACIONAL, "1.00", "2.00"))
        sqlite_store.save_totals(make_totals("alice", Category.PLR_NACIONAL, "1.00", "2.00", month=4))
        sqlite_store.save_totals(make_totals("bob", Category.PLR_NACIONAL, "1.00", "2.00"))

        assert len(sqlite_store.get_totals(OwnerId("alice"), Period(2025, 3))) == 1


class TestHistory:
    """Tests for archive_month and history queries."""

    def test_archive_inserts_history_and_deletes_period_totals(self, sqlite_store: SqliteStore) -> None:
        """Should remove only the archived owner's rows for that period."""
        for category in Category:
            sqlite_store.save_totals(make_totals("alice", category, "1.00", "1.00"))
        sqlite_store.save_totals(make_totals("alice", Category.PLR_NACIONAL, "9.00", "9.00", month=4))
        sqlite_store.save_totals(make_totals("bob", Category.PLR_NACIONAL, "5.00", "5.00"))

        record = make_history("alice", 3)
        sqlite_store.archive_month(record)

        assert sqlite_store.find_history(OwnerId("alice"), Period(2025, 3)) == record
        assert sqlite_store.get_totals(OwnerId("alice"), Period(2025, 3)) == []
        assert len(sqlite_store.get_totals(OwnerId("alice"), Period(2025, 4))) == 1
        assert len(sqlite_store.get_totals(OwnerId("bob"), Period(2025, 3))) == 1

    def test_duplicate_period_rolls_back(self, sqlite_store: SqliteStore) -> None:
        """Should reject a second history row for the period and keep totals."""
        sqlite_store.archive_month(make_history("alice", 3))
        sqlite_store.save_totals(make_totals("alice", Category.PLR_NACIONAL, "1.00", "2.00"))

        with pytest.raises(MonthAlreadyClosedError):
            sqlite_store.archive_month(make_history("alice", 3, record_id="second"))

        assert len(sqlite_store.get_totals(OwnerId("alice"), Period(2025, 3))) == 1

    def test_list_history_descending_with_limit(self, sqlite_store: SqliteStore) -> None:
        for month in (2, 5, 3):
            sqlite_store.archive_month(make_history("alice", month))
        sqlite_store.archive_month(make_history("bob", 6))

        history = sqlite_store.list_history(OwnerId("alice"), limit=2)

        assert [h.month for h in history] == [5, 3]
