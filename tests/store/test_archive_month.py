"""Tests for archive_month, run against every store backend."""

from datetime import datetime
from decimal import Decimal

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
)
from bizledger.store import LedgerStore

NOW = datetime(2025, 3, 31, 23, 0)
ALICE = OwnerId("alice")


def history_record(record_id: str) -> MonthlyHistory:
    return MonthlyHistory(
        id=record_id,
        owner=ALICE,
        month=3,
        year=2025,
        entries=tuple(CategoryAmounts(category, Money(Decimal("1.00")), Money(Decimal("2.00"))) for category in Category),
        closed_at=NOW,
    )


class TestArchiveMonth:
    """Tests for the shared archive_month contract."""

    def test_duplicate_period_raises_month_already_closed(self, store: LedgerStore) -> None:
        """Should reject a second record for the period and leave state alone."""
        first = history_record("first")
        store.archive_month(first)
        store.save_totals(
            MonthlyTotals(
                id="row",
                owner=ALICE,
                category=Category.PLR_NACIONAL,
                month=3,
                year=2025,
                total_expenses=Money(Decimal("5.00")),
                total_gains=Money(Decimal("6.00")),
                created_at=NOW,
                updated_at=NOW,
            )
        )

        with pytest.raises(MonthAlreadyClosedError):
            store.archive_month(history_record("second"))

        assert store.find_history(ALICE, Period(2025, 3)) == first
        assert len(store.get_totals(ALICE, Period(2025, 3))) == 1
