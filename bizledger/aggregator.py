"""Monthly ledger aggregator.

Keeps each owner's live per-category totals for the current month in step
with their transactions, and archives a month into immutable history on
close. The store and the clock are injected; nothing here is global.
"""

from datetime import datetime
from uuid import uuid4

import structlog

from bizledger.dates import Clock, system_clock
from bizledger.domain.errors import MonthAlreadyClosedError, NotFoundError, UnauthenticatedError
from bizledger.domain.ledger import (
    build_history_entries,
    missing_categories,
    order_totals,
    order_transactions,
    parse_category,
    parse_kind,
    parse_money,
    period_of,
    select_for_recompute,
    sum_by_kind,
    to_local_naive,
    validate_description,
    validate_limit,
)
from bizledger.domain.models import (
    ZERO,
    Category,
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

logger = structlog.get_logger(__name__)


def require_owner(owner: str | None) -> OwnerId:
    """Return the owner id, or fail if the caller is not authenticated.

    Raises:
        UnauthenticatedError: If owner is missing or blank.
    """
    if not isinstance(owner, str) or not owner.strip():
        raise UnauthenticatedError("No authenticated owner")
    return OwnerId(owner.strip())


def _new_id() -> str:
    return str(uuid4())


class MonthlyLedger:
    """Aggregates transactions into monthly totals and history for each owner."""

    def __init__(self, store: LedgerStore, clock: Clock = system_clock) -> None:
        self.store = store
        self.clock = clock

    # Totals

    def recompute(self, owner: str, category: Category | str) -> MonthlyTotals:
        """Recalculate one category's totals for the current month.

        Sums the owner's transactions in `category` whose occurred_at falls in
        the month of the clock's current time, and replaces the stored row.
        """
        owner_id = require_owner(owner)
        category = parse_category(category)
        now = self.clock()
        period = period_of(now)

        transactions = select_for_recompute(self.store.list_transactions(owner_id, category), category, period)
        expenses, gains = sum_by_kind(transactions)
        row = self._write_totals(owner_id, category, period, expenses, gains, now)

        logger.info(
            "totals_recomputed",
            owner=owner_id,
            category=category.value,
            period=str(period),
            transactions=len(transactions),
            expenses=str(expenses),
            gains=str(gains),
        )
        return row

    def get_current_month_totals(self, owner: str) -> list[MonthlyTotals]:
        """Get the three category totals for the current month.

        Missing rows are created with zero totals. Rows come back in the
        fixed category order.
        """
        owner_id = require_owner(owner)
        now = self.clock()
        return self._current_totals(owner_id, period_of(now), now)

    def set_category_totals(
        self,
        owner: str,
        category: Category | str,
        expenses: str | int | Money,
        gains: str | int | Money,
    ) -> MonthlyTotals:
        """Overwrite one category's totals for the current month.

        The values hold until the category is next recomputed.
        """
        owner_id = require_owner(owner)
        category = parse_category(category)
        expenses = parse_money(expenses)
        gains = parse_money(gains)
        now = self.clock()
        period = period_of(now)

        row = self._write_totals(owner_id, category, period, expenses, gains, now)
        logger.info(
            "totals_set",
            owner=owner_id,
            category=category.value,
            period=str(period),
            expenses=str(expenses),
            gains=str(gains),
        )
        return row

    # Month lifecycle

    def close_month(self, owner: str) -> MonthlyHistory:
        """Archive the current month into history and clear its live totals.

        Raises:
            MonthAlreadyClosedError: If the current month was already closed.
        """
        owner_id = require_owner(owner)
        now = self.clock()
        period = period_of(now)

        if self.store.find_history(owner_id, period) is not None:
            logger.warning("close_rejected", owner=owner_id, period=str(period))
            raise MonthAlreadyClosedError(f"{period} is already closed")

        totals = self._current_totals(owner_id, period, now)
        record = MonthlyHistory(
            id=_new_id(),
            owner=owner_id,
            month=period.month,
            year=period.year,
            entries=build_history_entries(totals),
            closed_at=now,
        )
        self.store.archive_month(record)

        logger.info("month_closed", owner=owner_id, period=str(period), history_id=record.id)
        return record

    def get_history(self, owner: str, limit: int = 12) -> list[MonthlyHistory]:
        """Get up to `limit` archived months, most recent first."""
        owner_id = require_owner(owner)
        return self.store.list_history(owner_id, validate_limit(limit))

    # Transactions

    def list_transactions(self, owner: str, category: Category | str) -> list[Transaction]:
        """Get the owner's current-month transactions in a category, newest first."""
        owner_id = require_owner(owner)
        category = parse_category(category)
        period = period_of(self.clock())
        return order_transactions(select_for_recompute(self.store.list_transactions(owner_id, category), category, period))

    def get_transaction(self, owner: str, txn_id: str) -> Transaction:
        """Get one of the owner's transactions.

        Raises:
            NotFoundError: If the transaction is missing or owned by someone else.
        """
        owner_id = require_owner(owner)
        return self._owned_transaction(owner_id, TransactionId(txn_id))

    def create_transaction(
        self,
        owner: str,
        category: Category | str,
        kind: TransactionKind | str,
        description: str,
        amount: str | int | Money,
        occurred_at: datetime | None = None,
    ) -> Transaction:
        """Record a transaction and recompute its category.

        Raises:
            ValidationError: If any field is malformed. Nothing is stored.
        """
        owner_id = require_owner(owner)
        category = parse_category(category)
        kind = parse_kind(kind)
        description = validate_description(description)
        amount = parse_money(amount)
        now = self.clock()

        txn = Transaction(
            id=TransactionId(_new_id()),
            owner=owner_id,
            category=category,
            kind=kind,
            description=description,
            amount=amount,
            occurred_at=to_local_naive(occurred_at) if occurred_at is not None else now,
            created_at=now,
            updated_at=now,
        )
        self.store.add_transaction(txn)
        logger.info("transaction_created", owner=owner_id, transaction_id=txn.id, category=category.value)

        self.recompute(owner_id, category)
        return txn

    def update_transaction(
        self,
        owner: str,
        txn_id: str,
        *,
        category: Category | str | None = None,
        kind: TransactionKind | str | None = None,
        description: str | None = None,
        amount: str | int | Money | None = None,
        occurred_at: datetime | None = None,
    ) -> Transaction:
        """Apply a partial update to one of the owner's transactions.

        Fields left as None keep their value. The previous category is
        recomputed, and the new one too when the category changes.

        Raises:
            NotFoundError: If the transaction is missing or owned by someone else.
            ValidationError: If a supplied field is malformed. Nothing is stored.
        """
        owner_id = require_owner(owner)
        existing = self._owned_transaction(owner_id, TransactionId(txn_id))

        updated = Transaction(
            id=existing.id,
            owner=existing.owner,
            category=parse_category(category) if category is not None else existing.category,
            kind=parse_kind(kind) if kind is not None else existing.kind,
            description=validate_description(description) if description is not None else existing.description,
            amount=parse_money(amount) if amount is not None else existing.amount,
            occurred_at=to_local_naive(occurred_at) if occurred_at is not None else existing.occurred_at,
            created_at=existing.created_at,
            updated_at=self.clock(),
        )
        self.store.replace_transaction(updated)
        logger.info("transaction_updated", owner=owner_id, transaction_id=updated.id, category=updated.category.value)

        self.recompute(owner_id, existing.category)
        if updated.category != existing.category:
            self.recompute(owner_id, updated.category)
        return updated

    def delete_transaction(self, owner: str, txn_id: str) -> None:
        """Delete one of the owner's transactions and recompute its category.

        Raises:
            NotFoundError: If the transaction is missing or owned by someone else.
        """
        owner_id = require_owner(owner)
        existing = self._owned_transaction(owner_id, TransactionId(txn_id))

        self.store.remove_transaction(existing.id)
        logger.info("transaction_deleted", owner=owner_id, transaction_id=existing.id, category=existing.category.value)

        self.recompute(owner_id, existing.category)

    # Helpers

    def _owned_transaction(self, owner: OwnerId, txn_id: TransactionId) -> Transaction:
        txn = self.store.get_transaction(txn_id)
        if txn is None or txn.owner != owner:
            raise NotFoundError(f"Transaction {txn_id} not found")
        return txn

    def _current_totals(self, owner: OwnerId, period: Period, now: datetime) -> list[MonthlyTotals]:
        rows = self.store.get_totals(owner, period)
        for category in missing_categories(rows):
            rows.append(self._write_totals(owner, category, period, ZERO, ZERO, now))
        return order_totals(rows)

    def _write_totals(
        self,
        owner: OwnerId,
        category: Category,
        period: Period,
        expenses: Money,
        gains: Money,
        now: datetime,
    ) -> MonthlyTotals:
        existing = next((row for row in self.store.get_totals(owner, period) if row.category == category), None)
        row = MonthlyTotals(
            id=existing.id if existing else _new_id(),
            owner=owner,
            category=category,
            month=period.month,
            year=period.year,
            total_expenses=expenses,
            total_gains=gains,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.store.save_totals(row)
        return row
