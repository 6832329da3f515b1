"""Abstract storage interface for the monthly ledger.

Any backend (in-memory, SQLite) implements these methods. The interface
only moves records in and out; every calculation lives in the domain
layer and the aggregator.
"""

from abc import ABC, abstractmethod

from bizledger.domain.models import (
    Category,
    MonthlyHistory,
    MonthlyTotals,
    OwnerId,
    Period,
    Transaction,
    TransactionId,
)


class LedgerStore(ABC):
    """Persistence for transactions, live monthly totals and monthly history."""

    @abstractmethod
    def add_transaction(self, txn: Transaction) -> None:
        """Insert a new transaction."""
        pass

    @abstractmethod
    def get_transaction(self, txn_id: TransactionId) -> Transaction | None:
        """Get a transaction by id, regardless of owner.

        Returns:
            The transaction if found, None otherwise.
        """
        pass

    @abstractmethod
    def replace_transaction(self, txn: Transaction) -> None:
        """Overwrite an existing transaction with the same id."""
        pass

    @abstractmethod
    def remove_transaction(self, txn_id: TransactionId) -> None:
        """Delete a transaction by id. Missing ids are ignored."""
        pass

    @abstractmethod
    def list_transactions(self, owner: OwnerId, category: Category) -> list[Transaction]:
        """Get all of an owner's transactions in a category, any period."""
        pass

    @abstractmethod
    def get_totals(self, owner: OwnerId, period: Period) -> list[MonthlyTotals]:
        """Get the totals rows for an owner and period, in no particular order."""
        pass

    @abstractmethod
    def save_totals(self, row: MonthlyTotals) -> None:
        """Insert or replace the totals row keyed by (owner, category, month, year)."""
        pass

    @abstractmethod
    def find_history(self, owner: OwnerId, period: Period) -> MonthlyHistory | None:
        """Get the history record for an owner and period, if the period was closed."""
        pass

    @abstractmethod
    def list_history(self, owner: OwnerId, limit: int) -> list[MonthlyHistory]:
        """Get up to `limit` history records, most recent period first."""
        pass

    @abstractmethod
    def archive_month(self, record: MonthlyHistory) -> None:
        """Persist a history record and delete the totals rows of its period.

        Both changes are applied together.

        Raises:
            MonthAlreadyClosedError: If the period already has a history record.
                Nothing is changed.
        """
        pass
