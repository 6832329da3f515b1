"""In-memory ledger store, used for tests and throwaway sessions."""

from bizledger.domain.errors import MonthAlreadyClosedError
from bizledger.domain.ledger import latest_history
from bizledger.domain.models import (
    Category,
    MonthlyHistory,
    MonthlyTotals,
    OwnerId,
    Period,
    Transaction,
    TransactionId,
)
from bizledger.store.base import LedgerStore


class MemoryStore(LedgerStore):
    """LedgerStore backed by plain dictionaries. Not shared between instances."""

    def __init__(self) -> None:
        self._transactions: dict[TransactionId, Transaction] = {}
        self._totals: dict[tuple[OwnerId, Category, int, int], MonthlyTotals] = {}
        self._history: dict[tuple[OwnerId, int, int], MonthlyHistory] = {}

    def add_transaction(self, txn: Transaction) -> None:
        self._transactions[txn.id] = txn

    def get_transaction(self, txn_id: TransactionId) -> Transaction | None:
        return self._transactions.get(txn_id)

    def replace_transaction(self, txn: Transaction) -> None:
        self._transactions[txn.id] = txn

    def remove_transaction(self, txn_id: TransactionId) -> None:
        self._transactions.pop(txn_id, None)

    def list_transactions(self, owner: OwnerId, category: Category) -> list[Transaction]:
        return [t for t in self._transactions.values() if t.owner == owner and t.category == category]

    def get_totals(self, owner: OwnerId, period: Period) -> list[MonthlyTotals]:
        return [
            row
            for (row_owner, _, month, year), row in self._totals.items()
            if row_owner == owner and month == period.month and year == period.year
        ]

    def save_totals(self, row: MonthlyTotals) -> None:
        self._totals[(row.owner, row.category, row.month, row.year)] = row

    def find_history(self, owner: OwnerId, period: Period) -> MonthlyHistory | None:
        return self._history.get((owner, period.month, period.year))

    def list_history(self, owner: OwnerId, limit: int) -> list[MonthlyHistory]:
        return latest_history((h for h in self._history.values() if h.owner == owner), limit)

    def archive_month(self, record: MonthlyHistory) -> None:
        key = (record.owner, record.month, record.year)
        if key in self._history:
            raise MonthAlreadyClosedError(f"{record.period} is already closed")
        self._history[key] = record
        for totals_key in [k for k in self._totals if k[0] == record.owner and k[2:] == (record.month, record.year)]:
            del self._totals[totals_key]
