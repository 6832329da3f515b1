"""Domain models, errors and pure ledger logic for bizledger.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from bizledger.domain.errors import (
    LedgerError,
    MonthAlreadyClosedError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
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

__all__ = [
    # Models
    "CATEGORY_ORDER",
    "Category",
    "CategoryAmounts",
    "Money",
    "MonthlyHistory",
    "MonthlyTotals",
    "OwnerId",
    "Period",
    "Transaction",
    "TransactionId",
    "TransactionKind",
    # Errors
    "LedgerError",
    "MonthAlreadyClosedError",
    "NotFoundError",
    "UnauthenticatedError",
    "ValidationError",
]
