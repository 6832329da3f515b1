"""Domain types and records for bizledger.

- Money: Decimal amount with two decimal places
- OwnerId: Authenticated owner identifier
- TransactionId: Transaction identifier
- Category: One of the three fixed business lines
- Period: A (year, month) pair
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NewType

# Money amounts are Decimal quantized to cents, never float
Money = NewType("Money", Decimal)

OwnerId = NewType("OwnerId", str)

TransactionId = NewType("TransactionId", str)

ZERO = Money(Decimal("0.00"))


class Category(str, Enum):
    """Fixed business lines, declared in display order."""

    PLR_NACIONAL = "plr_nacional"
    PLR_INTERNACIONAL = "plr_internacional"
    MARCA_ROUPAS = "marca_roupas"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    Category.PLR_NACIONAL: "PLR Nacional",
    Category.PLR_INTERNACIONAL: "PLR Internacional",
    Category.MARCA_ROUPAS: "Marca de Roupas",
}

CATEGORY_ORDER: tuple[Category, ...] = tuple(Category)


class TransactionKind(str, Enum):
    EXPENSE = "expense"
    GAIN = "gain"


@dataclass(frozen=True, order=True)
class Period:
    """Calendar month. Orders chronologically."""

    year: int
    month: int

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction record."""

    id: TransactionId
    owner: OwnerId
    category: Category
    kind: TransactionKind
    description: str
    amount: Money
    occurred_at: datetime
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class MonthlyTotals:
    """Live totals for one category in one period."""

    id: str
    owner: OwnerId
    category: Category
    month: int
    year: int
    total_expenses: Money
    total_gains: Money
    created_at: datetime
    updated_at: datetime

    @property
    def period(self) -> Period:
        return Period(self.year, self.month)


@dataclass(frozen=True)
class CategoryAmounts:
    """Expense/gain pair archived for one category."""

    category: Category
    expenses: Money
    gains: Money


@dataclass(frozen=True)
class MonthlyHistory:
    """Archived snapshot of a closed month. One entry per category, in category order."""

    id: str
    owner: OwnerId
    month: int
    year: int
    entries: tuple[CategoryAmounts, ...]
    closed_at: datetime

    @property
    def period(self) -> Period:
        return Period(self.year, self.month)

    def amounts_for(self, category: Category) -> CategoryAmounts:
        for entry in self.entries:
            if entry.category == category:
                return entry
        return CategoryAmounts(category=category, expenses=ZERO, gains=ZERO)
