"""Pure functions for monthly ledger calculations.

This module contains the functional core of the aggregator:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are Decimal (Money type), never float.
"""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from bizledger.domain.errors import ValidationError
from bizledger.domain.models import (
    CATEGORY_ORDER,
    ZERO,
    Category,
    CategoryAmounts,
    Money,
    MonthlyHistory,
    MonthlyTotals,
    Period,
    Transaction,
    TransactionKind,
)

CENT = Decimal("0.01")

# Amounts fit a decimal(10, 2) column
MAX_DIGITS = 10

MAX_DESCRIPTION_LENGTH = 500


def parse_money(value: str | int | Decimal) -> Money:
    """Parse a non-negative monetary amount.

    Args:
        value: Decimal string (e.g. "50.00"), int, or Decimal.

    Returns:
        Amount quantized to two decimal places.

    Raises:
        ValidationError: If the value is a float, malformed, negative, not finite,
            has more than two decimal places, or exceeds the supported precision.
    """
    if isinstance(value, float):
        raise ValidationError("Amount must be a decimal string, not a float")
    if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
        raise ValidationError(f"Unsupported amount type: {type(value).__name__}")

    try:
        amount = Decimal(value.strip()) if isinstance(value, str) else Decimal(value)
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {value!r}") from None

    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValidationError("Amount must not be negative")

    try:
        quantized = amount.quantize(CENT)
    except InvalidOperation:
        raise ValidationError(f"Amount exceeds {MAX_DIGITS} digits") from None
    if quantized != amount:
        raise ValidationError("Amount must have at most two decimal places")
    if len(quantized.as_tuple().digits) > MAX_DIGITS:
        raise ValidationError(f"Amount exceeds {MAX_DIGITS} digits")

    return Money(quantized.copy_abs())


def parse_category(value: str | Category) -> Category:
    """Parse a category identifier.

    Raises:
        ValidationError: If the value is not one of the fixed categories.
    """
    try:
        return Category(value)
    except ValueError:
        valid = ", ".join(c.value for c in CATEGORY_ORDER)
        raise ValidationError(f"Unknown category {value!r} (expected one of: {valid})") from None


def parse_kind(value: str | TransactionKind) -> TransactionKind:
    """Parse a transaction kind ("expense" or "gain").

    Raises:
        ValidationError: If the value is not a known kind.
    """
    try:
        return TransactionKind(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction kind {value!r} (expected expense or gain)") from None


def validate_description(description: str) -> str:
    """Strip and validate a transaction description.

    Raises:
        ValidationError: If the description is empty or too long.
    """
    if not isinstance(description, str):
        raise ValidationError("Description must be text")
    cleaned = description.strip()
    if not cleaned:
        raise ValidationError("Description is required")
    if len(cleaned) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f"Description exceeds {MAX_DESCRIPTION_LENGTH} characters")
    return cleaned


def validate_limit(limit: int) -> int:
    """Validate a history limit.

    Raises:
        ValidationError: If limit is not a positive integer.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError("Limit must be a positive integer")
    return limit


def to_local_naive(moment: datetime) -> datetime:
    """Convert an aware timestamp to naive local time. Naive values pass through."""
    if moment.tzinfo is None or moment.utcoffset() is None:
        return moment.replace(tzinfo=None)
    return moment.astimezone().replace(tzinfo=None)


def period_of(moment: datetime) -> Period:
    """Return the calendar period containing a timestamp."""
    return Period(moment.year, moment.month)


def in_period(moment: datetime, period: Period) -> bool:
    """Check whether a timestamp falls inside a period."""
    return moment.year == period.year and moment.month == period.month


def select_for_recompute(
    transactions: Iterable[Transaction],
    category: Category,
    period: Period,
) -> list[Transaction]:
    """Select the transactions of one category that occurred in a period."""
    return [t for t in transactions if t.category == category and in_period(t.occurred_at, period)]


def sum_by_kind(transactions: Iterable[Transaction]) -> tuple[Money, Money]:
    """Sum transaction amounts by kind.

    Args:
        transactions: Transactions to sum.

    Returns:
        Tuple of (total_expenses, total_gains), exact to the cent.
    """
    expenses = ZERO
    gains = ZERO
    for txn in transactions:
        if txn.kind == TransactionKind.EXPENSE:
            expenses = Money(expenses + txn.amount)
        else:
            gains = Money(gains + txn.amount)
    return Money(expenses.quantize(CENT)), Money(gains.quantize(CENT))


def missing_categories(rows: Iterable[MonthlyTotals]) -> list[Category]:
    """Return categories with no totals row, in category order."""
    present = {row.category for row in rows}
    return [category for category in CATEGORY_ORDER if category not in present]


def order_totals(rows: Iterable[MonthlyTotals]) -> list[MonthlyTotals]:
    """Sort totals rows by the fixed category order."""
    rank = {category: index for index, category in enumerate(CATEGORY_ORDER)}
    return sorted(rows, key=lambda row: rank[row.category])


def build_history_entries(rows: Iterable[MonthlyTotals]) -> tuple[CategoryAmounts, ...]:
    """Build the archived expense/gain pairs for all categories.

    Categories without a totals row default to zero.
    """
    by_category = {row.category: row for row in rows}
    entries = []
    for category in CATEGORY_ORDER:
        row = by_category.get(category)
        if row is None:
            entries.append(CategoryAmounts(category=category, expenses=ZERO, gains=ZERO))
        else:
            entries.append(CategoryAmounts(category=category, expenses=row.total_expenses, gains=row.total_gains))
    return tuple(entries)


def latest_history(records: Iterable[MonthlyHistory], limit: int) -> list[MonthlyHistory]:
    """Return up to `limit` history records, most recent period first."""
    return sorted(records, key=lambda h: (h.year, h.month), reverse=True)[:limit]


def order_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort transactions newest occurred_at first."""
    return sorted(transactions, key=lambda t: t.occurred_at, reverse=True)


def net_result(expenses: Money, gains: Money) -> Money:
    """Gains minus expenses."""
    return Money(gains - expenses)


def format_money_display(amount: Money, include_sign: bool = False) -> str:
    """Format money amount for display.

    Args:
        amount: Decimal amount.
        include_sign: Whether to include + or - sign.

    Returns:
        Formatted string (e.g., "R$1,234.50" or "-R$12.00").
    """
    formatted = f"R${abs(amount):,.2f}"
    if amount < 0:
        return f"-{formatted}"
    if include_sign:
        return f"+{formatted}"
    return formatted


def totals_payload(row: MonthlyTotals) -> dict[str, Any]:
    """Serialize a totals row with amounts as decimal strings."""
    return {
        "id": row.id,
        "category": row.category.value,
        "month": row.month,
        "year": row.year,
        "total_expenses": str(row.total_expenses),
        "total_gains": str(row.total_gains),
        "updated_at": row.updated_at.isoformat(),
    }


def history_payload(record: MonthlyHistory) -> dict[str, Any]:
    """Serialize a history record with amounts as decimal strings."""
    return {
        "id": record.id,
        "month": record.month,
        "year": record.year,
        "categories": {
            entry.category.value: {"expenses": str(entry.expenses), "gains": str(entry.gains)}
            for entry in record.entries
        },
        "closed_at": record.closed_at.isoformat(),
    }


def transaction_payload(txn: Transaction) -> dict[str, Any]:
    """Serialize a transaction with its amount as a decimal string."""
    return {
        "id": txn.id,
        "category": txn.category.value,
        "kind": txn.kind.value,
        "description": txn.description,
        "amount": str(txn.amount),
        "occurred_at": txn.occurred_at.isoformat(),
        "created_at": txn.created_at.isoformat(),
        "updated_at": txn.updated_at.isoformat(),
    }
