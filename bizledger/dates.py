"""Date utilities for bizledger.

The current month is always derived from an injectable clock so callers
can simulate month boundaries.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from bizledger.domain.models import Period

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Wall-clock time, truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def month_range(period: Period) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        period: Calendar month.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: First day of next month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")

    Raises:
        ValueError: If the month number is out of range.
    """
    dt = datetime(period.year, period.month, 1)
    since = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    until = next_month.strftime("%Y-%m-%d")
    label = dt.strftime("%B %Y")
    return since, until, label
