"""Shared fixtures: a controllable clock and both store backends."""

from datetime import datetime

import pytest

from bizledger.aggregator import MonthlyLedger
from bizledger.store import LedgerStore, MemoryStore, SqliteStore, init_database


class FrozenClock:
    """Clock that returns a fixed time until moved."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def move_to(self, now: datetime) -> None:
        self.now = now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 3, 15, 12, 0, 0))


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path) -> LedgerStore:
    if request.param == "memory":
        return MemoryStore()
    db_path = tmp_path / "bizledger.db"
    init_database(db_path)
    return SqliteStore(db_path)


@pytest.fixture
def ledger(store: LedgerStore, clock: FrozenClock) -> MonthlyLedger:
    return MonthlyLedger(store, clock)
