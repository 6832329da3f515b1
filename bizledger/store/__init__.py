"""Store layer - provides persistence for the ledger.

This module re-exports the store implementations and schema helpers.
"""

from bizledger.store.base import LedgerStore
from bizledger.store.memory import MemoryStore
from bizledger.store.schema import database_exists, get_db_path, init_database
from bizledger.store.sqlite import SqliteStore

__all__ = [
    # Interface
    "LedgerStore",
    # Implementations
    "MemoryStore",
    "SqliteStore",
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
]
