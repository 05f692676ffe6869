"""
Storage module for the dashboard's claim collection.

Provides:
- Key-value storage backends (SQLite file, in-memory)
- The claim store with write-through persistence
"""

from .backends import KeyValueStorage, MemoryStorage, SQLiteStorage
from .claim_store import (
    ClaimStore,
    get_claim_store,
    add_claim,
    get_claim,
    update_claim,
    delete_claim,
    list_claims,
)

__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "SQLiteStorage",
    "ClaimStore",
    "get_claim_store",
    "add_claim",
    "get_claim",
    "update_claim",
    "delete_claim",
    "list_claims",
]
