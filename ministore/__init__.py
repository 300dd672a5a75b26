"""
MiniStore

A small persistent key-value store on top of SQLite.

This package provides:
- String get/put/delete/exists on a single ``Store`` table
- Typed values via JSON serialization (pydantic)
- Single-transaction batch inserts
- Key listing with SQL LIKE patterns
- Explicit store lifecycle and deletion
"""

from .config import JOURNAL_MODE_WAL, StoreOptions, load_options, save_options
from .database import delete_store
from .exceptions import (
    DeserializationError,
    MiniStoreError,
    SerializationError,
    StoreClosedError,
    StoreInUseError,
)
from .lifecycle import StoreManager
from .store import MiniStore

__version__ = "0.1.0"

__all__ = [
    "MiniStore", "StoreManager", "StoreOptions", "JOURNAL_MODE_WAL",
    "load_options", "save_options", "delete_store",
    "MiniStoreError", "SerializationError", "DeserializationError",
    "StoreClosedError", "StoreInUseError",
]
