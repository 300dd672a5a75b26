"""
SQLite database utilities for the store.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .config import StoreOptions


logger = logging.getLogger(__name__)

SCHEMA_SQL = "CREATE TABLE IF NOT EXISTS Store (Key TEXT PRIMARY KEY, Data TEXT)"

# Files SQLite may leave beside the database depending on the journal mode.
_SIDECAR_SUFFIXES = ("-wal", "-shm", "-journal")


@contextmanager
def connect(options: StoreOptions) -> Iterator[sqlite3.Connection]:
    """Open a connection for a single call and close it on every exit path."""
    connection = sqlite3.connect(options.database, timeout=options.timeout, uri=options.uri)
    try:
        yield connection
    finally:
        connection.close()


def initialize_database(options: StoreOptions) -> None:
    """Create the parent directory and the Store table if needed."""
    path = options.file_path()
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
    with connect(options) as connection:
        _ = connection.execute(SCHEMA_SQL)
        connection.commit()


def run_pre_commands(options: StoreOptions) -> None:
    """Execute the configured pre-commands, in order, on one connection."""
    if not options.pre_commands:
        return
    with connect(options) as connection:
        for sql in options.pre_commands:
            logger.debug("Running pre-command on %s: %s", options.database, sql)
            # fetchall() steps statements such as PRAGMA that return a row
            _ = connection.execute(sql).fetchall()
        connection.commit()


def delete_store(path: str | Path) -> bool:
    """Remove the database file and its sidecar files.

    Returns True if the database file existed. The caller must make sure no
    handle is still using the file.
    """
    path = Path(path)
    existed = path.exists()
    # the main file goes first so a failure never leaves it without its WAL
    if existed:
        path.unlink()
    for suffix in _SIDECAR_SUFFIXES:
        Path(f"{path}{suffix}").unlink(missing_ok=True)
    if existed:
        logger.debug("Deleted store %s", path)
    return existed
