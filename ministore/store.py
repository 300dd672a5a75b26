"""
SQLite-backed key-value store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TypeVar, overload

from .config import StoreOptions
from .database import connect, initialize_database, run_pre_commands
from .exceptions import StoreClosedError
from .serialization import decode, encode


logger = logging.getLogger(__name__)

T = TypeVar("T")

_UPSERT_SQL = (
    "INSERT INTO Store (Key, Data) VALUES (?, ?) "
    "ON CONFLICT(Key) DO UPDATE SET Data = excluded.Data"
)
_BATCH_SQL = "INSERT OR REPLACE INTO Store (Key, Data) VALUES (?, ?)"


def _require_key(key: object) -> str:
    if not isinstance(key, str):
        raise ValueError(f"key must be a str, got {type(key).__name__}")
    if not key:
        raise ValueError("key must not be empty")
    return key


def _require_value(key: str, value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(
            f"value for key {key!r} must be a str, got {type(value).__name__}; "
            "use put_typed() to store other values"
        )
    return value


def _batch_rows(items: Iterable[tuple[str, str]]) -> Iterator[tuple[str, str]]:
    for item in items:
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise ValueError(f"batch items must be (key, value) pairs, got {item!r}")
        key = _require_key(item[0])
        yield key, _require_value(key, item[1])


class MiniStore:
    """Embarrassingly simple key-value store on top of SQLite.

    Every operation opens its own connection and closes it before
    returning; concurrent writers are serialized by SQLite's locking.
    Engine errors (``sqlite3.Error``) are never caught or retried.

    Usage:
        store = MiniStore("data/app.db")
        store.put("greeting", "hello")
        store.get("greeting")          # "hello"
        store.get("missing")           # ""
    """

    options: StoreOptions

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        options: StoreOptions | None = None,
    ) -> None:
        if (path is None) == (options is None):
            raise ValueError("pass exactly one of path or options")
        self.options = options if options is not None else StoreOptions.from_path(path)
        self._closed = False
        initialize_database(self.options)
        run_pre_commands(self.options)
        logger.debug("Opened store %s", self.options.database)

    @classmethod
    def open(cls, target: str | Path | StoreOptions) -> "MiniStore":
        if isinstance(target, StoreOptions):
            return cls(options=target)
        return cls(target)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Mark the handle closed. Holds no connection, so nothing to flush."""
        self._closed = True

    def __enter__(self) -> "MiniStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"MiniStore({self.options.database!r}, {state})"

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError(f"Store {self.options.database} is closed")

    def put(self, key: str, value: str) -> None:
        """Create or update the value stored under ``key``."""
        self._check_open()
        key = _require_key(key)
        value = _require_value(key, value)
        with connect(self.options) as connection:
            _ = connection.execute(_UPSERT_SQL, (key, value))
            connection.commit()

    def put_typed(self, key: str, value: object) -> None:
        """Serialize ``value`` to JSON and store it under ``key``."""
        self._check_open()
        key = _require_key(key)
        self.put(key, encode(key, value))

    def batch_put(self, items: Iterable[tuple[str, str]]) -> int:
        """Insert many pairs in one transaction; much faster than repeated puts.

        If any pair is malformed or any statement fails, nothing from the
        batch is committed. Returns the number of pairs written.
        """
        self._check_open()
        rows = list(_batch_rows(items))
        with connect(self.options) as connection:
            # commits on success, rolls back the whole batch on any error
            with connection:
                _ = connection.executemany(_BATCH_SQL, rows)
        logger.debug("Batch put %d items into %s", len(rows), self.options.database)
        return len(rows)

    def delete(self, key: str) -> None:
        """Remove ``key``; deleting a missing key is a no-op."""
        self._check_open()
        key = _require_key(key)
        with connect(self.options) as connection:
            _ = connection.execute("DELETE FROM Store WHERE Key = ?", (key,))
            connection.commit()

    def _fetch(self, key: str) -> str | None:
        self._check_open()
        key = _require_key(key)
        with connect(self.options) as connection:
            row = connection.execute(
                "SELECT Data FROM Store WHERE Key = ?", (key,)
            ).fetchone()
        return None if row is None else row[0]

    @overload
    def get(self, key: str) -> str: ...

    @overload
    def get(self, key: str, default: T) -> str | T: ...

    def get(self, key: str, default: object = "") -> object:
        """Return the value stored under ``key``.

        A missing key returns ``default``, the empty string unless given, so
        by default a missing key and an empty value look the same. Pass
        ``default=None`` to tell them apart.
        """
        data = self._fetch(key)
        return default if data is None else data

    def get_typed(self, key: str, type_: type[T], default: T | None = None) -> T | None:
        """Decode the JSON stored under ``key`` into ``type_``.

        Returns ``default`` if the key is missing. Raises DeserializationError
        if the stored value does not fit ``type_``.
        """
        data = self._fetch(key)
        if data is None:
            return default
        return decode(key, data, type_)

    def exists(self, key: str) -> bool:
        self._check_open()
        key = _require_key(key)
        with connect(self.options) as connection:
            row = connection.execute(
                "SELECT COUNT(*) FROM Store WHERE Key = ?", (key,)
            ).fetchone()
        return row[0] > 0

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(key) and self.exists(key)

    def keys(self) -> list[str]:
        """All keys, in whatever order SQLite returns them."""
        self._check_open()
        with connect(self.options) as connection:
            rows = connection.execute("SELECT Key FROM Store").fetchall()
        return [row[0] for row in rows]

    def keys_like(self, pattern: str, escape: str | None = None) -> list[str]:
        """Keys matching a SQL LIKE ``pattern`` (``%`` any run, ``_`` one char).

        SQLite's LIKE ignores ASCII case by default. ``escape`` names a single
        character that makes the following ``%`` or ``_`` literal.
        """
        self._check_open()
        if escape is None:
            sql, params = "SELECT Key FROM Store WHERE Key LIKE ?", (pattern,)
        else:
            if len(escape) != 1:
                raise ValueError("escape must be a single character")
            sql, params = "SELECT Key FROM Store WHERE Key LIKE ? ESCAPE ?", (pattern, escape)
        with connect(self.options) as connection:
            rows = connection.execute(sql, params).fetchall()
        return [row[0] for row in rows]
