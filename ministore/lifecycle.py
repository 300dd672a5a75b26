"""
Explicit ownership of store handles.

The manager opens stores, tracks which handles are still open for each
database file, and only deletes a file once every handle for it has been
released.

    with StoreManager() as manager:
        store = manager.open("data/app.db")
        ...
        manager.release(store)
        manager.delete("data/app.db")
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import StoreOptions
from .database import delete_store
from .exceptions import StoreInUseError
from .store import MiniStore


logger = logging.getLogger(__name__)


def _handle_key(options: StoreOptions) -> str:
    path = options.file_path()
    if path is None:
        return options.database
    return str(path.resolve())


class StoreManager:
    """Track open MiniStore handles by database path."""

    def __init__(self) -> None:
        self._handles: dict[str, list[MiniStore]] = {}

    def open(self, target: str | Path | StoreOptions) -> MiniStore:
        store = MiniStore.open(target)
        self._handles.setdefault(_handle_key(store.options), []).append(store)
        return store

    def release(self, store: MiniStore) -> None:
        """Close ``store`` and stop tracking it."""
        store.close()
        key = _handle_key(store.options)
        handles = self._handles.get(key, [])
        if store in handles:
            handles.remove(store)
        if not handles:
            self._handles.pop(key, None)

    def open_handles(self, path: str | Path) -> int:
        key = str(Path(path).resolve())
        return sum(1 for store in self._handles.get(key, []) if not store.closed)

    def delete(self, path: str | Path) -> bool:
        """Delete the store file at ``path`` once no handle to it is open.

        Raises StoreInUseError while handles remain. Returns True if a
        database file was removed.
        """
        open_count = self.open_handles(path)
        if open_count:
            logger.warning("Refusing to delete %s: %d open handle(s)", path, open_count)
            raise StoreInUseError(str(path), open_count)
        self._handles.pop(str(Path(path).resolve()), None)
        return delete_store(path)

    def close_all(self) -> None:
        for handles in self._handles.values():
            for store in handles:
                store.close()
        self._handles.clear()

    def __enter__(self) -> "StoreManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close_all()
