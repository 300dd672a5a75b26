"""
Exceptions raised by the store.

Engine failures are not wrapped: ``sqlite3.Error`` reaches the caller as-is.
"""


class MiniStoreError(Exception):
    """Base class for errors raised by ministore itself."""


class SerializationError(MiniStoreError, ValueError):
    """Raised when a typed value cannot be encoded for storage."""

    def __init__(self, key: str, type_name: str, reason: str):
        self.key = key
        self.type_name = type_name
        super().__init__(f"Cannot serialize {type_name} for key {key!r}: {reason}")


class DeserializationError(MiniStoreError, ValueError):
    """
    Raised when a stored value does not decode into the requested type.

    No partially constructed value is ever returned in its place.
    """

    def __init__(self, key: str, type_name: str, reason: str):
        self.key = key
        self.type_name = type_name
        super().__init__(f"Cannot deserialize key {key!r} as {type_name}: {reason}")


class StoreClosedError(MiniStoreError):
    """Raised when an operation is attempted on a closed store handle."""


class StoreInUseError(MiniStoreError):
    """Raised when deleting a store that still has open handles."""

    def __init__(self, path: str, open_handles: int):
        self.path = path
        self.open_handles = open_handles
        super().__init__(
            f"Cannot delete store {path}: {open_handles} open handle(s) must be released first"
        )
