"""Services package."""

from pennylog.services.storage import (
    CookieStore,
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    SerializationError,
    StorageError,
)

__all__ = [
    "CookieStore",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStoreInterface",
    "SerializationError",
    "StorageError",
]
