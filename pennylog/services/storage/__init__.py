"""
Storage Services Package

Provides the abstract key/value store interface and its backends.
The web front end uses browser cookies; local installs use JSON files.
"""

from pennylog.services.storage.interface import (
    KeyValueStoreInterface,
    SerializationError,
    StorageError,
)
from pennylog.services.storage.cookie_store import CookieStore, parse_cookie_header
from pennylog.services.storage.file_store import JsonFileStore
from pennylog.services.storage.memory_store import InMemoryStore

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Exceptions
    "SerializationError",
    "StorageError",
    # Backends
    "CookieStore",
    "InMemoryStore",
    "JsonFileStore",
    "parse_cookie_header",
]
