"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the key/value store.
This allows us to:
1. Use browser cookies in the web front end
2. Use a directory of JSON files for a local install
3. Use in-memory storage for testing
4. Keep the controller decoupled from where documents live

The interface is intentionally tiny: whole JSON documents under string
keys. Every save replaces the previous value for the key; nothing merges.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, TypeVar

T = TypeVar("T")


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SerializationError(StorageError):
    """Value could not be encoded as JSON."""
    pass


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for JSON document storage keyed by name.

    Any backend (cookies, files, memory, a database) must implement
    these two methods.
    """

    @abstractmethod
    def load(self, key: str, default: T) -> Any:
        """
        Load the value stored under a key.

        Args:
            key: Document name
            default: Returned when nothing is stored or the stored
                     text cannot be decoded

        Returns:
            The decoded JSON value, or `default`.

        Never raises for missing or corrupt values.
        """
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """
        Store a JSON-serializable value, replacing any previous one.

        Raises:
            SerializationError: If the value cannot be encoded
            StorageError: If the backend cannot write
        """
        pass


def encode_json(value: Any) -> str:
    """Encode a value as compact JSON text, refusing NaN/Infinity."""
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Value is not JSON serializable: {e}") from e
