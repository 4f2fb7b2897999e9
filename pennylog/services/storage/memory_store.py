"""In-memory storage, for tests and sessions without durable storage."""

import json
from typing import Any, Optional

import structlog

from pennylog.services.storage.interface import KeyValueStoreInterface, encode_json


class InMemoryStore(KeyValueStoreInterface):
    """
    Keeps each value as serialized JSON text.

    Storing text rather than the object means a load returns a fresh
    copy, the same as any durable backend would.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})
        self._logger = structlog.get_logger(__name__)

    def load(self, key: str, default: Any) -> Any:
        text = self._values.get(key)
        if text is None:
            return default
        try:
            return json.loads(text)
        except ValueError as e:
            self._logger.warning("memory_decode_failed", key=key, error=str(e))
            return default

    def save(self, key: str, value: Any) -> None:
        self._values[key] = encode_json(value)

    def raw(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def keys(self) -> list[str]:
        return list(self._values)
