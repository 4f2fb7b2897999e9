"""
JSON File Storage Implementation

One `<key>.json` file per document inside a data directory. Intended for
running the app locally, where browser cookies would tie the data to a
single browser profile.
"""

import json
import re
from pathlib import Path
from typing import Any, Union

import structlog

from pennylog.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    encode_json,
)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore(KeyValueStoreInterface):
    """Stores each key as a JSON file in `directory`."""

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)
        self._logger = structlog.get_logger(__name__)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key) or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def load(self, key: str, default: Any) -> Any:
        try:
            target = self.path_for(key)
        except StorageError as e:
            self._logger.warning("file_key_rejected", key=key, error=str(e))
            return default
        if not target.exists():
            return default
        try:
            with target.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.warning("file_decode_failed", key=key, path=str(target), error=str(e))
            return default

    def save(self, key: str, value: Any) -> None:
        text = encode_json(value)
        target = self.path_for(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp = target.with_suffix(".json.tmp")
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(target)
        except OSError as e:
            raise StorageError(f"Could not write {target}: {e}") from e
