"""Record store — the product collection kept under one key of a key-value storage.

Storage backends expose ``get_item``, ``set_item`` and ``remove_item`` over
string keys and values. ``MemoryStorage`` lives in process memory;
``JsonFileStorage`` keeps every key in one JSON object file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from blitz.record import ProductRecord, dump_collection, load_collection
from config.settings import STORAGE_KEY

logger = logging.getLogger(__name__)

UNREADABLE_MESSAGE = (
    "Os dados salvos não puderam ser lidos; nada foi gravado para não sobrescrevê-los."
)


class UnreadableCollectionError(ValueError):
    """Stored data is present but unreadable, so writing would destroy it."""

    def __init__(self, message: str = UNREADABLE_MESSAGE):
        super().__init__(message)


class MemoryStorage:
    """Dict-backed key-value storage."""

    def __init__(self, initial: Optional[dict] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage:
    """Key-value storage persisted to a single JSON object file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self, strict: bool = False) -> dict:
        """Read the whole file; *strict* raises instead of reading a damaged file as empty."""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            if strict:
                raise UnreadableCollectionError() from exc
            logger.warning("Storage file %s is unreadable, treating it as empty", self._path)
            return {}
        if not isinstance(data, dict):
            if strict:
                raise UnreadableCollectionError()
            logger.warning("Storage file %s does not hold an object, treating it as empty", self._path)
            return {}
        return data

    def _save(self, data: dict) -> None:
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load(strict=True)
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def keys(self) -> list[str]:
        return list(self._load())


class RecordStore:
    """Load, save and clear the product collection."""

    def __init__(self, storage, key: str = STORAGE_KEY):
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[ProductRecord]:
        """Return the stored records; empty when absent or unreadable."""
        try:
            raw = self._storage.get_item(self._key)
        except OSError:
            logger.warning("Could not read records from storage", exc_info=True)
            return []
        if raw is None:
            return []
        try:
            return load_collection(raw)
        except ValueError as exc:
            logger.warning("Discarding unreadable record collection under %r: %s", self._key, exc)
            return []

    def save(self, records: list[ProductRecord]) -> None:
        """Overwrite the stored collection with *records*."""
        self._storage.set_item(self._key, dump_collection(records))
        logger.debug("Saved %d record(s) under %r", len(records), self._key)

    def append(self, record: ProductRecord) -> list[ProductRecord]:
        """Add *record* to the end of the collection and persist it.

        Raises:
            UnreadableCollectionError: a collection is stored but cannot be
                read; it is left untouched.
        """
        raw = self._storage.get_item(self._key)
        if raw is None:
            records = []
        else:
            try:
                records = load_collection(raw)
            except ValueError as exc:
                logger.error("Refusing to overwrite unreadable collection under %r: %s", self._key, exc)
                raise UnreadableCollectionError() from exc
        records.append(record)
        self.save(records)
        return records

    def clear(self) -> None:
        """Remove the stored collection entirely."""
        self._storage.remove_item(self._key)
        logger.info("Cleared record collection under %r", self._key)
