# src/taskdeck/storage/persistent_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from ..core.ports import JSONValue, KeyValueSubstrate
from ..errors import PersistenceFault

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PersistentStore:
    """
    JSON get/set over a synchronous key-value substrate.

    Fault isolation:
    - read() never raises: missing, corrupt or unreadable values yield the caller's default
    - write() never raises: quota / disabled substrate / unserializable values are logged
      and reported as False

    Every successful write replaces the full value stored at the key.
    """

    def __init__(self, substrate: KeyValueSubstrate) -> None:
        if substrate is None:
            raise ValueError("substrate is required")
        self._substrate = substrate

    def read(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._substrate.get_item(key)
        except PersistenceFault:
            logger.exception("Error reading storage key %r; using default.", key)
            return default

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Corrupt JSON under storage key %r; using default.", key)
            return default

    def write(self, key: str, value: JSONValue) -> bool:
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Failed to JSON-encode value for storage key %r; not stored.", key)
            return False

        try:
            self._substrate.set_item(key, raw)
        except PersistenceFault:
            logger.exception("Error setting storage key %r; value kept in memory only.", key)
            return False

        logger.debug("Stored key=%r bytes=%d", key, len(raw))
        return True

    def remove(self, key: str) -> bool:
        try:
            self._substrate.remove_item(key)
        except PersistenceFault:
            logger.exception("Error removing storage key %r.", key)
            return False
        return True


class PersistentValue(Generic[T]):
    """
    One key of a PersistentStore, held in memory.

    The in-memory value is the source of truth for the session: set() always
    updates it, then writes through. Durability is best-effort.
    """

    def __init__(self, store: PersistentStore, key: str, default: T) -> None:
        if store is None:
            raise ValueError("store is required")
        self._store = store
        self._key = key
        self._value: T = store.read(key, default)

    @property
    def key(self) -> str:
        return self._key

    def get(self) -> T:
        return self._value

    def set(self, value: T | Callable[[T], T]) -> bool:
        """
        Replace the value (or apply a function to the current one) and persist it.

        Returns whether the durable write succeeded.
        """
        new_value = value(self._value) if callable(value) else value
        self._value = new_value
        return self._store.write(self._key, new_value)
