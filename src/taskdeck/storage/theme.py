# src/taskdeck/storage/theme.py

from __future__ import annotations

import logging

from .persistent_store import PersistentStore, PersistentValue

logger = logging.getLogger(__name__)

DEFAULT_THEME_KEY = "theme"


class ThemePreference:
    """
    Dark-mode flag shared by the whole app.

    Created once by the bootstrap (persisted value or False) and injected
    wherever it is needed; there is no module-level instance.
    """

    def __init__(self, store: PersistentStore, *, key: str = DEFAULT_THEME_KEY) -> None:
        self._value: PersistentValue[bool] = PersistentValue(store, key, False)
        if not isinstance(self._value.get(), bool):
            logger.warning("Theme value under %r is not a bool; resetting to light.", key)
            self._value.set(False)

    @property
    def dark_mode(self) -> bool:
        return bool(self._value.get())

    def set(self, dark_mode: bool) -> bool:
        self._value.set(bool(dark_mode))
        logger.debug("Theme set dark_mode=%s", self.dark_mode)
        return self.dark_mode

    def toggle(self) -> bool:
        return self.set(not self.dark_mode)
