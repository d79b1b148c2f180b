# tests/test_theme.py

from __future__ import annotations

from taskdeck.storage.persistent_store import PersistentStore
from taskdeck.storage.substrates import MemorySubstrate
from taskdeck.storage.theme import ThemePreference


def test_theme_defaults_to_light(store: PersistentStore) -> None:
    assert ThemePreference(store).dark_mode is False


def test_theme_toggle_is_persisted(substrate: MemorySubstrate, store: PersistentStore) -> None:
    theme = ThemePreference(store)
    assert theme.toggle() is True
    assert substrate.items["theme"] == "true"

    assert ThemePreference(PersistentStore(substrate)).dark_mode is True

    theme.set(False)
    assert ThemePreference(PersistentStore(substrate)).dark_mode is False


def test_theme_ignores_non_bool_value(substrate: MemorySubstrate, store: PersistentStore) -> None:
    substrate.items["theme"] = '"dark"'
    assert ThemePreference(store).dark_mode is False
