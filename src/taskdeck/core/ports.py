# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Components depend on Protocols instead of concrete implementations.
This keeps storage substrates and the remote resource swappable and makes testing easier.
"""

from typing import Any, Protocol

JSONValue = Any
# Anything json.dumps() accepts: dict / list / str / int / float / bool / None.


class KeyValueSubstrate(Protocol):
    """
    Synchronous string key-value storage (localStorage-like).

    Implementations raise PersistenceFault on failure; PersistentStore
    catches it so callers never see it.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class PostsSource(Protocol):
    """What the search controller needs from the posts aggregator."""

    async def fetch_page(self, page: int, page_size: int) -> Any: ...
    async def search(self, query: str, page: int, page_size: int) -> Any: ...
