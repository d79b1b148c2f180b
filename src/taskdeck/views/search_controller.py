# src/taskdeck/views/search_controller.py

from __future__ import annotations

"""
Debounced search over the posts aggregator.

Input flow:
  on_input(text)  -> raw (immediately)
  quiet interval  -> debounced
  debounced change -> one load of (query, page=1)

Every load bumps a generation counter. When a load resolves, its result (or
error) is applied only if its generation is still the current one; anything
older is a stale response and is dropped.
"""

import asyncio
import logging
from typing import Any

from ..core.ports import PostsSource
from .pagination import page_window
from .request_executor import RequestExecutor, error_message

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_PAGE_SIZE = 9


class SearchController:
    def __init__(
        self,
        source: PostsSource,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        max_visible_pages: int = 5,
    ) -> None:
        if source is None:
            raise ValueError("source is required")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")

        self._page_size = int(page_size)
        self._debounce_seconds = max(0.0, float(debounce_seconds))
        self._max_visible_pages = int(max_visible_pages)

        self._posts_request: RequestExecutor[Any] = RequestExecutor(source.fetch_page, name="fetch_page")
        self._search_request: RequestExecutor[Any] = RequestExecutor(source.search, name="search")

        # Input side
        self.raw = ""
        self.debounced = ""

        # Committed view
        self.query = ""
        self.page = 1
        self.result: Any | None = None
        self.error: str | None = None

        self._generation = 0
        self._started: tuple[str, int] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._pending: set[asyncio.Task[Any]] = set()

    # ---- observable state ----

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def loading(self) -> bool:
        return self._posts_request.loading or self._search_request.loading

    @property
    def page_numbers(self) -> list[int]:
        total_pages = int(getattr(self.result, "total_pages", 0) or 0)
        return page_window(self.page, total_pages, self._max_visible_pages)

    # ---- input ----

    def on_input(self, text: str) -> None:
        """
        Keystroke: echo into raw and restart the quiet timer.

        Must be called from the event loop thread.
        """
        self.raw = text
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce_seconds, self._on_quiet)

    def _on_quiet(self) -> None:
        self._timer = None
        if self.raw == self.debounced:
            return
        self.debounced = self.raw
        logger.debug("Debounced query=%r", self.debounced)
        self._spawn_commit(self.debounced)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _spawn_commit(self, query: str) -> None:
        key = (query, 1)
        if key == self._started:
            return
        task = asyncio.get_running_loop().create_task(self._load(query, 1))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # ---- explicit triggers ----

    async def load(self) -> Any | None:
        """Initial load of the current view."""
        return await self._load(self.query, self.page)

    async def submit(self) -> Any | None:
        """Search now with the current raw input, skipping the debounce."""
        self._cancel_timer()
        self.debounced = self.raw
        if (self.raw, 1) == self._started:
            await self.settle()
            return self.result
        return await self._load(self.raw, 1)

    async def clear(self) -> Any | None:
        """Drop the query and show page 1 of the unfiltered view."""
        self._cancel_timer()
        self.raw = ""
        self.debounced = ""
        if ("", 1) == self._started:
            await self.settle()
            return self.result
        return await self._load("", 1)

    async def go_to_page(self, page: int) -> Any | None:
        if page < 1:
            raise ValueError(f"page must be >= 1 (got {page})")
        return await self._load(self.query, int(page))

    async def refresh(self) -> Any | None:
        """Reload the current view (retry after an error)."""
        return await self._load(self.query, self.page)

    async def settle(self) -> None:
        """Wait until every debounced load started so far has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self) -> None:
        self._cancel_timer()
        for task in list(self._pending):
            task.cancel()

    # ---- loading ----

    async def _load(self, query: str, page: int) -> Any | None:
        self._generation += 1
        generation = self._generation
        self._started = (query, page)
        self.query = query
        self.page = page

        try:
            if query:
                result = await self._search_request.invoke(query, page, self._page_size)
            else:
                result = await self._posts_request.invoke(page, self._page_size)
        except Exception as e:
            if generation != self._generation:
                logger.debug("Dropping stale error for query=%r page=%s", query, page)
                return None
            self.error = error_message(e)
            # Allow the same (query, page) to be committed again as a retry.
            self._started = None
            return None

        if generation != self._generation:
            logger.debug(
                "Dropping stale result for query=%r page=%s (generation %s < %s)",
                query,
                page,
                generation,
                self._generation,
            )
            return None

        self.error = None
        self.result = result
        return result
