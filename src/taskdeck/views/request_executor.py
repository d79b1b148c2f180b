# src/taskdeck/views/request_executor.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Generic, TypeVar

from ..errors import FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


def error_message(exc: BaseException) -> str:
    """Human-readable message for an error state."""
    if isinstance(exc, FetchError):
        return exc.message
    return str(exc).strip() or exc.__class__.__name__


class RequestExecutor(Generic[T]):
    """
    State container around one async operation.

    Observable fields for a front end: data, error, status, loading.

    Invocations may overlap and are never cancelled: whichever resolves last
    writes data/error. Consumers that care about ordering (search) must
    discard stale results themselves.
    """

    def __init__(
        self,
        operation: Callable[..., Awaitable[T]],
        *,
        initial_data: T | None = None,
        immediate: bool = False,
        name: str | None = None,
    ) -> None:
        if operation is None:
            raise ValueError("operation is required")
        self._operation = operation
        self.name = name or getattr(operation, "__name__", "request")

        self.data: T | None = initial_data
        self.error: str | None = None
        self.status = RequestStatus.IDLE
        self._settled = RequestStatus.IDLE
        self._in_flight = 0

        self.immediate_task: asyncio.Task[Any] | None = None
        if immediate:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise RuntimeError(
                    f"RequestExecutor({self.name!r}) with immediate=True needs a running event loop"
                ) from None
            self.immediate_task = loop.create_task(self.invoke())
            self.immediate_task.add_done_callback(self._consume_immediate_result)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def _consume_immediate_result(self, task: asyncio.Task[Any]) -> None:
        # Failure is already recorded in self.error; nobody awaits this task.
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Immediate %s failed: %s", self.name, self.error)

    def set_data(self, value: T | None) -> None:
        self.data = value

    async def invoke(self, *args: Any, **kwargs: Any) -> T:
        self._in_flight += 1
        self.status = RequestStatus.PENDING
        self.error = None
        try:
            result = await self._operation(*args, **kwargs)
        except Exception as e:
            self.error = error_message(e)
            logger.error("API call failed (%s): %s", self.name, self.error)
            self._finish(RequestStatus.REJECTED)
            raise
        except BaseException:
            # Cancelled: data is untouched, status falls back to the last settled one.
            self._finish(self._settled)
            raise

        self.data = result
        self.error = None
        self._finish(RequestStatus.FULFILLED)
        return result

    def _finish(self, terminal: RequestStatus) -> None:
        self._in_flight -= 1
        self._settled = terminal
        # While another invocation is still running the executor stays pending.
        self.status = RequestStatus.PENDING if self._in_flight > 0 else terminal
