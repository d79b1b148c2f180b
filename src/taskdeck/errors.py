# src/taskdeck/errors.py

from __future__ import annotations


class TaskdeckError(Exception):
    """Base class for all errors raised by taskdeck."""


class ValidationError(TaskdeckError):
    """
    Bad task input.

    Raised before any mutation happens; `field` names the offending input so
    a form can show the message next to it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class NotFoundError(TaskdeckError):
    """An operation referenced an entity id that does not exist."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"Not found: {entity_id}")
        self.entity_id = entity_id


class PersistenceFault(TaskdeckError):
    """Storage substrate failure (quota, disabled substrate, I/O)."""


class FetchError(TaskdeckError):
    """
    Remote call failed.

    status is the HTTP status code, or None when no response was received
    (connection error, timeout, undecodable body).
    """

    def __init__(self, endpoint: str, status: int | None, message: str | None = None) -> None:
        if message is None:
            if status is None:
                message = f"Request to {endpoint} failed"
            else:
                message = f"HTTP error {status} for {endpoint}"
        super().__init__(message)
        self.endpoint = endpoint
        self.status = status
        self.message = message
