"""User-facing error messages and the single ``error`` slot every store keeps.

Each store remembers only the outcome of its latest action: a failure
overwrites ``error`` with a readable message, a success clears it.  The
exception itself is always re-raised so callers can react too.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from kitstock.domain.exceptions import DomainException, ErrorCode, PersistenceError

logger = logging.getLogger(__name__)

R = TypeVar("R")


def describe_error(exc: DomainException, operation: str, entity: str) -> str:
    """Translate a persistence failure into a sentence for the user."""
    if not isinstance(exc, PersistenceError):
        return str(exc) or f"Failed to {operation} {entity}"

    if exc.code is ErrorCode.FOREIGN_KEY_VIOLATION:
        return (
            f"Cannot {operation} this {entity} because it is being used by other "
            f"records. Archive it instead."
        )
    if exc.code is ErrorCode.UNIQUE_VIOLATION:
        return f"A {entity} with this name already exists. Please choose a different name."
    if exc.code is ErrorCode.PERMISSION_DENIED:
        return f"You don't have permission to {operation} this {entity}."
    if exc.code is ErrorCode.MALFORMED_INPUT:
        return f"Invalid data format for {entity}. Please check your input."
    if exc.code is ErrorCode.NOT_FOUND:
        return f"{entity.capitalize()} not found."
    if exc.code is ErrorCode.NETWORK:
        return "Network error. Please check your connection and try again."
    if exc.code is ErrorCode.TIMEOUT:
        return "Request timed out. Please try again."
    return f"Failed to {operation} {entity}: {exc.message}"


class ErrorState:
    """Mixin holding the store's current error message."""

    entity_name = "record"

    def __init__(self) -> None:
        self.error: str | None = None

    def clear_error(self) -> None:
        self.error = None

    def _guard(self, operation: str, action: Callable[[], R]) -> R:
        """Run ``action``, recording its failure or clearing the last one."""
        try:
            result = action()
        except DomainException as exc:
            self.error = describe_error(exc, operation, self.entity_name)
            logger.warning("%s %s failed: %s", operation.capitalize(), self.entity_name, exc)
            raise
        self.error = None
        return result
