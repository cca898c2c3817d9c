"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the stores and the CLI layer can catch them uniformly and display
user-friendly messages.
"""

from __future__ import annotations

from enum import Enum


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``field_errors`` maps a form field (for line items ``item{index}_{field}``)
    to the message shown next to it.
    """

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ErrorCode(Enum):
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    MALFORMED_INPUT = "malformed_input"
    NETWORK = "network"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class PersistenceError(DomainException):
    """Raised by a repository when the backing store rejects a call."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class CascadeAbortedError(DomainException):
    """A dependent mutation failed and the applied steps were rolled back."""

    def __init__(self, message: str, outcome) -> None:
        super().__init__(message)
        self.outcome = outcome


class ConfigurationError(DomainException):
    """An environment setting could not be parsed."""
