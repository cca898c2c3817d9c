"""Abstract persistence collaborator for archivable catalog entities.

Defined in the domain layer so the domain never depends on
infrastructure.  Every call either returns the canonical record as the
backing store now holds it or raises ``PersistenceError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class CatalogRepository(ABC, Generic[T]):

    @abstractmethod
    def create(self, record: T) -> T:
        """Persist a new record and return it with its generated ``id``."""

    @abstractmethod
    def get_by_id(self, record_id: str) -> T | None:
        """Return a record (active or archived) by ID, or None."""

    @abstractmethod
    def update(self, record_id: str, changes: dict[str, Any]) -> T:
        """Apply a partial update and return the updated record."""

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Permanently remove a record."""

    @abstractmethod
    def archive(self, record_id: str) -> T:
        """Stamp ``archived_at`` and return the archived record."""

    @abstractmethod
    def restore(self, record_id: str) -> T:
        """Clear ``archived_at`` and return the restored record."""

    @abstractmethod
    def list_active(self) -> list[T]:
        """Return every record that is not archived."""

    @abstractmethod
    def list_archived(self) -> list[T]:
        """Return every archived record."""
