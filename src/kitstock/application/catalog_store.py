"""Catalog store: in-memory view of one archivable entity type.

A store owns a single collection keyed by ``id``.  Whether a record is
active or archived is read from its ``archived_at`` stamp, so "find it in
either list" is one dictionary lookup.

Every action calls the repository first and only touches the collection
once that call returned, so a persistence failure never leaves the
collection half-updated.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from kitstock.application.error_state import ErrorState
from kitstock.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogStore(ErrorState, Generic[T]):

    entity_name = "record"

    def __init__(self, repo: CatalogRepository[T]) -> None:
        super().__init__()
        self._repo = repo
        self._records: dict[str, T] = {}

    # --- Getters --------------------------------------------------------------

    def list_active(self) -> list[T]:
        return [r for r in self._records.values() if r.archived_at is None]

    def list_archived(self) -> list[T]:
        return [r for r in self._records.values() if r.archived_at is not None]

    def get(self, record_id: str) -> T | None:
        """Return the record whether it is active or archived."""
        return self._records.get(record_id)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    # --- Actions --------------------------------------------------------------

    def load(self) -> None:
        """Replace the collection with what persistence currently holds."""

        def action() -> None:
            active = self._repo.list_active()
            archived = self._repo.list_archived()
            self._records = {r.id: r for r in [*active, *archived]}

        self._guard("load", action)

    def load_archived(self) -> None:
        """Refresh only the archived records, leaving active ones as they are."""
        archived = self._guard("load", self._repo.list_archived)
        active = {k: r for k, r in self._records.items() if r.archived_at is None}
        self._records = {**active, **{r.id: r for r in archived}}

    def create(self, record: T) -> T:
        created = self._guard("create", lambda: self._repo.create(record))
        self._records[created.id] = created
        logger.info("Created %s %s", self.entity_name, created.id)
        return created

    def update(self, record_id: str, changes: dict[str, Any]) -> T:
        """Update a record in place, keeping it active or archived as it was."""

        def action() -> T:
            self._before_update(record_id, changes)
            return self._repo.update(record_id, changes)

        updated = self._guard("update", action)
        self._records[record_id] = updated
        return updated

    def archive(self, record_id: str) -> T | None:
        """Archive a known record; unknown ids are a no-op returning None."""
        if record_id not in self._records:
            return None

        def action() -> T:
            self._before_archive(record_id)
            return self._repo.archive(record_id)

        archived = self._guard("archive", action)
        self._records[record_id] = archived
        logger.info("Archived %s %s", self.entity_name, record_id)
        return archived

    def restore(self, record_id: str) -> T | None:
        """Bring an archived record back; unknown ids are a no-op returning None."""
        if record_id not in self._records:
            return None
        restored = self._guard("restore", lambda: self._repo.restore(record_id))
        self._records[record_id] = restored
        logger.info("Restored %s %s", self.entity_name, record_id)
        return restored

    def delete(self, record_id: str) -> None:
        """Delete a known record; unknown ids are a no-op."""
        if record_id not in self._records:
            self.clear_error()
            return

        def action() -> None:
            self._before_delete(record_id)
            self._repo.delete(record_id)

        self._guard("delete", action)
        self._records.pop(record_id, None)
        logger.info("Deleted %s %s", self.entity_name, record_id)

    # --- Hooks ----------------------------------------------------------------

    def _before_update(self, record_id: str, changes: dict[str, Any]) -> None:
        """Reject an update before it reaches persistence."""

    def _before_archive(self, record_id: str) -> None:
        """Reject an archive before it reaches persistence."""

    def _before_delete(self, record_id: str) -> None:
        """Reject a delete before it reaches persistence."""
