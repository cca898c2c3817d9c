"""JSON-file-backed base for the archivable catalog repositories."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from kitstock.domain.exceptions import ErrorCode, PersistenceError
from kitstock.domain.repository.catalog_repository import CatalogRepository
from kitstock.infrastructure.persistence.json_table import JsonTable

T = TypeVar("T")


class JsonCatalogRepository(JsonTable, CatalogRepository[T]):
    """Catalog table with archive/restore and the integrity checks a
    relational backend would enforce.

    ``unique_field`` names a column whose values must be unique, compared
    case-insensitively.  ``referenced_by`` lists ``(table file, column)``
    pairs that may point at rows of this table; deleting a row that is
    still pointed at raises a foreign-key violation.
    """

    unique_field: str | None = None

    def __init__(self, file_path: Path, referenced_by: list[tuple[Path, str]] | None = None) -> None:
        self._referenced_by = list(referenced_by or [])
        super().__init__(file_path)

    # --- CatalogRepository interface ------------------------------------------

    def create(self, record: T) -> T:
        return self._insert(record)

    def get_by_id(self, record_id: str) -> T | None:
        return self._get(record_id)

    def update(self, record_id: str, changes: dict[str, Any]) -> T:
        return self._apply(record_id, changes)

    def delete(self, record_id: str) -> None:
        self._check_references(record_id)
        self._remove(record_id)

    def archive(self, record_id: str) -> T:
        return self._apply(record_id, {"archived_at": datetime.now(timezone.utc)})

    def restore(self, record_id: str) -> T:
        return self._apply(record_id, {"archived_at": None})

    def list_active(self) -> list[T]:
        return [r for r in self._all() if r.archived_at is None]

    def list_archived(self) -> list[T]:
        return [r for r in self._all() if r.archived_at is not None]

    # --- Integrity checks -----------------------------------------------------

    def _check_row(self, others: list[dict], record: Any) -> None:
        if self.unique_field is None:
            return
        value = str(getattr(record, self.unique_field)).lower()
        for row in others:
            if str(row.get(self.unique_field, "")).lower() == value:
                raise PersistenceError(
                    ErrorCode.UNIQUE_VIOLATION,
                    f"{self.entity_name.capitalize()} {self.unique_field} "
                    f"'{getattr(record, self.unique_field)}' already exists",
                )

    def _check_references(self, record_id: str) -> None:
        for table, column in self._referenced_by:
            if not table.exists():
                continue
            rows = json.loads(table.read_text(encoding="utf-8"))
            if any(row.get(column) == record_id for row in rows):
                raise PersistenceError(
                    ErrorCode.FOREIGN_KEY_VIOLATION,
                    f"{self.entity_name.capitalize()} {record_id} is referenced "
                    f"by {table.stem}.{column}",
                )
