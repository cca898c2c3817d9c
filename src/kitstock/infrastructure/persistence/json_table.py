"""Shared file handling for the JSON-file repositories.

Each table is one JSON array of rows in its own file.  Ids are sequential
strings; seeded rows may carry non-numeric ids, which the counter skips.
The last id handed out is kept in a ``<table>.seq`` file beside the table,
so ids of deleted rows are never handed out again.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

from kitstock.domain.exceptions import ErrorCode, PersistenceError


class JsonTable:

    entity_name = "record"

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._seq_path = file_path.with_suffix(".seq")
        self._ensure_file()

    # --- Row helpers ----------------------------------------------------------

    def _next_id(self, rows: list[dict]) -> str:
        numeric = [int(r["id"]) for r in rows if str(r["id"]).isdigit()]
        return str(max([self._last_id(), *numeric]) + 1)

    def _find_row(self, rows: list[dict], record_id: str) -> int:
        for index, row in enumerate(rows):
            if row["id"] == record_id:
                return index
        raise PersistenceError(
            ErrorCode.NOT_FOUND, f"{self.entity_name.capitalize()} {record_id} not found"
        )

    def _insert(self, record: Any) -> Any:
        """Append a new record, assigning its id."""
        return self._insert_many([record])[0]

    def _insert_many(self, records: list[Any]) -> list[Any]:
        """Append records in one write; a rejected record stores none of them."""
        rows = self._load_raw()
        created = []
        for record in records:
            row_record = dataclasses.replace(record, id=self._next_id(rows))
            self._check_row(rows, row_record)
            rows.append(self._to_raw(row_record))
            created.append(row_record)
        if not created:
            return []
        self._persist_raw(rows)
        self._seq_path.write_text(f"{created[-1].id}\n", encoding="utf-8")
        return created

    def _apply(self, record_id: str, changes: dict[str, Any]) -> Any:
        """Replace fields of an existing record and store it."""
        if "id" in changes:
            raise PersistenceError(ErrorCode.MALFORMED_INPUT, "The id of a record cannot change")
        rows = self._load_raw()
        index = self._find_row(rows, record_id)
        try:
            updated = dataclasses.replace(self._to_domain(rows[index]), **changes)
        except TypeError as exc:
            raise PersistenceError(ErrorCode.MALFORMED_INPUT, str(exc)) from exc
        self._check_row(rows[:index] + rows[index + 1:], updated)
        rows[index] = self._to_raw(updated)
        self._persist_raw(rows)
        return updated

    def _remove(self, record_id: str) -> None:
        rows = self._load_raw()
        del rows[self._find_row(rows, record_id)]
        self._persist_raw(rows)

    def _get(self, record_id: str) -> Any | None:
        for row in self._load_raw():
            if row["id"] == record_id:
                return self._to_domain(row)
        return None

    def _all(self) -> list[Any]:
        return [self._to_domain(row) for row in self._load_raw()]

    def _check_row(self, others: list[dict], record: Any) -> None:
        """Reject ``record`` given the other rows of the table."""

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: Any) -> dict:
        raise NotImplementedError

    @staticmethod
    def _to_domain(raw: dict) -> Any:
        raise NotImplementedError

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            rows = json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PersistenceError(
                ErrorCode.MALFORMED_INPUT, f"{self._file_path.name} is not valid JSON: {exc}"
            ) from exc
        if not isinstance(rows, list):
            raise PersistenceError(
                ErrorCode.MALFORMED_INPUT, f"{self._file_path.name} must hold a JSON array"
            )
        return rows

    def _last_id(self) -> int:
        """Highest id ever assigned, 0 for a table with no ``.seq`` file yet."""
        if not self._seq_path.exists():
            return 0
        text = self._seq_path.read_text(encoding="utf-8").strip()
        if not text.isdigit():
            raise PersistenceError(
                ErrorCode.MALFORMED_INPUT, f"{self._seq_path.name} must hold a row id"
            )
        return int(text)

    def _persist_raw(self, rows: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(rows, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._persist_raw(self._seed_rows())

    def _seed_rows(self) -> list[dict]:
        return []
