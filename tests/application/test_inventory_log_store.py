"""Integration tests for the inventory history store."""

from datetime import datetime, timedelta, timezone

import pytest

from kitstock.application.inventory_log_store import InventoryLogStore
from kitstock.domain.exceptions import PersistenceError, ValidationError
from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    InventoryEntityType,
    InventoryLogEntry,
    InventoryLogFilters,
    InventoryReferenceType,
)
from kitstock.domain.service.stock_journal import write_history
from tests.fakes import FakeInventoryLogRepository

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _move(entity_id="1", before=5, after=3, entity_type=InventoryEntityType.PRODUCT, days_ago=0):
    entry = InventoryLogEntry.movement(
        entity_type, entity_id, "Shirt", InventoryChangeType.SALE, before, after, size="M",
    )
    entry.created_at = NOW - timedelta(days=days_ago)
    return entry


def _setup(entries=None):
    repo = FakeInventoryLogRepository(entries)
    return InventoryLogStore(repo), repo


class TestRecord:

    def test_assigns_ids_and_keeps_newest_first(self):
        store, repo = _setup()
        first = store.record([_move()])
        second = store.record([_move("2")])
        assert [e.id for e in first + second] == ["1", "2"]
        assert [e.entity_id for e in store.list_entries()] == ["2", "1"]
        assert len(repo.all_stored()) == 2

    def test_failure_is_reported_not_raised(self):
        store, repo = _setup()
        repo.fail_next("create_many")
        assert store.record([_move()]) == []
        assert store.error is not None
        assert repo.all_stored() == []

    def test_next_success_clears_error(self):
        store, repo = _setup()
        repo.fail_next("create_many")
        store.record([_move()])
        store.record([_move()])
        assert store.error is None

    def test_empty_batch_skips_repository(self):
        store, repo = _setup()
        assert store.record([]) == []
        assert repo.calls_for("create_many") == []


class TestWriteHistory:

    def test_without_journal_nothing_happens(self):
        assert write_history(None, [_move()]) == []

    def test_reference_stamped_on_every_entry(self):
        store, repo = _setup()
        write_history(store, [_move("1"), _move("2")], InventoryReferenceType.SALE, "9")
        assert {(e.reference_type, e.reference_id) for e in repo.all_stored()} == {
            (InventoryReferenceType.SALE, "9"),
        }


class TestQueries:

    def test_load_applies_filters(self):
        store, _ = _setup()
        store.record([_move("1"), _move("2"), _move("B", entity_type=InventoryEntityType.BADGE)])
        store.load(InventoryLogFilters(entity_type=InventoryEntityType.PRODUCT))
        assert sorted(e.entity_id for e in store.list_entries()) == ["1", "2"]

    def test_history_of_one_entity(self):
        store, _ = _setup()
        store.record([_move("1", 5, 4, days_ago=2), _move("2"), _move("1", 4, 1, days_ago=1)])
        found = store.history(InventoryEntityType.PRODUCT, "1", limit=1)
        assert [(e.quantity_before, e.quantity_after) for e in found] == [(4, 1)]

    def test_load_failure_sets_error(self):
        store, repo = _setup()
        repo.fail_next("search")
        with pytest.raises(PersistenceError):
            store.load()
        assert store.error is not None


class TestPurge:

    def test_removes_only_old_entries(self):
        store, repo = _setup()
        store.record([_move("1", days_ago=40), _move("2", days_ago=5)])
        assert store.purge(30, now=NOW) == 1
        assert [e.entity_id for e in repo.all_stored()] == ["2"]
        assert [e.entity_id for e in store.list_entries()] == ["2"]

    def test_days_must_be_positive(self):
        store, repo = _setup()
        with pytest.raises(ValidationError):
            store.purge(0, now=NOW)
        assert store.error is not None
        assert repo.calls_for("delete_before") == []
