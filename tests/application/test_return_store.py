"""Integration tests for the returns log."""

from datetime import datetime, timezone

import pytest

from kitstock.application.return_store import ReturnStore
from kitstock.domain.exceptions import ErrorCode, PersistenceError, ValidationError
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.product_return import ProductReturn
from kitstock.domain.model.sale import SaleType
from tests.fakes import FakeReturnRepository, item

WHEN = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _setup() -> tuple[ReturnStore, FakeReturnRepository]:
    repo = FakeReturnRepository()
    return ReturnStore(repo, PeriodFilters()), repo


class TestReturnStore:

    def test_create_and_query(self):
        store, repo = _setup()
        created = store.create(ProductReturn.create([item("1", "M", 1)], "Ola", WHEN, SaleType.OLX))
        assert repo.stored(created.id) is not None
        assert store.by_product("1") == [created]
        assert store.by_customer("ola") == [created]
        assert store.by_product("2") == []

    def test_items_required(self):
        with pytest.raises(ValidationError, match="at least one item"):
            ProductReturn.create([], "Ola", WHEN, SaleType.OLX)

    def test_delete(self):
        store, repo = _setup()
        created = store.create(ProductReturn.create([item("1", "M", 1)], "Ola", WHEN, SaleType.OLX))
        store.delete(created.id)
        assert store.list_returns() == []
        assert repo.all_stored() == []

    def test_load_filters_by_channel(self):
        store, _ = _setup()
        store.create(ProductReturn.create([item("1", "M", 1)], "Ola", WHEN, SaleType.OLX))
        store.create(ProductReturn.create([item("1", "M", 1)], "Tomek", WHEN, SaleType.VINTED))
        store.load(PeriodFilters(sale_type=SaleType.VINTED))
        assert [r.customer_name for r in store.list_returns()] == ["Tomek"]

    def test_failed_delete_keeps_entry(self):
        store, repo = _setup()
        created = store.create(ProductReturn.create([item("1", "M", 1)], "Ola", WHEN, SaleType.OLX))
        repo.fail_next("delete", ErrorCode.NOT_FOUND)
        with pytest.raises(PersistenceError):
            store.delete(created.id)
        assert store.get(created.id) is not None
        assert store.error == "Return not found."
