"""Integration tests for recording, editing, reversing and returning sales."""

from datetime import datetime, timezone

import pytest

from kitstock.application.inventory_log_store import InventoryLogStore
from kitstock.application.product_store import ProductStore
from kitstock.application.return_store import ReturnStore
from kitstock.application.sale_store import SaleStore
from kitstock.domain.exceptions import (
    CascadeAbortedError,
    EntityNotFoundError,
    ErrorCode,
    PersistenceError,
    ValidationError,
)
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.inventory_log import InventoryChangeType, InventoryReferenceType
from kitstock.domain.model.sale import Sale, SaleType
from kitstock.domain.model.value_objects import Money
from kitstock.domain.service.cascade import Cascade, CascadePolicy
from tests.fakes import (
    FakeInventoryLogRepository,
    FakeProductRepository,
    FakeReturnRepository,
    FakeSaleRepository,
    item,
    make_product,
    sizes_of,
)


def _setup(policy: CascadePolicy = CascadePolicy.BEST_EFFORT):
    product_repo = FakeProductRepository([
        make_product("1", {"M": 10, "L": 2}),
        make_product("2", {"S": 4}),
    ])
    sale_repo = FakeSaleRepository()
    return_repo = FakeReturnRepository()
    products = ProductStore(product_repo)
    products.load()
    returns = ReturnStore(return_repo, PeriodFilters())
    sales = SaleStore(sale_repo, products, returns, Cascade(policy), PeriodFilters())
    return sales, products, returns, product_repo, sale_repo


class TestRecordSale:

    def test_decrements_stock_and_persists(self):
        sales, products, _, _, sale_repo = _setup()
        recording = sales.record([item("1", "M", 3)], "Ola", SaleType.OLX)
        assert sizes_of(products.get("1")) == {"M": 7, "L": 2}
        saved = sale_repo.stored(recording.sale.id)
        assert saved.items == [item("1", "M", 3)]
        assert saved.customer_name == "Ola"
        assert sales.get(recording.sale.id) is not None

    def test_walk_in_customer(self):
        sales, _, _, _, _ = _setup()
        recording = sales.record([item("2", "S", 1)])
        assert recording.sale.customer_name == "N/A"
        assert recording.sale.sale_type == SaleType.IN_PERSON

    def test_one_update_per_product(self):
        sales, products, _, product_repo, _ = _setup()
        sales.record([item("1", "M", 1), item("1", "L", 1), item("2", "S", 2), item("1", "M", 2)])
        assert sorted(product_repo.calls_for("update")) == ["1", "2"]
        assert sizes_of(products.get("1")) == {"M": 7, "L": 1}
        assert sizes_of(products.get("2")) == {"S": 2}

    def test_invalid_line_blocks_whole_sale(self):
        sales, products, _, product_repo, sale_repo = _setup()
        with pytest.raises(ValidationError) as info:
            sales.record([item("1", "M", 1), item("2", "S", 5)])
        assert info.value.field_errors == {"item1_quantity": "Not enough stock for that size"}
        assert product_repo.calls_for("update") == []
        assert sale_repo.calls_for("create") == []
        assert sizes_of(products.get("1")) == {"M": 10, "L": 2}
        assert sales.error is not None

    def test_empty_sale_rejected(self):
        sales, _, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            sales.record([])

    def test_best_effort_reports_failed_items(self):
        sales, products, _, product_repo, sale_repo = _setup()
        product_repo.fail_on("update", "2", ErrorCode.NETWORK)
        recording = sales.record([item("1", "M", 1), item("2", "S", 1)])
        assert recording.failed_items == [item("2", "S", 1)]
        assert sizes_of(products.get("1"))["M"] == 9
        assert sale_repo.stored(recording.sale.id) is not None

    def test_compensate_rolls_back_and_writes_nothing(self):
        sales, products, _, product_repo, sale_repo = _setup(CascadePolicy.COMPENSATE)
        product_repo.fail_on("update", "2", ErrorCode.NETWORK)
        with pytest.raises(CascadeAbortedError):
            sales.record([item("1", "M", 1), item("2", "S", 1)])
        assert sizes_of(products.get("1"))["M"] == 10
        assert sale_repo.all_stored() == []

    def test_compensate_restores_stock_when_sale_not_persisted(self):
        sales, products, _, _, sale_repo = _setup(CascadePolicy.COMPENSATE)
        sale_repo.fail_next("create", ErrorCode.TIMEOUT)
        with pytest.raises(PersistenceError):
            sales.record([item("1", "M", 4)])
        assert sizes_of(products.get("1"))["M"] == 10
        assert sales.error == "Request timed out. Please try again."


class TestSaleQueries:

    def test_list_newest_first_and_revenue(self):
        sales, _, _, _, _ = _setup()
        sales.record([item("1", "M", 1, "100")], date=datetime(2024, 5, 1, tzinfo=timezone.utc))
        sales.record([item("2", "S", 2, "50")], date=datetime(2024, 5, 3, tzinfo=timezone.utc))
        assert [s.total for s in sales.list_sales()] == [Money.of("100"), Money.of("100")]
        assert sales.list_sales()[0].date.day == 3
        assert sales.total_revenue() == Money.of("200")
        assert len(sales.by_product("2")) == 1

    def test_load_applies_filters(self):
        sales, _, _, _, _ = _setup()
        sales.record([item("1", "M", 1)], sale_type=SaleType.OLX,
                     date=datetime(2024, 5, 1, tzinfo=timezone.utc))
        sales.record([item("1", "M", 1)], sale_type=SaleType.VINTED,
                     date=datetime(2024, 6, 1, tzinfo=timezone.utc))
        sales.load(PeriodFilters(sale_type=SaleType.VINTED))
        assert [s.sale_type for s in sales.list_sales()] == [SaleType.VINTED]


class TestSaleEditDelete:

    def test_update_does_not_move_stock(self):
        sales, products, _, _, _ = _setup()
        recording = sales.record([item("1", "M", 2)])
        sales.update(recording.sale.id, {"items": [item("1", "M", 5)]})
        assert sizes_of(products.get("1"))["M"] == 8
        assert sales.get(recording.sale.id).items == [item("1", "M", 5)]

    def test_update_rejects_empty_items(self):
        sales, _, _, _, _ = _setup()
        recording = sales.record([item("1", "M", 2)])
        with pytest.raises(ValidationError):
            sales.update(recording.sale.id, {"items": []})

    def test_delete_keeps_stock(self):
        sales, products, _, _, sale_repo = _setup()
        recording = sales.record([item("1", "M", 2)])
        sales.delete(recording.sale.id)
        assert sizes_of(products.get("1"))["M"] == 8
        assert sale_repo.all_stored() == []
        assert sales.get(recording.sale.id) is None


class TestReverseAndReturn:

    def test_reverse_restores_stock(self):
        sales, products, returns, _, sale_repo = _setup()
        recording = sales.record([item("1", "M", 3), item("2", "S", 1)])
        outcome = sales.reverse(recording.sale.id)
        assert outcome.ok
        assert sizes_of(products.get("1"))["M"] == 10
        assert sizes_of(products.get("2"))["S"] == 4
        assert sale_repo.all_stored() == []
        assert returns.list_returns() == []

    def test_return_sale_logs_return(self):
        sales, products, returns, _, sale_repo = _setup()
        recording = sales.record([item("1", "L", 2)], "Ola", SaleType.VINTED)
        created = sales.return_sale(recording.sale.id)
        assert created.original_sale_id == recording.sale.id
        assert created.date == recording.sale.created_at
        assert created.customer_name == "Ola"
        assert sizes_of(products.get("1"))["L"] == 2
        assert returns.get(created.id) is not None
        assert sale_repo.all_stored() == []

    def test_return_of_unknown_sale(self):
        sales, _, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            sales.return_sale("404")

    def test_add_persists_without_touching_stock(self):
        sales, products, _, product_repo, _ = _setup()
        sale = Sale.create([item("1", "M", 2)], "Ola", SaleType.OLX)
        created = sales.add(sale)
        assert created.id is not None
        assert product_repo.calls_for("update") == []
        assert sizes_of(products.get("1"))["M"] == 10


def _journaled(policy: CascadePolicy = CascadePolicy.BEST_EFFORT):
    product_repo = FakeProductRepository([make_product("1", {"M": 10, "L": 2})])
    sale_repo = FakeSaleRepository()
    log_repo = FakeInventoryLogRepository()
    products = ProductStore(product_repo)
    products.load()
    journal = InventoryLogStore(log_repo)
    sales = SaleStore(
        sale_repo, products, ReturnStore(FakeReturnRepository(), PeriodFilters()),
        Cascade(policy), PeriodFilters(), journal,
    )
    return sales, sale_repo, log_repo


class TestInventoryHistory:

    def test_sale_writes_one_entry_per_size(self):
        sales, _, log_repo = _journaled()
        recording = sales.record([item("1", "M", 3), item("1", "L", 1)], "Ola", SaleType.OLX)
        entries = log_repo.all_stored()
        assert sorted((e.size, e.quantity_before, e.quantity_after) for e in entries) == [
            ("L", 2, 1),
            ("M", 10, 7),
        ]
        assert {e.change_type for e in entries} == {InventoryChangeType.SALE}
        assert {(e.reference_type, e.reference_id) for e in entries} == {
            (InventoryReferenceType.SALE, recording.sale.id),
        }
        assert "Ola" in entries[0].reason

    def test_reverse_and_return_are_logged(self):
        sales, _, log_repo = _journaled()
        first = sales.record([item("1", "M", 2)], "Ola").sale
        second = sales.record([item("1", "M", 1)], "Kuba").sale
        sales.reverse(first.id)
        sales.return_sale(second.id)
        changes = [(e.change_type, e.reference_id) for e in log_repo.all_stored()]
        assert (InventoryChangeType.SALE_REVERSAL, first.id) in changes
        assert (InventoryChangeType.RETURN, second.id) in changes

    def test_best_effort_persistence_failure_still_logs_moved_stock(self):
        sales, sale_repo, log_repo = _journaled()
        sale_repo.fail_next("create")
        with pytest.raises(PersistenceError):
            sales.record([item("1", "M", 1)])
        [entry] = log_repo.all_stored()
        assert entry.quantity_change == -1
        assert entry.reference_id is None

    def test_compensated_sale_leaves_no_history(self):
        sales, sale_repo, log_repo = _journaled(CascadePolicy.COMPENSATE)
        sale_repo.fail_next("create")
        with pytest.raises(PersistenceError):
            sales.record([item("1", "M", 1)])
        assert log_repo.all_stored() == []

    def test_history_failure_does_not_block_the_sale(self):
        sales, sale_repo, log_repo = _journaled()
        log_repo.fail_next("create_many")
        recording = sales.record([item("1", "M", 1)])
        assert sale_repo.stored(recording.sale.id) is not None
        assert sales.error is None
