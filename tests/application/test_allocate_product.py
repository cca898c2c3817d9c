"""Integration tests for product creation with nameset and badge deduction."""

import pytest

from kitstock.application.allocate_product import ProductAllocator
from kitstock.application.badge_store import BadgeStore
from kitstock.application.inventory_log_store import InventoryLogStore
from kitstock.application.nameset_store import NamesetStore
from kitstock.application.product_store import ProductStore
from kitstock.domain.exceptions import CascadeAbortedError, ErrorCode, PersistenceError
from kitstock.domain.model.badge import Badge
from kitstock.domain.model.inventory_log import InventoryChangeType, InventoryEntityType
from kitstock.domain.model.nameset import Nameset
from kitstock.domain.model.value_objects import Money
from kitstock.domain.service.cascade import Cascade, CascadePolicy
from tests.fakes import (
    FakeBadgeRepository,
    FakeInventoryLogRepository,
    FakeNamesetRepository,
    FakeProductRepository,
    make_product,
)


def _setup(policy: CascadePolicy = CascadePolicy.BEST_EFFORT):
    """Nameset N with 20 units and badge B with 5 units."""
    product_repo = FakeProductRepository()
    nameset_repo = FakeNamesetRepository([
        Nameset("N", "Lewandowski", 9, "2024/25", 20, "default-kit-type-1st"),
    ])
    badge_repo = FakeBadgeRepository([
        Badge("B", "Ekstraklasa", "2024/25", 5, Money.of("15")),
    ])
    products = ProductStore(product_repo)
    namesets = NamesetStore(nameset_repo)
    badges = BadgeStore(badge_repo)
    for store in (products, namesets, badges):
        store.load()
    allocator = ProductAllocator(products, namesets, badges, Cascade(policy))
    return allocator, products, namesets, badges, nameset_repo, badge_repo


def _draft(sizes=None, **fields):
    return make_product(None, sizes or {"S": 8}, nameset_id="N", badge_id="B", **fields)


class TestAllocationHappyPath:

    def test_deducts_nameset_and_clamps_badge(self):
        allocator, products, namesets, badges, _, _ = _setup()
        allocation = allocator.handle(_draft())
        assert allocation.requested_quantity == 8
        assert allocation.outcome.ok
        assert namesets.get("N").quantity == 12
        assert badges.get("B").quantity == 0
        assert products.get(allocation.product.id) is not None

    def test_sums_all_sizes(self):
        allocator, _, namesets, _, _, _ = _setup()
        allocator.handle(_draft({"M": 2, "L": 3}))
        assert namesets.get("N").quantity == 15

    def test_skip_flag_leaves_stock(self):
        allocator, _, namesets, badges, nameset_repo, _ = _setup()
        allocator.handle(_draft(), skip_inventory_deduction=True)
        assert namesets.get("N").quantity == 20
        assert badges.get("B").quantity == 5
        assert nameset_repo.calls_for("update") == []

    def test_zero_units_deduct_nothing(self):
        allocator, _, namesets, _, nameset_repo, _ = _setup()
        allocator.handle(_draft({"S": 0}))
        assert namesets.get("N").quantity == 20
        assert nameset_repo.calls_for("update") == []

    def test_without_nameset_or_badge(self):
        allocator, _, namesets, _, _, _ = _setup()
        allocation = allocator.handle(make_product(None, {"M": 4}))
        assert allocation.outcome.applied == []
        assert namesets.get("N").quantity == 20


class TestAllocationFailures:

    def test_best_effort_keeps_product(self):
        allocator, products, namesets, badges, nameset_repo, _ = _setup()
        nameset_repo.fail_next("update", ErrorCode.NETWORK)
        allocation = allocator.handle(_draft())
        assert allocation.outcome.failed_steps() == ["nameset:N"]
        assert products.get(allocation.product.id) is not None
        assert namesets.get("N").quantity == 20
        assert badges.get("B").quantity == 0

    def test_missing_nameset_reported(self):
        allocator, products, _, _, _, _ = _setup()
        allocation = allocator.handle(make_product(None, {"S": 1}, nameset_id="ghost"))
        assert allocation.outcome.failed_steps() == ["nameset:ghost"]
        assert len(products.list_active()) == 1

    def test_compensate_undoes_and_discards_product(self):
        allocator, products, namesets, badges, _, badge_repo = _setup(CascadePolicy.COMPENSATE)
        badge_repo.fail_next("update", ErrorCode.TIMEOUT)
        with pytest.raises(CascadeAbortedError) as info:
            allocator.handle(_draft())
        assert namesets.get("N").quantity == 20
        assert badges.get("B").quantity == 5
        assert products.list_active() == []
        assert "nameset:N" in info.value.outcome.compensated

    def test_failed_product_create_touches_nothing(self):
        product_repo = FakeProductRepository()
        nameset_repo = FakeNamesetRepository([
            Nameset("N", "Lewandowski", 9, "2024/25", 20, "default-kit-type-1st"),
        ])
        namesets = NamesetStore(nameset_repo)
        namesets.load()
        allocator = ProductAllocator(
            ProductStore(product_repo), namesets, BadgeStore(FakeBadgeRepository())
        )
        product_repo.fail_next("create", ErrorCode.NETWORK)
        with pytest.raises(PersistenceError):
            allocator.handle(_draft())
        assert namesets.get("N").quantity == 20
        assert nameset_repo.calls_for("update") == []


class TestInventoryHistory:

    def _journaled(self, policy=CascadePolicy.BEST_EFFORT):
        _, products, namesets, badges, _, badge_repo = _setup(policy)
        log_repo = FakeInventoryLogRepository()
        journaled = ProductAllocator(
            products, namesets, badges, Cascade(policy), InventoryLogStore(log_repo)
        )
        return journaled, log_repo, badge_repo

    def test_initial_stock_and_deductions_are_logged(self):
        allocator, log_repo, _ = self._journaled()
        product = allocator.handle(_draft({"M": 2, "L": 1})).product
        entries = {(e.entity_type, e.entity_id, e.size): e for e in log_repo.all_stored()}
        assert entries[(InventoryEntityType.PRODUCT, product.id, "M")].quantity_after == 2
        assert entries[(InventoryEntityType.PRODUCT, product.id, "L")].change_type is (
            InventoryChangeType.INITIAL_STOCK
        )
        nameset = entries[(InventoryEntityType.NAMESET, "N", None)]
        assert (nameset.change_type, nameset.quantity_before, nameset.quantity_after) == (
            InventoryChangeType.PRODUCT_CREATION, 20, 17,
        )
        assert entries[(InventoryEntityType.BADGE, "B", None)].quantity_after == 2
        assert {e.reference_id for e in entries.values()} == {product.id}

    def test_failed_deduction_is_not_logged(self):
        allocator, log_repo, badge_repo = self._journaled()
        badge_repo.fail_next("update")
        allocator.handle(_draft({"M": 1}))
        assert InventoryEntityType.BADGE not in {e.entity_type for e in log_repo.all_stored()}

    def test_aborted_product_leaves_no_history(self):
        allocator, log_repo, badge_repo = self._journaled(CascadePolicy.COMPENSATE)
        badge_repo.fail_next("update")
        with pytest.raises(CascadeAbortedError):
            allocator.handle(_draft({"M": 1}))
        assert log_repo.all_stored() == []
