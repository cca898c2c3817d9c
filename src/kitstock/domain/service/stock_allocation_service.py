"""Domain service: product stock allocation for sales and reservations.

Coordinates the cross-aggregate rule "a sale or reservation consumes
per-size product stock".  Works in two phases:

  Phase 1: validate every line item against current stock and fail the
           whole request before anything is mutated.
  Phase 2: build one cascade step per product (items grouped by product
           so two sizes of the same product never race each other) and
           hand them to a ``Cascade``.

Product stock is reached through ``StockLedger``, a narrow capability the
product store implements, so this service never depends on the store.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from kitstock.domain.exceptions import EntityNotFoundError, ValidationError
from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    InventoryLogEntry,
    size_movements,
)
from kitstock.domain.model.line_item import LineItem, group_by_product
from kitstock.domain.model.product import Product
from kitstock.domain.model.stock import SizeStock, consume_sizes, restore_sizes, size_deltas
from kitstock.domain.service.cascade import Cascade, CascadeOutcome, CascadeStep

logger = logging.getLogger(__name__)

NOT_ENOUGH_STOCK = "Not enough stock for that size"


class StockLedger(ABC):
    """Read and replace per-size product stock."""

    @abstractmethod
    def find_product(self, product_id: str) -> Product | None:
        """Return the product (active or archived), or None."""

    @abstractmethod
    def replace_sizes(self, product_id: str, sizes: list[SizeStock]) -> Product:
        """Persist a new ``sizes`` list for a product."""

    @abstractmethod
    def reload(self) -> None:
        """Re-read every product from persistence."""


class StockAllocationService:

    def __init__(self, ledger: StockLedger, cascade: Cascade | None = None) -> None:
        self._ledger = ledger
        self._cascade = cascade or Cascade()

    @property
    def cascade(self) -> Cascade:
        return self._cascade

    # --- Phase 1 --------------------------------------------------------------

    def validate(self, items: list[LineItem]) -> None:
        """Check every item against current stock.

        Quantities are accumulated per product and size, so two items for
        the same size cannot jointly ask for more than is on hand.
        Raises ValidationError carrying one message per offending field.
        """
        errors: dict[str, str] = {}
        demand: dict[tuple[str, str], int] = {}

        for index, item in enumerate(items):
            prefix = f"item{index}"
            if item.quantity <= 0:
                errors[f"{prefix}_quantity"] = "Quantity must be > 0"
            if item.price_sold.is_zero:
                errors[f"{prefix}_price_sold"] = "Price must be > 0"
            if not item.product_id:
                errors[f"{prefix}_product_id"] = "Product is required"
                continue
            if not item.size:
                errors[f"{prefix}_size"] = "Size is required"
                continue

            product = self._ledger.find_product(item.product_id)
            if product is None:
                errors[f"{prefix}_product_id"] = "Product not found"
                continue
            available = product.quantity_for(item.size)
            if available is None:
                errors[f"{prefix}_size"] = "Selected size not found"
                continue
            if item.quantity <= 0:
                continue

            key = (item.product_id, item.size)
            demand[key] = demand.get(key, 0) + item.quantity
            if demand[key] > available:
                errors[f"{prefix}_quantity"] = NOT_ENOUGH_STOCK

        if errors:
            summary = "; ".join(f"{name}: {message}" for name, message in errors.items())
            raise ValidationError(f"Invalid line items ({summary})", errors)

    # --- Phase 2 --------------------------------------------------------------
    # Steps that are given a ``history`` list append one InventoryLogEntry
    # per size they moved, and take those entries out again when they are
    # compensated, so ``history`` always describes the stock actually moved.

    def consume(
        self,
        items: list[LineItem],
        reason: str,
        change_type: InventoryChangeType = InventoryChangeType.SALE,
        history: list[InventoryLogEntry] | None = None,
    ) -> CascadeOutcome:
        return self._cascade.run(self.consume_steps(items, reason, change_type, history))

    def restore(
        self,
        items: list[LineItem],
        reason: str,
        change_type: InventoryChangeType = InventoryChangeType.SALE_REVERSAL,
        history: list[InventoryLogEntry] | None = None,
    ) -> CascadeOutcome:
        return self._cascade.run(self.restore_steps(items, reason, change_type, history))

    def consume_steps(
        self,
        items: list[LineItem],
        reason: str,
        change_type: InventoryChangeType = InventoryChangeType.SALE,
        history: list[InventoryLogEntry] | None = None,
    ) -> list[CascadeStep]:
        return [
            self._consume_step(product_id, demand, reason, change_type, history)
            for product_id, demand in group_by_product(items).items()
        ]

    def restore_steps(
        self,
        items: list[LineItem],
        reason: str,
        change_type: InventoryChangeType = InventoryChangeType.SALE_REVERSAL,
        history: list[InventoryLogEntry] | None = None,
    ) -> list[CascadeStep]:
        return [
            self._restore_step(product_id, supply, reason, change_type, history)
            for product_id, supply in group_by_product(items).items()
        ]

    # --- Step builders --------------------------------------------------------

    def _consume_step(
        self,
        product_id: str,
        demand: dict[str, int],
        reason: str,
        change_type: InventoryChangeType,
        history: list[InventoryLogEntry] | None,
    ) -> CascadeStep:
        taken: dict[str, int] = {}
        noted: list[InventoryLogEntry] = []

        def forward() -> None:
            product = self._require(product_id)
            new_sizes = consume_sizes(product.sizes, demand)
            moved = size_movements(product, new_sizes, change_type, reason)
            deltas = size_deltas(product.sizes, new_sizes)
            self._ledger.replace_sizes(product_id, new_sizes)
            taken.update(deltas)
            _note(history, noted, moved)
            logger.info("Product %s stock -%s (%s)", product_id, taken, reason)

        def compensate() -> None:
            if not taken:
                return
            product = self._require(product_id)
            self._ledger.replace_sizes(product_id, restore_sizes(product.sizes, taken))
            _forget(history, noted)
            logger.info("Product %s stock +%s (undo %s)", product_id, taken, reason)

        return CascadeStep(f"product:{product_id}", forward, compensate)

    def _restore_step(
        self,
        product_id: str,
        supply: dict[str, int],
        reason: str,
        change_type: InventoryChangeType,
        history: list[InventoryLogEntry] | None,
    ) -> CascadeStep:
        given: dict[str, int] = {}
        noted: list[InventoryLogEntry] = []

        def forward() -> None:
            product = self._require(product_id)
            carried = {size: qty for size, qty in supply.items() if product.quantity_for(size) is not None}
            if len(carried) < len(supply):
                logger.warning(
                    "Product %s no longer carries sizes %s; not restored",
                    product_id, sorted(set(supply) - set(carried)),
                )
            new_sizes = restore_sizes(product.sizes, carried)
            moved = size_movements(product, new_sizes, change_type, reason)
            self._ledger.replace_sizes(product_id, new_sizes)
            given.update(carried)
            _note(history, noted, moved)
            logger.info("Product %s stock +%s (%s)", product_id, carried, reason)

        def compensate() -> None:
            if not given:
                return
            product = self._require(product_id)
            self._ledger.replace_sizes(product_id, consume_sizes(product.sizes, given))
            _forget(history, noted)
            logger.info("Product %s stock -%s (undo %s)", product_id, given, reason)

        return CascadeStep(f"product:{product_id}", forward, compensate)

    def _require(self, product_id: str) -> Product:
        product = self._ledger.find_product(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product {product_id} not found")
        return product


def _note(
    history: list[InventoryLogEntry] | None,
    noted: list[InventoryLogEntry],
    entries: list[InventoryLogEntry],
) -> None:
    if history is None:
        return
    noted.extend(entries)
    history.extend(entries)


def _forget(history: list[InventoryLogEntry] | None, noted: list[InventoryLogEntry]) -> None:
    if history is None:
        return
    gone = {id(entry) for entry in noted}
    history[:] = [entry for entry in history if id(entry) not in gone]
    noted.clear()
