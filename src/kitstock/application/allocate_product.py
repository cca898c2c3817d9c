"""Application service: create a product and consume its nameset and badge.

A product is printed with a nameset and sewn with a badge, so creating a
product with N units (summed over sizes) takes N namesets and N badges
out of stock.  The product itself is the primary mutation; the nameset
and badge deductions are cascade steps:

- under ``BEST_EFFORT`` (default) a failed deduction is logged and
  reported on the returned ``ProductAllocation``, the product stays;
- under ``COMPENSATE`` applied deductions are undone, the product is
  deleted again and ``CascadeAbortedError`` is raised.

Deductions clamp at zero: a badge with 5 units left feeding an 8-unit
product ends at 0, not -3.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from kitstock.application.badge_store import BadgeStore
from kitstock.application.catalog_store import CatalogStore
from kitstock.application.nameset_store import NamesetStore
from kitstock.application.product_store import ProductStore
from kitstock.domain.exceptions import CascadeAbortedError, DomainException, EntityNotFoundError
from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    InventoryEntityType,
    InventoryLogEntry,
    InventoryReferenceType,
    size_movements,
)
from kitstock.domain.model.product import Product
from kitstock.domain.model.stock import decrement, increment
from kitstock.domain.service.cascade import (
    Cascade,
    CascadeFailure,
    CascadeOutcome,
    CascadePolicy,
    CascadeStep,
)
from kitstock.domain.service.stock_journal import StockJournal, write_history

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductAllocation:
    product: Product
    requested_quantity: int
    outcome: CascadeOutcome


class ProductAllocator:

    def __init__(
        self,
        products: ProductStore,
        namesets: NamesetStore,
        badges: BadgeStore,
        cascade: Cascade | None = None,
        journal: StockJournal | None = None,
    ) -> None:
        self._products = products
        self._namesets = namesets
        self._badges = badges
        self._cascade = cascade or Cascade()
        self._journal = journal

    def handle(self, product: Product, skip_inventory_deduction: bool = False) -> ProductAllocation:
        """Persist ``product`` then deduct its quantity from nameset and badge.

        Steps:
        1. Total the requested quantity over all sizes.
        2. Create the product (a failure here aborts everything).
        3. Deduct the total from the nameset, then from the badge, unless
           deduction is skipped or there is nothing to deduct.
        4. Write the new stock and the deductions to the inventory history.
        """
        requested = product.total_quantity
        created = self._products.create(product)

        history = size_movements(
            dataclasses.replace(created, sizes=[]),
            created.sizes,
            InventoryChangeType.INITIAL_STOCK,
            "Stock of a new product",
        )
        steps: list[CascadeStep] = []
        if not skip_inventory_deduction and requested > 0:
            reason = f"Used for product {created.id}"
            if created.nameset_id:
                steps.append(self._deduct_step(
                    InventoryEntityType.NAMESET, self._namesets, created.nameset_id, requested, reason, history,
                ))
            if created.badge_id:
                steps.append(self._deduct_step(
                    InventoryEntityType.BADGE, self._badges, created.badge_id, requested, reason, history,
                ))

        outcome = self._cascade.run(steps)

        if not outcome.ok and self._cascade.policy is CascadePolicy.COMPENSATE:
            self._discard(created, outcome)
            raise CascadeAbortedError(
                f"Product '{created.name}' was not created: "
                + "; ".join(f"{f.step}: {f.reason}" for f in outcome.failures),
                outcome,
            )

        if not outcome.ok:
            logger.warning(
                "Product %s created but stock deductions failed for %s",
                created.id, outcome.failed_steps(),
            )
        write_history(self._journal, history, InventoryReferenceType.PRODUCT, created.id)
        return ProductAllocation(created, requested, outcome)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _deduct_step(
        entity_type: InventoryEntityType,
        store: CatalogStore,
        record_id: str,
        requested: int,
        reason: str,
        history: list[InventoryLogEntry],
    ) -> CascadeStep:
        kind = entity_type.value
        taken: list[int] = []

        def forward() -> None:
            record = store.get(record_id)
            if record is None:
                raise EntityNotFoundError(f"{kind.capitalize()} {record_id} not found")
            remaining = decrement(record.quantity, requested)
            store.update(record_id, {"quantity": remaining})
            taken.append(record.quantity - remaining)
            history.append(InventoryLogEntry.movement(
                entity_type, record_id, _display_name(record),
                InventoryChangeType.PRODUCT_CREATION, record.quantity, remaining, reason=reason,
            ))
            logger.info("%s %s quantity %d -> %d", kind.capitalize(), record_id, record.quantity, remaining)

        def compensate() -> None:
            record = store.get(record_id)
            if record is None or not taken:
                return
            store.update(record_id, {"quantity": increment(record.quantity, taken[0])})
            history[:] = [e for e in history if e.entity_id != record_id or e.entity_type is not entity_type]

        return CascadeStep(f"{kind}:{record_id}", forward, compensate)

    def _discard(self, created: Product, outcome: CascadeOutcome) -> None:
        try:
            self._products.delete(created.id)
        except DomainException as exc:
            logger.error("Could not remove product %s after failed cascade: %s", created.id, exc)
            outcome.failures.append(CascadeFailure(f"product:{created.id}", f"compensation failed: {exc}"))
        else:
            outcome.compensated.append(f"product:{created.id}")


def _display_name(record) -> str:
    """Namesets are known by their label, badges by their name."""
    return getattr(record, "label", None) or record.name
