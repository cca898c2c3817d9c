"""Sale store: records sales and keeps the loaded sales in memory.

Recording a sale (the sale recorder flow):

1. Validate every line against current stock.  One bad line rejects the
   whole sale before anything is written.
2. Consume stock with one update per product, all sizes of a product
   folded into that single update.
3. Persist the sale.

Under the default ``BEST_EFFORT`` policy a product whose stock update
fails does not roll back the others; the sale is still written and the
affected items are reported on ``SaleRecording.failed_items``.  Under
``COMPENSATE`` the applied stock updates are undone and nothing is
written.

Plain ``delete`` removes the record only.  ``reverse`` and
``return_sale`` give the stock back first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from kitstock.application.error_state import ErrorState
from kitstock.application.return_store import ReturnStore
from kitstock.domain.exceptions import (
    CascadeAbortedError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    InventoryLogEntry,
    InventoryReferenceType,
)
from kitstock.domain.model.line_item import LineItem
from kitstock.domain.model.product_return import ProductReturn
from kitstock.domain.model.sale import Sale, SaleType
from kitstock.domain.model.value_objects import DEFAULT_CURRENCY, Money
from kitstock.domain.repository.sale_repository import SaleRepository
from kitstock.domain.service.cascade import (
    Cascade,
    CascadeOutcome,
    CascadePolicy,
    CascadeStep,
)
from kitstock.domain.service.stock_allocation_service import StockAllocationService, StockLedger
from kitstock.domain.service.stock_journal import StockJournal, write_history

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleRecording:
    sale: Sale
    outcome: CascadeOutcome
    failed_items: list[LineItem] = field(default_factory=list)


def failed_items(items: list[LineItem], outcome: CascadeOutcome) -> list[LineItem]:
    """Items whose product stock step failed."""
    failed = set(outcome.failed_steps())
    return [item for item in items if f"product:{item.product_id}" in failed]


class SaleStore(ErrorState):

    entity_name = "sale"

    def __init__(
        self,
        repo: SaleRepository,
        stock: StockLedger,
        returns: ReturnStore,
        cascade: Cascade | None = None,
        filters: PeriodFilters | None = None,
        journal: StockJournal | None = None,
    ) -> None:
        super().__init__()
        self._repo = repo
        self._returns = returns
        self._journal = journal
        self._cascade = cascade or Cascade()
        self._allocation = StockAllocationService(stock, self._cascade)
        self._sales: dict[str, Sale] = {}
        self.filters = filters or PeriodFilters.current_month()

    # --- Getters --------------------------------------------------------------

    def list_sales(self) -> list[Sale]:
        return sorted(self._sales.values(), key=lambda s: s.date, reverse=True)

    def get(self, sale_id: str) -> Sale | None:
        return self._sales.get(sale_id)

    def by_product(self, product_id: str) -> list[Sale]:
        return [s for s in self.list_sales() if s.touches_product(product_id)]

    def by_customer(self, customer_name: str) -> list[Sale]:
        needle = customer_name.lower()
        return [s for s in self.list_sales() if needle in s.customer_name.lower()]

    def total_revenue(self, currency: str = DEFAULT_CURRENCY) -> Money:
        total = Money.zero(currency)
        for sale in self._sales.values():
            total = total + sale.total
        return total

    # --- Actions --------------------------------------------------------------

    def load(self, filters: PeriodFilters | None = None) -> None:
        filters = filters or self.filters
        found = self._guard("load", lambda: self._repo.search(filters))
        self._sales = {s.id: s for s in found}
        self.filters = filters

    def record(
        self,
        items: list[LineItem],
        customer_name: str | None = None,
        sale_type: SaleType = SaleType.IN_PERSON,
        date: datetime | None = None,
    ) -> SaleRecording:
        """Validate, consume stock, then persist a new sale."""

        def action() -> SaleRecording:
            sale = Sale.create(items, customer_name, sale_type, date)
            self._allocation.validate(sale.items)

            history: list[InventoryLogEntry] = []
            steps = self._allocation.consume_steps(
                sale.items,
                f"Sale ({sale.sale_type.value}) to {sale.customer_name}",
                InventoryChangeType.SALE,
                history,
            )
            outcome = self._cascade.run(steps)
            if not outcome.ok and self._cascade.policy is CascadePolicy.COMPENSATE:
                raise CascadeAbortedError(
                    "Sale not recorded, stock updates failed for "
                    + ", ".join(outcome.failed_steps()),
                    outcome,
                )

            try:
                created = self._repo.create(sale)
            except DomainException:
                if self._cascade.policy is CascadePolicy.COMPENSATE:
                    self._cascade.rollback(steps, outcome)
                else:
                    logger.error(
                        "Sale for %s not persisted after stock was consumed from %s",
                        sale.customer_name, outcome.applied,
                    )
                    write_history(self._journal, history)
                raise
            write_history(self._journal, history, InventoryReferenceType.SALE, created.id)
            return SaleRecording(created, outcome, failed_items(sale.items, outcome))

        recording = self._guard("record", action)
        self._sales[recording.sale.id] = recording.sale
        if recording.failed_items:
            logger.warning(
                "Sale %s recorded; stock not updated for %d item(s)",
                recording.sale.id, len(recording.failed_items),
            )
        return recording

    def add(self, sale: Sale) -> Sale:
        """Persist a sale whose stock was already consumed elsewhere."""
        created = self._guard("create", lambda: self._repo.create(sale))
        self._sales[created.id] = created
        return created

    def update(self, sale_id: str, changes: dict[str, Any]) -> Sale:
        """Edit items or metadata.  Stock is not adjusted."""

        def action() -> Sale:
            if "items" in changes and not changes["items"]:
                raise ValidationError("Sale must have at least one item")
            return self._repo.update(sale_id, changes)

        updated = self._guard("update", action)
        self._sales[sale_id] = updated
        return updated

    def delete(self, sale_id: str) -> None:
        """Remove the sale record.  Stock is not restored."""
        self._guard("delete", lambda: self._repo.delete(sale_id))
        self._sales.pop(sale_id, None)

    def reverse(self, sale_id: str) -> CascadeOutcome:
        """Give the sold stock back, then remove the sale."""

        def action() -> CascadeOutcome:
            sale = self._require(sale_id)
            history: list[InventoryLogEntry] = []
            steps, outcome = self._restore_stock(
                sale,
                f"Reversal of sale ({sale.sale_type.value}) for {sale.customer_name}",
                InventoryChangeType.SALE_REVERSAL,
                history,
            )
            try:
                self._repo.delete(sale_id)
            except DomainException:
                if self._cascade.policy is CascadePolicy.COMPENSATE:
                    self._cascade.rollback(steps, outcome)
                write_history(self._journal, history, InventoryReferenceType.SALE, sale_id)
                raise
            write_history(self._journal, history, InventoryReferenceType.SALE, sale_id)
            return outcome

        outcome = self._guard("reverse", action)
        self._sales.pop(sale_id, None)
        return outcome

    def return_sale(self, sale_id: str) -> ProductReturn:
        """Give the stock back, log a return linked to the sale, remove the sale."""

        def action() -> ProductReturn:
            sale = self._require(sale_id)
            history: list[InventoryLogEntry] = []
            steps, outcome = self._restore_stock(
                sale,
                f"Return of sale ({sale.sale_type.value}) for {sale.customer_name}",
                InventoryChangeType.RETURN,
                history,
            )
            try:
                created = self._returns.create(ProductReturn.from_sale(sale))
            except DomainException:
                if self._cascade.policy is CascadePolicy.COMPENSATE:
                    self._cascade.rollback(steps, outcome)
                write_history(self._journal, history, InventoryReferenceType.SALE, sale_id)
                raise
            write_history(self._journal, history, InventoryReferenceType.SALE, sale_id)
            self._repo.delete(sale_id)
            return created

        created = self._guard("return", action)
        self._sales.pop(sale_id, None)
        return created

    # --- Internal helpers -----------------------------------------------------

    def _require(self, sale_id: str) -> Sale:
        sale = self._sales.get(sale_id) or self._repo.get_by_id(sale_id)
        if sale is None:
            raise EntityNotFoundError(f"Sale {sale_id} not found")
        return sale

    def _restore_stock(
        self,
        sale: Sale,
        reason: str,
        change_type: InventoryChangeType,
        history: list[InventoryLogEntry],
    ) -> tuple[list[CascadeStep], CascadeOutcome]:
        steps = self._allocation.restore_steps(sale.items, reason, change_type, history)
        outcome = self._cascade.run(steps)
        if not outcome.ok and self._cascade.policy is CascadePolicy.COMPENSATE:
            raise CascadeAbortedError(
                f"Stock for sale {sale.id} could not be restored", outcome
            )
        return steps, outcome
