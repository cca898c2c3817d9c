"""Reservation store: the reservation lifecycle.

    create            validate, persist as pending, consume stock
    edit              pending only; re-validate, persist, stock untouched
    delete (pending)  restore stock, delete the record, reload products
    delete (done)     delete the record only
    complete          record a sale, mark completed, reload sales

Completing never touches stock: it was consumed when the reservation was
created.  Validation on edit runs against current stock without first
giving the original hold back, so growing a reservation needs that much
extra stock on hand.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from kitstock.application.error_state import ErrorState
from kitstock.application.sale_store import SaleStore, failed_items
from kitstock.domain.exceptions import (
    CascadeAbortedError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from kitstock.domain.model.inventory_log import (
    InventoryChangeType,
    InventoryLogEntry,
    InventoryReferenceType,
)
from kitstock.domain.model.line_item import LineItem
from kitstock.domain.model.reservation import Reservation, ReservationStatus
from kitstock.domain.model.sale import Sale, SaleType
from kitstock.domain.repository.reservation_repository import ReservationRepository
from kitstock.domain.service.cascade import Cascade, CascadeOutcome, CascadePolicy
from kitstock.domain.service.stock_allocation_service import StockAllocationService, StockLedger
from kitstock.domain.service.stock_journal import StockJournal, write_history

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservationRecording:
    reservation: Reservation
    outcome: CascadeOutcome
    failed_items: list[LineItem] = field(default_factory=list)


class ReservationStore(ErrorState):

    entity_name = "reservation"

    def __init__(
        self,
        repo: ReservationRepository,
        stock: StockLedger,
        sales: SaleStore,
        cascade: Cascade | None = None,
        journal: StockJournal | None = None,
    ) -> None:
        super().__init__()
        self._repo = repo
        self._stock = stock
        self._journal = journal
        self._sales = sales
        self._cascade = cascade or Cascade()
        self._allocation = StockAllocationService(stock, self._cascade)
        self._reservations: dict[str, Reservation] = {}

    # --- Getters --------------------------------------------------------------

    def list_reservations(self) -> list[Reservation]:
        return sorted(self._reservations.values(), key=lambda r: r.created_at, reverse=True)

    def get(self, reservation_id: str) -> Reservation | None:
        return self._reservations.get(reservation_id)

    def pending(self) -> list[Reservation]:
        return [r for r in self.list_reservations() if r.is_pending]

    def completed(self) -> list[Reservation]:
        return [r for r in self.list_reservations() if r.status is ReservationStatus.COMPLETED]

    def expired(self, now: datetime | None = None) -> list[Reservation]:
        """Pending reservations past their expiring date.  Nothing acts on them."""
        now = now or datetime.now(timezone.utc)
        return [r for r in self.list_reservations() if r.is_expired(now)]

    # --- Actions --------------------------------------------------------------

    def load(self) -> None:
        found = self._guard("load", self._repo.list_all)
        self._reservations = {r.id: r for r in found}

    def create(
        self,
        items: list[LineItem],
        customer_name: str,
        expiring_date: datetime,
        sale_type: SaleType = SaleType.IN_PERSON,
        location: str | None = None,
        date_time: datetime | None = None,
    ) -> ReservationRecording:
        """Validate, persist as pending, then hold the stock."""

        def action() -> ReservationRecording:
            reservation = Reservation.create(
                items, customer_name, expiring_date, sale_type, location, date_time
            )
            self._allocation.validate(reservation.items)
            created = self._repo.create(reservation)

            history: list[InventoryLogEntry] = []
            outcome = self._allocation.consume(
                created.items,
                f"Reservation created for {created.customer_name}",
                InventoryChangeType.RESERVATION,
                history,
            )
            if not outcome.ok and self._cascade.policy is CascadePolicy.COMPENSATE:
                self._repo.delete(created.id)
                raise CascadeAbortedError(
                    "Reservation discarded, stock updates failed for "
                    + ", ".join(outcome.failed_steps()),
                    outcome,
                )
            write_history(self._journal, history, InventoryReferenceType.RESERVATION, created.id)
            return ReservationRecording(created, outcome, failed_items(created.items, outcome))

        recording = self._guard("create", action)
        self._reservations[recording.reservation.id] = recording.reservation
        if recording.failed_items:
            logger.warning(
                "Reservation %s created; stock not held for %d item(s)",
                recording.reservation.id, len(recording.failed_items),
            )
        return recording

    def edit(self, reservation_id: str, changes: dict[str, Any]) -> Reservation:
        """Change items or metadata of a pending reservation."""

        def action() -> Reservation:
            reservation = self._require(reservation_id)
            reservation.ensure_editable()
            if "items" in changes:
                if not changes["items"]:
                    raise ValidationError("Reservation must have at least one item")
                self._allocation.validate(changes["items"])
            if "customer_name" in changes and not (changes["customer_name"] or "").strip():
                raise ValidationError("Customer name is required", {"customer_name": "Required"})
            return self._repo.update(reservation_id, changes)

        updated = self._guard("update", action)
        self._reservations[reservation_id] = updated
        return updated

    def delete(self, reservation_id: str) -> CascadeOutcome:
        """Delete a reservation, giving the stock back if it was still pending."""

        def action() -> CascadeOutcome:
            reservation = self._require(reservation_id)
            if not reservation.is_pending:
                self._repo.delete(reservation_id)
                return CascadeOutcome()

            history: list[InventoryLogEntry] = []
            steps = self._allocation.restore_steps(
                reservation.items,
                f"Reservation for {reservation.customer_name} released",
                InventoryChangeType.RESERVATION_RELEASE,
                history,
            )
            outcome = self._cascade.run(steps)
            if not outcome.ok and self._cascade.policy is CascadePolicy.COMPENSATE:
                raise CascadeAbortedError(
                    f"Reservation {reservation_id} kept, stock could not be restored",
                    outcome,
                )
            try:
                self._repo.delete(reservation_id)
            except DomainException:
                if self._cascade.policy is CascadePolicy.COMPENSATE:
                    self._cascade.rollback(steps, outcome)
                write_history(
                    self._journal, history, InventoryReferenceType.RESERVATION, reservation_id
                )
                raise
            write_history(self._journal, history, InventoryReferenceType.RESERVATION, reservation_id)
            return outcome

        outcome = self._guard("delete", action)
        self._reservations.pop(reservation_id, None)
        self._refresh("products", self._stock.reload)
        return outcome

    def complete(
        self,
        reservation_id: str,
        customer_name: str | None = None,
        date: datetime | None = None,
        sale_type: SaleType | None = None,
    ) -> Sale:
        """Turn a pending reservation into a sale.  Stock is not touched again."""

        def action() -> tuple[Reservation, Sale]:
            reservation = self._require(reservation_id)
            draft = copy.deepcopy(reservation)
            draft.complete()

            sale = self._sales.add(reservation.to_sale(customer_name, date, sale_type))
            try:
                updated = self._repo.update(
                    reservation_id,
                    {"status": draft.status, "completed_at": draft.completed_at},
                )
            except DomainException:
                if self._cascade.policy is CascadePolicy.COMPENSATE:
                    self._sales.delete(sale.id)
                else:
                    logger.error(
                        "Sale %s recorded but reservation %s is still pending",
                        sale.id, reservation_id,
                    )
                raise
            return updated, sale

        updated, sale = self._guard("complete", action)
        self._reservations[reservation_id] = updated
        self._refresh("sales", self._sales.load)
        logger.info("Reservation %s completed as sale %s", reservation_id, sale.id)
        return sale

    # --- Internal helpers -----------------------------------------------------

    def _require(self, reservation_id: str) -> Reservation:
        reservation = self._reservations.get(reservation_id) or self._repo.get_by_id(reservation_id)
        if reservation is None:
            raise EntityNotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    @staticmethod
    def _refresh(what: str, reload) -> None:
        try:
            reload()
        except DomainException as exc:
            logger.warning("Could not reload %s: %s", what, exc)
