"""Reservation aggregate: a customer hold on product stock.

Lifecycle::

    pending --complete()--> completed
    pending --delete-->     (gone, stock restored by the store)
    completed --delete-->   (gone, stock untouched)

Stock is decremented for real when the reservation is created; there is
no separate held counter.  Expiry is advisory only: an expired pending
reservation can still be completed or deleted, nothing acts on it
automatically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.line_item import LineItem, items_total
from kitstock.domain.model.sale import Sale, SaleType
from kitstock.domain.model.value_objects import Money


def _utc(value: datetime) -> datetime:
    """Read a naive datetime as UTC so it compares with aware ones."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class ReservationStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass
class Reservation:

    id: str | None
    items: list[LineItem]
    customer_name: str
    expiring_date: datetime
    status: ReservationStatus = ReservationStatus.PENDING
    sale_type: SaleType = SaleType.IN_PERSON
    location: str | None = None
    date_time: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    # --- Factory (used for NEW reservations only) -----------------------------

    @staticmethod
    def create(
        items: list[LineItem],
        customer_name: str,
        expiring_date: datetime,
        sale_type: SaleType = SaleType.IN_PERSON,
        location: str | None = None,
        date_time: datetime | None = None,
        now: datetime | None = None,
    ) -> Reservation:
        now = _utc(now or datetime.now(timezone.utc))
        if not items:
            raise ValidationError("Reservation must have at least one item")
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required", {"customer_name": "Required"})
        if not isinstance(expiring_date, datetime):
            raise ValidationError("Expiring date is required", {"expiring_date": "Required"})
        expiring_date = _utc(expiring_date)
        if expiring_date <= now:
            raise ValidationError(
                "Expiring date must be in the future",
                {"expiring_date": "Must be in the future"},
            )
        return Reservation(
            id=None,
            items=list(items),
            customer_name=customer_name.strip(),
            expiring_date=expiring_date,
            sale_type=sale_type,
            location=location or None,
            date_time=_utc(date_time) if date_time is not None else None,
        )

    # --- State transitions ----------------------------------------------------

    def ensure_editable(self) -> None:
        if self.status != ReservationStatus.PENDING:
            raise ValidationError(
                f"Cannot edit reservation in {self.status.value} status"
            )

    def complete(self, at: datetime | None = None) -> None:
        """Transition pending -> completed."""
        if self.status == ReservationStatus.COMPLETED:
            raise ValidationError("Reservation is already completed")
        self.status = ReservationStatus.COMPLETED
        self.completed_at = at or datetime.now(timezone.utc)

    # --- Queries --------------------------------------------------------------

    @property
    def is_pending(self) -> bool:
        return self.status == ReservationStatus.PENDING

    @property
    def total(self) -> Money:
        return items_total(self.items)

    def is_expired(self, now: datetime | None = None) -> bool:
        now = _utc(now or datetime.now(timezone.utc))
        return self.is_pending and _utc(self.expiring_date) < now

    def to_sale(
        self,
        customer_name: str | None = None,
        date: datetime | None = None,
        sale_type: SaleType | None = None,
    ) -> Sale:
        """Build the sale that completing this reservation records.

        Missing sale metadata falls back to the reservation's own values.
        """
        return Sale.create(
            items=list(self.items),
            customer_name=customer_name or self.customer_name,
            sale_type=sale_type or self.sale_type,
            date=date,
        )
