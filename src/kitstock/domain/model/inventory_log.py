"""Inventory history: one entry per stock counter movement.

Every time a product size, a nameset or a badge changes quantity because
of a sale, a reversal, a return, a reservation, a product creation or a
manual adjustment, an entry records the counter before and after, why it
moved and which record caused it.  History is an audit trail; it never
drives stock itself.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.product import Product
from kitstock.domain.model.stock import SizeStock


class InventoryEntityType(Enum):
    PRODUCT = "product"
    NAMESET = "nameset"
    BADGE = "badge"


class InventoryChangeType(Enum):
    SALE = "sale"
    SALE_REVERSAL = "sale_reversal"
    RETURN = "return"
    RESERVATION = "reservation"
    RESERVATION_RELEASE = "reservation_release"
    PRODUCT_CREATION = "product_creation"
    INITIAL_STOCK = "initial_stock"
    MANUAL_ADJUSTMENT = "manual_adjustment"


class InventoryReferenceType(Enum):
    SALE = "sale"
    RESERVATION = "reservation"
    PRODUCT = "product"


@dataclass
class InventoryLogEntry:

    id: str | None
    entity_type: InventoryEntityType
    entity_id: str
    entity_name: str
    change_type: InventoryChangeType
    quantity_before: int
    quantity_change: int
    quantity_after: int
    size: str | None = None
    reason: str | None = None
    reference_id: str | None = None
    reference_type: InventoryReferenceType | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def movement(
        entity_type: InventoryEntityType,
        entity_id: str,
        entity_name: str,
        change_type: InventoryChangeType,
        before: int,
        after: int,
        size: str | None = None,
        reason: str | None = None,
    ) -> InventoryLogEntry:
        """Entry for a counter that went from ``before`` to ``after``.

        Manual adjustments without a reason are labelled as a restock or
        an adjustment depending on the direction.
        """
        if before < 0 or after < 0:
            raise ValidationError("Stock counters cannot be negative")
        if reason is None and change_type is InventoryChangeType.MANUAL_ADJUSTMENT:
            reason = "Manual restock" if after > before else "Manual adjustment"
        return InventoryLogEntry(
            id=None,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_name=entity_name,
            change_type=change_type,
            quantity_before=before,
            quantity_change=after - before,
            quantity_after=after,
            size=size,
            reason=reason,
        )

    def referencing(
        self, reference_type: InventoryReferenceType | None, reference_id: str | None
    ) -> InventoryLogEntry:
        return dataclasses.replace(self, reference_type=reference_type, reference_id=reference_id)


def size_movements(
    product: Product,
    after: list[SizeStock],
    change_type: InventoryChangeType,
    reason: str | None = None,
) -> list[InventoryLogEntry]:
    """One entry per size whose quantity differs between ``product.sizes`` and ``after``.

    A size present on only one side counts as 0 on the other.
    """
    before_by_size = {s.size: s.quantity for s in product.sizes}
    after_by_size = {s.size: s.quantity for s in after}
    sizes = list(before_by_size) + [s for s in after_by_size if s not in before_by_size]
    return [
        InventoryLogEntry.movement(
            InventoryEntityType.PRODUCT,
            product.id,
            product.name or f"Product {product.id}",
            change_type,
            before_by_size.get(size, 0),
            after_by_size.get(size, 0),
            size=size,
            reason=reason,
        )
        for size in sizes
        if before_by_size.get(size, 0) != after_by_size.get(size, 0)
    ]


@dataclass(frozen=True)
class InventoryLogFilters:
    """Narrow the history by entity, change type and an inclusive day range."""

    entity_type: InventoryEntityType | None = None
    entity_id: str | None = None
    change_type: InventoryChangeType | None = None
    start_date: date | None = None
    end_date: date | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError(
                f"Start date {self.start_date} is after end date {self.end_date}"
            )
        if self.limit is not None and self.limit <= 0:
            raise ValidationError("Limit must be > 0")

    def matches(self, entry: InventoryLogEntry) -> bool:
        if self.entity_type and entry.entity_type is not self.entity_type:
            return False
        if self.entity_id and entry.entity_id != self.entity_id:
            return False
        if self.change_type and entry.change_type is not self.change_type:
            return False
        day = entry.created_at.date()
        if self.start_date and day < self.start_date:
            return False
        if self.end_date and day > self.end_date:
            return False
        return True

    def apply(self, entries: list[InventoryLogEntry]) -> list[InventoryLogEntry]:
        """Matching entries, newest first, cut to ``limit``."""
        found = sorted(
            (e for e in entries if self.matches(e)), key=lambda e: e.created_at, reverse=True
        )
        return found[: self.limit] if self.limit is not None else found
