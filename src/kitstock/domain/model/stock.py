"""Quantity ledger primitives.

Every stock counter in the system (per-size product quantity, nameset
quantity, badge quantity) is moved through ``decrement`` and ``increment``
so no counter can ever become negative.  Callers that need a hard
rejection must validate availability before calling ``decrement``; the
primitive itself only clamps.
"""

from __future__ import annotations

from dataclasses import dataclass

from kitstock.domain.exceptions import ValidationError


def decrement(current: int, by: int) -> int:
    """Return ``current - by`` clamped at zero."""
    if by < 0:
        raise ValidationError("Decrement amount cannot be negative")
    return max(0, current - by)


def increment(current: int, by: int) -> int:
    """Return ``current + by``."""
    if by < 0:
        raise ValidationError("Increment amount cannot be negative")
    return current + by


@dataclass(frozen=True)
class SizeStock:
    """Quantity on hand for one size of a product."""

    size: str
    quantity: int

    def __post_init__(self) -> None:
        if not self.size or not self.size.strip():
            raise ValidationError("Size label is required")
        if not isinstance(self.quantity, int):
            raise ValidationError(
                f"Size quantity must be an integer, got {type(self.quantity).__name__}"
            )
        if self.quantity < 0:
            raise ValidationError(
                f"Quantity for size {self.size} cannot be negative"
            )


def total_quantity(sizes: list[SizeStock]) -> int:
    return sum(s.quantity for s in sizes)


def ensure_unique_sizes(sizes: list[SizeStock]) -> None:
    seen: set[str] = set()
    for entry in sizes:
        if entry.size in seen:
            raise ValidationError(f"Size {entry.size} is listed more than once")
        seen.add(entry.size)


def consume_sizes(sizes: list[SizeStock], demand: dict[str, int]) -> list[SizeStock]:
    """Subtract ``demand`` (size -> quantity) from ``sizes``.

    Sizes the product does not carry are ignored.
    """
    return [
        SizeStock(s.size, decrement(s.quantity, demand[s.size])) if s.size in demand else s
        for s in sizes
    ]


def restore_sizes(sizes: list[SizeStock], supply: dict[str, int]) -> list[SizeStock]:
    """Add ``supply`` (size -> quantity) back onto ``sizes``."""
    return [
        SizeStock(s.size, increment(s.quantity, supply[s.size])) if s.size in supply else s
        for s in sizes
    ]


def size_deltas(before: list[SizeStock], after: list[SizeStock]) -> dict[str, int]:
    """Return how many units each size lost between ``before`` and ``after``."""
    after_by_size = {s.size: s.quantity for s in after}
    return {
        s.size: s.quantity - after_by_size[s.size]
        for s in before
        if s.size in after_by_size and s.quantity != after_by_size[s.size]
    }
