"""Badge: a league or competition patch consumed by products."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.value_objects import Money


@dataclass
class Badge:
    id: str | None
    name: str
    season: str
    quantity: int
    price: Money
    location: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    archived_at: datetime | None = None

    @staticmethod
    def create(
        name: str,
        season: str,
        quantity: int,
        price: Money,
        location: str | None = None,
    ) -> Badge:
        if not name or not name.strip():
            raise ValidationError("Badge name is required", {"name": "Required"})
        if quantity < 0:
            raise ValidationError("Badge quantity cannot be negative", {"quantity": "Must be >= 0"})
        return Badge(
            id=None,
            name=name.strip(),
            season=season.strip(),
            quantity=quantity,
            price=price,
            location=location or None,
        )

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None
