"""Nameset: a player name-and-number print consumed by products."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.value_objects import Money


@dataclass
class Nameset:
    id: str | None
    player_name: str
    number: int
    season: str
    quantity: int
    kit_type_id: str
    price: Money | None = None
    location: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    archived_at: datetime | None = None

    @staticmethod
    def create(
        player_name: str,
        number: int,
        season: str,
        quantity: int,
        kit_type_id: str,
        price: Money | None = None,
        location: str | None = None,
    ) -> Nameset:
        if not player_name or not player_name.strip():
            raise ValidationError("Player name is required", {"player_name": "Required"})
        if number < 0:
            raise ValidationError("Shirt number cannot be negative", {"number": "Must be >= 0"})
        if quantity < 0:
            raise ValidationError("Nameset quantity cannot be negative", {"quantity": "Must be >= 0"})
        if not kit_type_id:
            raise ValidationError("Kit type is required", {"kit_type_id": "Required"})
        return Nameset(
            id=None,
            player_name=player_name.strip(),
            number=number,
            season=season.strip(),
            quantity=quantity,
            kit_type_id=kit_type_id,
            price=price,
            location=location or None,
        )

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @property
    def label(self) -> str:
        return f"{self.player_name} #{self.number} ({self.season})"
