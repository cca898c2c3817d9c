"""Kit type catalog entry (1st kit, 2nd kit, ...)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from kitstock.domain.exceptions import ValidationError

# Seeded kit types every product and nameset can fall back to.
DEFAULT_KIT_TYPES = {
    "default-kit-type-1st": "1st Kit",
    "default-kit-type-2nd": "2nd Kit",
    "default-kit-type-3rd": "3rd Kit",
    "default-kit-type-none": "None",
}
DEFAULT_KIT_TYPE_IDS = tuple(DEFAULT_KIT_TYPES)


def is_default_kit_type(kit_type_id: str) -> bool:
    return kit_type_id in DEFAULT_KIT_TYPE_IDS


@dataclass
class KitType:
    id: str | None
    name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    archived_at: datetime | None = None

    @staticmethod
    def create(name: str) -> KitType:
        if not name or not name.strip():
            raise ValidationError("Kit type name is required", {"name": "Required"})
        return KitType(id=None, name=name.strip())

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @property
    def is_default(self) -> bool:
        return self.id is not None and is_default_kit_type(self.id)
