"""Team catalog entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from kitstock.domain.exceptions import ValidationError


@dataclass
class Team:
    id: str | None
    name: str
    leagues: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    archived_at: datetime | None = None

    @staticmethod
    def create(name: str, leagues: list[str] | None = None) -> Team:
        if not name or not name.strip():
            raise ValidationError("Team name is required", {"name": "Required"})
        return Team(id=None, name=name.strip(), leagues=list(leagues or []))

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None
