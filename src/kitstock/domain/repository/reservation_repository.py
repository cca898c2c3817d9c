"""Abstract repository for the Reservation aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from kitstock.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def create(self, reservation: Reservation) -> Reservation:
        """Persist a new reservation and return it with its generated ``id``."""

    @abstractmethod
    def get_by_id(self, reservation_id: str) -> Reservation | None:
        """Return a reservation by its ID, or None if not found."""

    @abstractmethod
    def update(self, reservation_id: str, changes: dict[str, Any]) -> Reservation:
        """Apply a partial update and return the updated reservation."""

    @abstractmethod
    def delete(self, reservation_id: str) -> None:
        """Permanently remove a reservation."""

    @abstractmethod
    def list_all(self) -> list[Reservation]:
        """Return every reservation, newest first."""
