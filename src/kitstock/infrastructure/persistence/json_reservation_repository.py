"""JSON-file-backed implementation of ReservationRepository."""

from __future__ import annotations

from typing import Any

from kitstock.domain.model.reservation import Reservation, ReservationStatus
from kitstock.domain.model.sale import SaleType
from kitstock.domain.repository.reservation_repository import ReservationRepository
from kitstock.infrastructure.persistence.codec import (
    dump_datetime,
    dump_items,
    load_datetime,
    load_items,
)
from kitstock.infrastructure.persistence.json_table import JsonTable


class JsonReservationRepository(JsonTable, ReservationRepository):

    entity_name = "reservation"

    # --- ReservationRepository interface --------------------------------------

    def create(self, reservation: Reservation) -> Reservation:
        return self._insert(reservation)

    def get_by_id(self, reservation_id: str) -> Reservation | None:
        return self._get(reservation_id)

    def update(self, reservation_id: str, changes: dict[str, Any]) -> Reservation:
        return self._apply(reservation_id, changes)

    def delete(self, reservation_id: str) -> None:
        self._remove(reservation_id)

    def list_all(self) -> list[Reservation]:
        return sorted(self._all(), key=lambda r: r.created_at, reverse=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "items": dump_items(reservation.items),
            "customer_name": reservation.customer_name,
            "expiring_date": dump_datetime(reservation.expiring_date),
            "status": reservation.status.value,
            "sale_type": reservation.sale_type.value,
            "location": reservation.location,
            "date_time": dump_datetime(reservation.date_time),
            "created_at": dump_datetime(reservation.created_at),
            "completed_at": dump_datetime(reservation.completed_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        return Reservation(
            id=raw["id"],
            items=load_items(raw["items"]),
            customer_name=raw["customer_name"],
            expiring_date=load_datetime(raw["expiring_date"]),
            status=ReservationStatus(raw["status"]),
            sale_type=SaleType(raw.get("sale_type", SaleType.IN_PERSON.value)),
            location=raw.get("location"),
            date_time=load_datetime(raw.get("date_time")),
            created_at=load_datetime(raw["created_at"]),
            completed_at=load_datetime(raw.get("completed_at")),
        )
