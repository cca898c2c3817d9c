"""Unit tests for the Reservation aggregate and its state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.line_item import LineItem
from kitstock.domain.model.reservation import Reservation, ReservationStatus
from kitstock.domain.model.sale import SaleType
from kitstock.domain.model.value_objects import Money

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


def _items() -> list[LineItem]:
    return [LineItem("1", "M", 2, Money.of("100"))]


def _create(**overrides) -> Reservation:
    fields = dict(
        items=_items(),
        customer_name="Kasia",
        expiring_date=NOW + timedelta(days=3),
        now=NOW,
    )
    fields.update(overrides)
    return Reservation.create(**fields)


class TestReservationCreate:

    def test_starts_pending(self):
        reservation = _create()
        assert reservation.status == ReservationStatus.PENDING
        assert reservation.total == Money.of("200")

    def test_items_required(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _create(items=[])

    def test_customer_required(self):
        with pytest.raises(ValidationError, match="Customer name is required"):
            _create(customer_name=" ")

    def test_expiry_must_be_in_future(self):
        with pytest.raises(ValidationError, match="must be in the future"):
            _create(expiring_date=NOW - timedelta(minutes=1))

    def test_naive_expiry_read_as_utc(self):
        reservation = _create(expiring_date=datetime(2024, 5, 13, 12, 0))
        assert reservation.expiring_date == NOW + timedelta(days=3)
        assert reservation.is_expired(datetime(2024, 5, 14))

    def test_naive_past_expiry_is_validation_error(self):
        with pytest.raises(ValidationError, match="must be in the future"):
            _create(expiring_date=datetime(2024, 5, 1), now=None)

    def test_missing_expiry_is_validation_error(self):
        with pytest.raises(ValidationError, match="Expiring date is required"):
            _create(expiring_date=None)


class TestReservationLifecycle:

    def test_complete(self):
        reservation = _create()
        reservation.complete(at=NOW)
        assert reservation.status == ReservationStatus.COMPLETED
        assert reservation.completed_at == NOW

    def test_complete_twice_rejected(self):
        reservation = _create()
        reservation.complete()
        with pytest.raises(ValidationError, match="already completed"):
            reservation.complete()

    def test_completed_not_editable(self):
        reservation = _create()
        reservation.complete()
        with pytest.raises(ValidationError, match="Cannot edit"):
            reservation.ensure_editable()

    def test_expiry_is_advisory(self):
        reservation = _create()
        later = NOW + timedelta(days=4)
        assert reservation.is_expired(later)
        assert reservation.is_pending

    def test_completed_never_expired(self):
        reservation = _create()
        reservation.complete()
        assert not reservation.is_expired(NOW + timedelta(days=30))


class TestReservationToSale:

    def test_defaults_from_reservation(self):
        reservation = _create(sale_type=SaleType.OLX)
        sale = reservation.to_sale()
        assert sale.customer_name == "Kasia"
        assert sale.sale_type == SaleType.OLX
        assert sale.items == reservation.items

    def test_overrides(self):
        sale = _create().to_sale(customer_name="Tomek", sale_type=SaleType.VINTED, date=NOW)
        assert sale.customer_name == "Tomek"
        assert sale.sale_type == SaleType.VINTED
        assert sale.date == NOW
