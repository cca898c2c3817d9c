"""Unit tests for period filters."""

from datetime import date, datetime, timezone

import pytest

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.filters import PeriodFilters
from kitstock.domain.model.sale import SaleType


class TestPeriodFilters:

    def test_current_month(self):
        filters = PeriodFilters.current_month(date(2024, 2, 14))
        assert filters.start_date == date(2024, 2, 1)
        assert filters.end_date == date(2024, 2, 29)

    def test_bounds_are_inclusive(self):
        filters = PeriodFilters(date(2024, 5, 1), date(2024, 5, 31))
        assert filters.matches(datetime(2024, 5, 31, 23, 59, tzinfo=timezone.utc), SaleType.OLX)
        assert not filters.matches(datetime(2024, 6, 1, tzinfo=timezone.utc), SaleType.OLX)

    def test_sale_type(self):
        filters = PeriodFilters(sale_type=SaleType.VINTED)
        moment = datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert filters.matches(moment, SaleType.VINTED)
        assert not filters.matches(moment, SaleType.OLX)

    def test_open_range_matches_everything(self):
        assert PeriodFilters().matches(datetime(1999, 1, 1, tzinfo=timezone.utc), SaleType.OLX)

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError, match="after end date"):
            PeriodFilters(date(2024, 5, 2), date(2024, 5, 1))
