"""Period and channel filters for sales and returns listings."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timezone

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.sale import SaleType


@dataclass(frozen=True)
class PeriodFilters:
    """Inclusive date range plus an optional sale channel.

    A missing bound leaves that side of the range open.
    """

    start_date: date | None = None
    end_date: date | None = None
    sale_type: SaleType | None = None

    def __post_init__(self) -> None:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError(
                f"Start date {self.start_date} is after end date {self.end_date}"
            )

    @staticmethod
    def current_month(today: date | None = None) -> PeriodFilters:
        today = today or datetime.now(timezone.utc).date()
        last_day = calendar.monthrange(today.year, today.month)[1]
        return PeriodFilters(
            start_date=today.replace(day=1),
            end_date=today.replace(day=last_day),
        )

    def matches(self, moment: datetime, sale_type: SaleType) -> bool:
        day = moment.date()
        if self.start_date and day < self.start_date:
            return False
        if self.end_date and day > self.end_date:
            return False
        if self.sale_type and sale_type != self.sale_type:
            return False
        return True
