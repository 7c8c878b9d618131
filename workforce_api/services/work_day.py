# workforce_api/services/work_day.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol

from workforce_api.common.dates import day_of_week
from workforce_api.models.attendance import Holiday

HOLIDAY = "HOLIDAY"
WEEKEND = "WEEKEND"

_WEEKEND_NAMES = {0: "Domingo", 6: "Sábado"}


@dataclass(frozen=True)
class WorkDayInfo:
    is_work_day: bool
    reason: Optional[str] = None
    special_day_type: Optional[str] = None
    holiday_name: Optional[str] = None
    holiday_description: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"is_work_day": self.is_work_day}
        if self.reason:
            out["reason"] = self.reason
        if self.special_day_type:
            out["special_day_type"] = self.special_day_type
        if self.holiday_name:
            out["holiday"] = {"name": self.holiday_name}
            if self.holiday_description:
                out["holiday"]["description"] = self.holiday_description
        return out


class HolidayLookup(Protocol):
    def find_for_date(self, company_id: int, on_date: date) -> Optional[Holiday]:
        ...


class SqlHolidayLookup:
    def find_for_date(self, company_id: int, on_date: date) -> Optional[Holiday]:
        # exact calendar-day match; recurring holidays only count once materialized for that year
        return (
            Holiday.query
            .filter(Holiday.company_id == company_id, Holiday.date == on_date)
            .order_by(Holiday.id.asc())
            .first()
        )


def classify_work_day(holidays: HolidayLookup, company_id: int, on_date: date) -> WorkDayInfo:
    """
    Is `on_date` a working day for the company?

    Strict priority, first match wins:
      1) a company holiday on that day  -> HOLIDAY ("Feriado: <name>")
      2) Saturday / Sunday              -> WEEKEND ("Sábado" / "Domingo")
      3) anything else                  -> work day
    """
    hol = holidays.find_for_date(company_id, on_date)
    if hol:
        return WorkDayInfo(
            is_work_day=False,
            reason=f"Feriado: {hol.name}",
            special_day_type=HOLIDAY,
            holiday_name=hol.name,
            holiday_description=getattr(hol, "description", None) or None,
        )

    dow = day_of_week(on_date)
    if dow in _WEEKEND_NAMES:
        return WorkDayInfo(is_work_day=False, reason=_WEEKEND_NAMES[dow], special_day_type=WEEKEND)

    return WorkDayInfo(is_work_day=True)


def is_work_day(company_id: int, on_date: date) -> WorkDayInfo:
    return classify_work_day(SqlHolidayLookup(), company_id, on_date)
