# workforce_api/services/attendance_engine.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, Sequence
import logging

from workforce_api.common.dates import parse_date, to_utc_naive, utc_today
from workforce_api.common.errors import CompanyNotFound, InvalidDate
from workforce_api.models.time_entry import TimeEntry
from workforce_api.services.schedule_resolver import (
    EmployeeRoster,
    RosterEmployee,
    ScheduledEmployee,
    SqlEmployeeRoster,
    scheduled_from_roster,
)
from workforce_api.services.work_day import (
    HolidayLookup,
    SqlHolidayLookup,
    WorkDayInfo,
    classify_work_day,
)

log = logging.getLogger(__name__)


class AttendanceStatus(str, Enum):
    WORKING = "working"
    LATE = "late"
    ABSENT = "absent"
    NOT_SCHEDULED = "not_scheduled"  # display only, never counted


@dataclass(frozen=True)
class EmployeeAttendanceStatus:
    employee_id: int
    first_name: str
    last_name: str
    status: AttendanceStatus
    is_late: bool = False
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    scheduled_start: Optional[str] = None
    scheduled_end: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "status": self.status.value,
            "is_late": self.is_late,
            "clock_in": self.clock_in.isoformat() if self.clock_in else None,
            "clock_out": self.clock_out.isoformat() if self.clock_out else None,
            "scheduled_start": self.scheduled_start,
            "scheduled_end": self.scheduled_end,
        }


@dataclass(frozen=True)
class DailyAttendanceStats:
    date: date
    employees_working: int
    employees_absent: int
    employees_late: int
    employees_scheduled: int
    is_work_day: bool
    work_day_reason: Optional[str] = None
    special_day_type: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "date": self.date.isoformat(),
            "employees_working": self.employees_working,
            "employees_absent": self.employees_absent,
            "employees_late": self.employees_late,
            "employees_scheduled": self.employees_scheduled,
            "is_work_day": self.is_work_day,
        }
        if self.work_day_reason:
            out["work_day_reason"] = self.work_day_reason
        if self.special_day_type:
            out["special_day_type"] = self.special_day_type
        return out


class TimeEntryStore(Protocol):
    def find_for_date(self, company_id: int, employee_ids: Sequence[int], on_date: date) -> Sequence[TimeEntry]:
        ...


class SqlTimeEntryStore:
    def find_for_date(self, company_id: int, employee_ids: Sequence[int], on_date: date) -> List[TimeEntry]:
        if not employee_ids:
            return []
        return (
            TimeEntry.query
            .filter(
                TimeEntry.company_id == company_id,
                TimeEntry.date == on_date,
                TimeEntry.employee_id.in_(list(employee_ids)),
            )
            .order_by(TimeEntry.id.asc())
            .all()
        )


# ---------- pure classification ----------

def pick_entries(entries: Iterable) -> Dict[int, object]:
    """
    One entry per employee. Duplicates are not prevented at the DB level, so prefer
    a row with a clock-in (earliest wins), else the first row seen.
    """
    picked: Dict[int, object] = {}
    for te in entries:
        cur = picked.get(te.employee_id)
        if cur is None:
            picked[te.employee_id] = te
            continue
        if te.clock_in is None:
            continue
        if cur.clock_in is None or to_utc_naive(te.clock_in) < to_utc_naive(cur.clock_in):
            picked[te.employee_id] = te
    return picked


def classify_employee(emp: ScheduledEmployee, entry, on_date: date) -> EmployeeAttendanceStatus:
    shift = emp.schedule
    scheduled_start = shift.start_time.strftime("%H:%M") if shift else None
    scheduled_end = shift.end_time.strftime("%H:%M") if shift else None

    clock_in = to_utc_naive(entry.clock_in) if entry is not None and entry.clock_in else None
    if clock_in is None:
        # no row, or a row without clock-in: both are absent
        return EmployeeAttendanceStatus(
            employee_id=emp.id,
            first_name=emp.first_name,
            last_name=emp.last_name,
            status=AttendanceStatus.ABSENT,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
        )

    clock_out = to_utc_naive(entry.clock_out) if entry.clock_out else None

    # same-day start instant, for night shifts too
    is_late = bool(shift) and clock_in > shift.late_after(on_date)
    return EmployeeAttendanceStatus(
        employee_id=emp.id,
        first_name=emp.first_name,
        last_name=emp.last_name,
        status=AttendanceStatus.LATE if is_late else AttendanceStatus.WORKING,
        is_late=is_late,
        clock_in=clock_in,
        clock_out=clock_out,
        scheduled_start=scheduled_start,
        scheduled_end=scheduled_end,
    )


def fold_stats(on_date: date, work_day: WorkDayInfo, statuses: Sequence[EmployeeAttendanceStatus]) -> DailyAttendanceStats:
    counted = [s for s in statuses if s.status != AttendanceStatus.NOT_SCHEDULED]
    late = sum(1 for s in counted if s.status == AttendanceStatus.LATE)
    working = sum(1 for s in counted if s.status in (AttendanceStatus.WORKING, AttendanceStatus.LATE))
    absent = sum(1 for s in counted if s.status == AttendanceStatus.ABSENT)
    return DailyAttendanceStats(
        date=on_date,
        employees_working=working,
        employees_absent=absent,
        employees_late=late,
        employees_scheduled=len(counted),
        is_work_day=work_day.is_work_day,
        work_day_reason=work_day.reason,
        special_day_type=work_day.special_day_type,
    )


# ---------- engine ----------

class AttendanceEngine:
    """
    Daily attendance for one company and one calendar day.

    Read-only; every store call is scoped by company_id. A failing store call
    propagates and no partial result is returned.
    """

    def __init__(
        self,
        holidays: HolidayLookup | None = None,
        roster: EmployeeRoster | None = None,
        entries: TimeEntryStore | None = None,
    ):
        self._holidays = holidays or SqlHolidayLookup()
        self._roster = roster or SqlEmployeeRoster()
        self._entries = entries or SqlTimeEntryStore()

    def _require_company(self, company_id: int) -> None:
        if not self._roster.company_exists(company_id):
            raise CompanyNotFound(company_id)

    def is_work_day(self, company_id: int, on_date: date | None = None) -> WorkDayInfo:
        self._require_company(company_id)
        return classify_work_day(self._holidays, company_id, on_date or utc_today())

    def scheduled_employees(self, company_id: int, on_date: date | None = None) -> List[ScheduledEmployee]:
        self._require_company(company_id)
        return scheduled_from_roster(self._roster.list_active(company_id), on_date or utc_today())

    def _classify(self, company_id: int, on_date: date, roster: Sequence[RosterEmployee], include_unscheduled: bool):
        scheduled = scheduled_from_roster(roster, on_date)
        ids = [e.id for e in scheduled]
        by_emp = pick_entries(self._entries.find_for_date(company_id, ids, on_date))

        out = [classify_employee(emp, by_emp.get(emp.id), on_date) for emp in scheduled]

        if include_unscheduled:
            seen = set(ids)
            out.extend(
                EmployeeAttendanceStatus(
                    employee_id=e.id,
                    first_name=e.first_name,
                    last_name=e.last_name,
                    status=AttendanceStatus.NOT_SCHEDULED,
                )
                for e in roster
                if e.id not in seen
            )
        return out

    def classify(self, company_id: int, on_date: date | None = None, *, include_unscheduled: bool = False) -> List[EmployeeAttendanceStatus]:
        self._require_company(company_id)
        on_date = on_date or utc_today()
        return self._classify(company_id, on_date, self._roster.list_active(company_id), include_unscheduled)

    def daily_stats(self, company_id: int, on_date: date | None = None) -> DailyAttendanceStats:
        self._require_company(company_id)
        on_date = on_date or utc_today()
        work_day = classify_work_day(self._holidays, company_id, on_date)
        statuses = self._classify(company_id, on_date, self._roster.list_active(company_id), False)
        stats = fold_stats(on_date, work_day, statuses)
        log.debug(
            "[attendance] company=%s date=%s scheduled=%s working=%s late=%s absent=%s",
            company_id, on_date, stats.employees_scheduled, stats.employees_working,
            stats.employees_late, stats.employees_absent,
        )
        return stats

    def today_scheduled_stats(self, company_id: int, today: date | None = None) -> dict:
        self._require_company(company_id)
        today = today or utc_today()
        work_day = classify_work_day(self._holidays, company_id, today)
        roster = self._roster.list_active(company_id)
        out = {
            "total_scheduled": len(scheduled_from_roster(roster, today)),
            "total_active": len(roster),
            "is_work_day": work_day.is_work_day,
        }
        if work_day.reason:
            out["work_day_reason"] = work_day.reason
        if work_day.special_day_type:
            out["special_day_type"] = work_day.special_day_type
        return out


# ---------- public API ----------

def resolve_target_date(raw=None, *, today: date | None = None, max_year_offset: int | None = None) -> date:
    """
    Request date -> calendar day. Empty means today (UTC).
    With `max_year_offset`, years outside today.year ± offset are rejected.
    """
    today = today or utc_today()
    try:
        d = parse_date(raw)
    except ValueError:
        raise InvalidDate()
    if d is None:
        return today
    if max_year_offset is not None and abs(d.year - today.year) > max_year_offset:
        raise InvalidDate(
            "Date must be within a reasonable range",
            {"min_year": today.year - max_year_offset, "max_year": today.year + max_year_offset},
        )
    return d


def classify_employees(company_id: int, on_date: date | None = None, *, include_unscheduled: bool = False) -> List[EmployeeAttendanceStatus]:
    return AttendanceEngine().classify(company_id, on_date, include_unscheduled=include_unscheduled)


def compute_daily_stats(company_id: int, on_date: date | None = None) -> DailyAttendanceStats:
    return AttendanceEngine().daily_stats(company_id, on_date)


def get_today_scheduled_stats(company_id: int, today: date | None = None) -> dict:
    return AttendanceEngine().today_scheduled_stats(company_id, today)
