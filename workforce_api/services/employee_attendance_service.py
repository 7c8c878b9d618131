# workforce_api/services/employee_attendance_service.py
"""
Month view of one employee's attendance.

Every calendar day of the month goes through the same rules as the daily
engine: `classify_work_day` for the calendar, the weekly schedule for whether
the employee was expected, and `classify_employee` for working / late / absent.
Holidays, time entries and special assignments are fetched once per month.
"""
from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import selectinload

from workforce_api.common.dates import day_of_week, to_utc_naive, utc_today
from workforce_api.common.errors import InvalidDate, NotFound
from workforce_api.models.attendance import Holiday, SpecialDayAssignment
from workforce_api.models.employee import Employee
from workforce_api.models.time_entry import TimeEntry
from workforce_api.services.attendance_engine import (
    AttendanceStatus,
    EmployeeAttendanceStatus,
    classify_employee,
    pick_entries,
)
from workforce_api.services.schedule_resolver import roster_record, scheduled_from_roster
from workforce_api.services.work_day import classify_work_day

DAY_NAMES = ("Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado")

_MONTH_RE = re.compile(r"(\d{4})-(\d{2})")


class _MonthHolidays:
    """HolidayLookup over rows already loaded for the month."""

    def __init__(self, rows):
        self._by_date: Dict[date, Holiday] = {}
        for h in rows:
            self._by_date.setdefault(h.date, h)

    def find_for_date(self, company_id: int, on_date: date):
        return self._by_date.get(on_date)


def parse_month(raw, today: date) -> Tuple[int, int]:
    """`YYYY-MM` -> (year, month). Empty means the month of `today`."""
    if raw in (None, ""):
        return today.year, today.month
    m = _MONTH_RE.fullmatch(str(raw).strip())
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise InvalidDate("Invalid month, expected YYYY-MM")
    return int(m.group(1)), int(m.group(2))


def worked_minutes(clock_in, clock_out) -> Optional[int]:
    if clock_in is None or clock_out is None:
        return None
    delta = to_utc_naive(clock_out) - to_utc_naive(clock_in)
    if delta.total_seconds() < 0:
        return None
    return int(delta.total_seconds() // 60)


def _unscheduled(emp, entry) -> EmployeeAttendanceStatus:
    return EmployeeAttendanceStatus(
        employee_id=emp.id,
        first_name=emp.first_name,
        last_name=emp.last_name,
        status=AttendanceStatus.NOT_SCHEDULED,
        clock_in=to_utc_naive(entry.clock_in) if entry is not None and entry.clock_in else None,
        clock_out=to_utc_naive(entry.clock_out) if entry is not None and entry.clock_out else None,
    )


def _day_row(d: date, work_day, scheduled: bool, status: EmployeeAttendanceStatus, upcoming: bool, special) -> dict:
    row = status.to_dict()
    for k in ("employee_id", "first_name", "last_name"):
        row.pop(k)
    if upcoming:
        row["status"] = None
    row.update({
        "date": d.isoformat(),
        "day_of_week": day_of_week(d),
        "day_name": DAY_NAMES[day_of_week(d)],
        "is_work_day": work_day.is_work_day,
        "work_day_reason": work_day.reason,
        "special_day_type": work_day.special_day_type,
        "scheduled": scheduled,
        "worked_minutes": worked_minutes(status.clock_in, status.clock_out),
        "special_assignment": {
            "id": special.id,
            "type": special.type,
            "is_mandatory": bool(special.is_mandatory),
            "notes": special.notes,
        } if special is not None else None,
    })
    return row


def _kpis(days: List[dict]) -> dict:
    minutes = sum(d["worked_minutes"] or 0 for d in days)
    return {
        "total_days": len(days),
        "work_days": sum(1 for d in days if d["is_work_day"]),
        "scheduled_days": sum(1 for d in days if d["scheduled"]),
        "present_days": sum(1 for d in days if d["status"] in (AttendanceStatus.WORKING.value, AttendanceStatus.LATE.value)),
        "late_days": sum(1 for d in days if d["status"] == AttendanceStatus.LATE.value),
        # an expected day that falls on a holiday or weekend is not held against the employee
        "absent_days": sum(1 for d in days if d["status"] == AttendanceStatus.ABSENT.value and d["is_work_day"]),
        "special_days": sum(1 for d in days if d["special_assignment"]),
        "worked_minutes": minutes,
        "total_hours": round(minutes / 60.0, 2),
    }


def monthly_attendance(company_id: int, employee_id: int, month=None, *, today: date | None = None) -> dict:
    """
    Day-by-day attendance for `month` (YYYY-MM) plus month KPIs.
    Days after `today` keep their schedule but get no status.
    """
    today = today or utc_today()
    emp = (
        Employee.query
        .options(selectinload(Employee.schedules))
        .filter_by(id=employee_id, company_id=company_id)
        .first()
    )
    if not emp:
        raise NotFound("Employee not found")

    year, mon = parse_month(month, today)
    first = date(year, mon, 1)
    last = date(year, mon, calendar.monthrange(year, mon)[1])

    holidays = _MonthHolidays(
        Holiday.query
        .filter(Holiday.company_id == company_id, Holiday.date >= first, Holiday.date <= last)
        .order_by(Holiday.date.asc(), Holiday.id.asc())
        .all()
    )
    entries_by_day: Dict[date, list] = {}
    for te in (
        TimeEntry.query
        .filter(TimeEntry.company_id == company_id, TimeEntry.employee_id == emp.id,
                TimeEntry.date >= first, TimeEntry.date <= last)
        .order_by(TimeEntry.id.asc())
        .all()
    ):
        entries_by_day.setdefault(te.date, []).append(te)
    specials = {
        a.date: a
        for a in SpecialDayAssignment.query.filter(
            SpecialDayAssignment.company_id == company_id,
            SpecialDayAssignment.employee_id == emp.id,
            SpecialDayAssignment.date >= first,
            SpecialDayAssignment.date <= last,
        )
    }

    roster = [roster_record(emp)]
    days = []
    d = first
    while d <= last:
        work_day = classify_work_day(holidays, company_id, d)
        scheduled = scheduled_from_roster(roster, d)
        entry = pick_entries(entries_by_day.get(d, ())).get(emp.id)
        if scheduled:
            status = classify_employee(scheduled[0], entry, d)
        else:
            status = _unscheduled(emp, entry)
        days.append(_day_row(d, work_day, bool(scheduled), status, d > today, specials.get(d)))
        d += timedelta(days=1)

    return {
        "employee": emp.to_dict(),
        "month": f"{year:04d}-{mon:02d}",
        "days": days,
        "kpis": _kpis(days),
    }
