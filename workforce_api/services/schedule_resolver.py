# workforce_api/services/schedule_resolver.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Protocol, Sequence, Tuple

from sqlalchemy.orm import selectinload

from workforce_api.common.dates import day_of_week, minutes_of
from workforce_api.extensions import db
from workforce_api.models.employee import Employee
from workforce_api.models.master import Company


@dataclass(frozen=True)
class ShiftWindow:
    """
    `[start_time, end_time)` of a work shift. A night shift whose end is not after
    its start wraps past midnight (22:00-06:00 ends the next day).
    """
    start_time: time
    end_time: time
    is_night_shift: bool = False
    grace_minutes: int = 0

    @property
    def wraps_midnight(self) -> bool:
        return self.is_night_shift and self.end_time <= self.start_time

    def start_at(self, on_date: date) -> datetime:
        return datetime.combine(on_date, self.start_time)

    def end_at(self, on_date: date) -> datetime:
        end_day = on_date + timedelta(days=1) if self.wraps_midnight else on_date
        return datetime.combine(end_day, self.end_time)

    def late_after(self, on_date: date) -> datetime:
        return self.start_at(on_date) + timedelta(minutes=int(self.grace_minutes or 0))

    @property
    def duration_minutes(self) -> int:
        start, end = minutes_of(self.start_time), minutes_of(self.end_time)
        if self.wraps_midnight:
            return (24 * 60 - start) + end
        return end - start

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "is_night_shift": self.is_night_shift,
        }


@dataclass(frozen=True)
class WeeklyScheduleRow:
    day_of_week: int
    is_work_day: bool
    shift: Optional[ShiftWindow] = None


@dataclass(frozen=True)
class RosterEmployee:
    id: int
    first_name: str
    last_name: str
    schedules: Tuple[WeeklyScheduleRow, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScheduledEmployee:
    id: int
    first_name: str
    last_name: str
    schedule: Optional[ShiftWindow] = None


class EmployeeRoster(Protocol):
    def company_exists(self, company_id: int) -> bool:
        ...

    def list_active(self, company_id: int) -> Sequence[RosterEmployee]:
        """ACTIVE employees of the company with their full weekly schedule."""
        ...


def _window(ws) -> Optional[ShiftWindow]:
    if ws is None or ws.start_time is None or ws.end_time is None:
        return None
    return ShiftWindow(
        start_time=ws.start_time,
        end_time=ws.end_time,
        is_night_shift=bool(ws.is_night_shift),
        grace_minutes=int(ws.grace_minutes or 0),
    )


def roster_record(e: Employee) -> RosterEmployee:
    return RosterEmployee(
        id=e.id,
        first_name=e.first_name,
        last_name=e.last_name,
        schedules=tuple(
            WeeklyScheduleRow(
                day_of_week=int(s.day_of_week),
                is_work_day=bool(s.is_work_day),
                shift=_window(s.work_shift),
            )
            for s in e.schedules
        ),
    )


class SqlEmployeeRoster:
    def company_exists(self, company_id: int) -> bool:
        return db.session.query(Company.id).filter(Company.id == company_id).first() is not None

    def list_active(self, company_id: int) -> List[RosterEmployee]:
        # one round-trip for employees, one for schedules (+ joined shifts)
        rows = (
            Employee.query
            .options(selectinload(Employee.schedules))
            .filter(Employee.company_id == company_id, Employee.status == "ACTIVE")
            .order_by(Employee.last_name.asc(), Employee.first_name.asc(), Employee.id.asc())
            .all()
        )
        return [roster_record(e) for e in rows]


def scheduled_from_roster(roster: Sequence[RosterEmployee], on_date: date) -> List[ScheduledEmployee]:
    """Keep employees whose schedule marks the weekday of `on_date` as a work day."""
    dow = day_of_week(on_date)
    out: List[ScheduledEmployee] = []
    for emp in roster:
        match = next((s for s in emp.schedules if s.day_of_week == dow and s.is_work_day), None)
        if match is None:
            continue
        out.append(ScheduledEmployee(
            id=emp.id,
            first_name=emp.first_name,
            last_name=emp.last_name,
            schedule=match.shift,
        ))
    return out


def get_scheduled_employees(company_id: int, on_date: date, roster: EmployeeRoster | None = None) -> List[ScheduledEmployee]:
    roster = roster or SqlEmployeeRoster()
    return scheduled_from_roster(roster.list_active(company_id), on_date)
