# workforce_api/services/time_entry_service.py
from __future__ import annotations

from workforce_api.common.dates import parse_date, parse_datetime
from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.extensions import db
from workforce_api.models.employee import Employee
from workforce_api.models.time_entry import TimeEntry


def _date(raw, field="date", required=False):
    try:
        d = parse_date(raw, field)
    except ValueError as ex:
        raise ValidationFailed(str(ex))
    if required and d is None:
        raise ValidationFailed(f"{field} is required")
    return d


def _instant(raw, field):
    try:
        return parse_datetime(raw, field)
    except ValueError as ex:
        raise ValidationFailed(str(ex))


def _check_pair(clock_in, clock_out):
    if clock_in and clock_out and clock_out < clock_in:
        raise ValidationFailed("clock_out must be after clock_in")


def _duplicate(employee_id: int, on, exclude_id: int | None = None):
    q = TimeEntry.query.filter(TimeEntry.employee_id == employee_id, TimeEntry.date == on)
    if exclude_id is not None:
        q = q.filter(TimeEntry.id != exclude_id)
    return q.first()


def get_time_entry(company_id: int, entry_id: int) -> TimeEntry:
    te = TimeEntry.query.filter_by(id=entry_id, company_id=company_id).first()
    if not te:
        raise NotFound("Time entry not found")
    return te


def create_time_entry(company_id: int, data: dict) -> TimeEntry:
    try:
        employee_id = int(data.get("employee_id"))
    except (TypeError, ValueError):
        raise ValidationFailed("employee_id is required")
    on = _date(data.get("date"), required=True)

    emp = Employee.query.filter_by(id=employee_id, company_id=company_id).first()
    if not emp:
        raise NotFound("Employee not found")
    if _duplicate(emp.id, on):
        raise Conflict("A time entry already exists for this date")

    clock_in = _instant(data.get("clock_in"), "clock_in")
    clock_out = _instant(data.get("clock_out"), "clock_out")
    _check_pair(clock_in, clock_out)

    te = TimeEntry(company_id=company_id, employee_id=emp.id, date=on, clock_in=clock_in, clock_out=clock_out)
    db.session.add(te)
    db.session.commit()
    return te


def list_time_entries(company_id: int, *, employee_id: int | None = None, start_date=None, end_date=None,
                      page: int = 1, limit: int = 10):
    q = TimeEntry.query.filter(TimeEntry.company_id == company_id)
    if employee_id:
        q = q.filter(TimeEntry.employee_id == employee_id)
    start_d = _date(start_date, "start_date")
    end_d = _date(end_date, "end_date")
    if start_d:
        q = q.filter(TimeEntry.date >= start_d)
    if end_d:
        q = q.filter(TimeEntry.date <= end_d)
    total = q.count()
    items = q.order_by(TimeEntry.date.desc(), TimeEntry.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return items, total


def update_time_entry(company_id: int, entry_id: int, data: dict) -> TimeEntry:
    te = get_time_entry(company_id, entry_id)

    on = _date(data.get("date"), required=True) if "date" in data else te.date
    if on != te.date and _duplicate(te.employee_id, on, exclude_id=te.id):
        raise Conflict("A time entry already exists for this date")
    clock_in = _instant(data.get("clock_in"), "clock_in") if "clock_in" in data else te.clock_in
    clock_out = _instant(data.get("clock_out"), "clock_out") if "clock_out" in data else te.clock_out
    _check_pair(clock_in, clock_out)

    te.date, te.clock_in, te.clock_out = on, clock_in, clock_out
    db.session.commit()
    return te


def delete_time_entry(company_id: int, entry_id: int) -> None:
    te = get_time_entry(company_id, entry_id)
    db.session.delete(te)
    db.session.commit()
