# workforce_api/services/schedule_service.py
from __future__ import annotations

from typing import List

from workforce_api.common.errors import NotFound, ValidationFailed
from workforce_api.common.paging import as_bool
from workforce_api.extensions import db
from workforce_api.models.attendance import Schedule, WorkShift
from workforce_api.models.employee import Employee


def _employee(company_id: int, employee_id: int) -> Employee:
    emp = Employee.query.filter_by(id=employee_id, company_id=company_id).first()
    if not emp:
        raise NotFound("Employee not found")
    return emp


def get_schedules(company_id: int, employee_id: int) -> List[Schedule]:
    _employee(company_id, employee_id)
    return (
        Schedule.query
        .filter(Schedule.employee_id == employee_id, Schedule.company_id == company_id)
        .order_by(Schedule.day_of_week.asc())
        .all()
    )


def upsert_schedule(company_id: int, employee_id: int, day_of_week, is_work_day, work_shift_id=None) -> Schedule:
    """
    Create or replace the schedule row for one weekday (0=Sunday .. 6=Saturday).
    A work day must reference a shift of the same company; a day off never keeps one.
    """
    _employee(company_id, employee_id)

    try:
        dow = int(day_of_week)
    except (TypeError, ValueError):
        raise ValidationFailed("day_of_week must be an integer 0..6")
    if not 0 <= dow <= 6:
        raise ValidationFailed("day_of_week must be an integer 0..6")

    try:
        is_work_day = as_bool(is_work_day, "is_work_day", False)
    except ValueError as ex:
        raise ValidationFailed(str(ex))
    if is_work_day and not work_shift_id:
        raise ValidationFailed("A work day must have a work shift assigned")

    shift_id = None
    if is_work_day:
        try:
            wsid = int(work_shift_id)
        except (TypeError, ValueError):
            raise ValidationFailed("work_shift_id must be integer")
        ws = WorkShift.query.filter_by(id=wsid, company_id=company_id).first()
        if not ws:
            raise NotFound("Work shift not found")
        shift_id = ws.id

    row = Schedule.query.filter_by(employee_id=employee_id, day_of_week=dow).first()
    if row is None:
        row = Schedule(company_id=company_id, employee_id=employee_id, day_of_week=dow)
        db.session.add(row)
    row.is_work_day = is_work_day
    row.work_shift_id = shift_id

    db.session.commit()
    return row
