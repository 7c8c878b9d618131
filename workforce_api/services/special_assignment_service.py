# workforce_api/services/special_assignment_service.py
from __future__ import annotations

from datetime import date
from typing import List

from workforce_api.common.dates import parse_date
from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.common.paging import as_bool
from workforce_api.extensions import db
from workforce_api.models.attendance import SPECIAL_DAY_TYPES, SpecialDayAssignment
from workforce_api.models.employee import Employee


def _require_date(raw, field="date") -> date:
    try:
        d = parse_date(raw, field)
    except ValueError as ex:
        raise ValidationFailed(str(ex))
    if d is None:
        raise ValidationFailed(f"{field} is required")
    return d


def _type(raw) -> str:
    t = str(raw or "").strip().upper()
    if t not in SPECIAL_DAY_TYPES:
        raise ValidationFailed(f"type must be one of {', '.join(SPECIAL_DAY_TYPES)}")
    return t


def _employee_id(company_id: int, raw) -> int:
    try:
        eid = int(raw)
    except (TypeError, ValueError):
        raise ValidationFailed("employee_id must be integer")
    if not Employee.query.filter_by(id=eid, company_id=company_id).first():
        raise NotFound("Employee not found")
    return eid


def _mandatory(raw, default=True) -> bool:
    try:
        return as_bool(raw, "is_mandatory", default)
    except ValueError as ex:
        raise ValidationFailed(str(ex))


def _check_free(employee_id: int, on: date, exclude_id: int | None = None) -> None:
    q = SpecialDayAssignment.query.filter(
        SpecialDayAssignment.employee_id == employee_id,
        SpecialDayAssignment.date == on,
    )
    if exclude_id is not None:
        q = q.filter(SpecialDayAssignment.id != exclude_id)
    if q.first():
        raise Conflict("The employee already has a special assignment for this date")


def get_assignment(company_id: int, assignment_id: int) -> SpecialDayAssignment:
    row = SpecialDayAssignment.query.filter_by(id=assignment_id, company_id=company_id).first()
    if not row:
        raise NotFound("Special assignment not found")
    return row


def create_assignment(company_id: int, data: dict) -> SpecialDayAssignment:
    if data.get("employee_id") in (None, ""):
        raise ValidationFailed("employee_id is required")
    employee_id = _employee_id(company_id, data.get("employee_id"))
    on = _require_date(data.get("date"))
    kind = _type(data.get("type"))
    mandatory = _mandatory(data.get("is_mandatory"))
    _check_free(employee_id, on)

    row = SpecialDayAssignment(
        company_id=company_id,
        employee_id=employee_id,
        date=on,
        type=kind,
        is_mandatory=mandatory,
        notes=(data.get("notes") or "").strip() or None,
    )
    db.session.add(row)
    db.session.commit()
    return row


def list_assignments(company_id: int, *, employee_id: int | None = None, assignment_type: str | None = None,
                     start_date=None, end_date=None, page: int = 1, limit: int = 10):
    """Returns (items, total), newest date first. The range applies only when both ends are given."""
    q = SpecialDayAssignment.query.filter(SpecialDayAssignment.company_id == company_id)
    if employee_id:
        q = q.filter(SpecialDayAssignment.employee_id == employee_id)
    if assignment_type:
        q = q.filter(SpecialDayAssignment.type == _type(assignment_type))
    if start_date and end_date:
        start_d = _require_date(start_date, "start_date")
        end_d = _require_date(end_date, "end_date")
        q = q.filter(SpecialDayAssignment.date >= start_d, SpecialDayAssignment.date <= end_d)
    total = q.count()
    items = (
        q.order_by(SpecialDayAssignment.date.desc(), SpecialDayAssignment.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def update_assignment(company_id: int, assignment_id: int, data: dict) -> SpecialDayAssignment:
    row = get_assignment(company_id, assignment_id)

    employee_id = _employee_id(company_id, data["employee_id"]) if "employee_id" in data else row.employee_id
    on = _require_date(data.get("date")) if "date" in data else row.date
    kind = _type(data.get("type")) if "type" in data else row.type
    mandatory = _mandatory(data.get("is_mandatory"), True) if "is_mandatory" in data else row.is_mandatory
    if (employee_id, on) != (row.employee_id, row.date):
        _check_free(employee_id, on, exclude_id=row.id)

    row.employee_id = employee_id
    row.date = on
    row.type = kind
    row.is_mandatory = mandatory
    if "notes" in data:
        row.notes = (data.get("notes") or "").strip() or None

    db.session.commit()
    return row


def delete_assignment(company_id: int, assignment_id: int) -> None:
    row = get_assignment(company_id, assignment_id)
    db.session.delete(row)
    db.session.commit()


def assignments_for_employee(company_id: int, employee_id: int) -> List[SpecialDayAssignment]:
    _employee_id(company_id, employee_id)
    return (
        SpecialDayAssignment.query
        .filter(SpecialDayAssignment.company_id == company_id, SpecialDayAssignment.employee_id == employee_id)
        .order_by(SpecialDayAssignment.date.desc())
        .all()
    )


def assignments_in_range(company_id: int, start, end, employee_id: int | None = None) -> List[SpecialDayAssignment]:
    start_d = _require_date(start, "start_date")
    end_d = _require_date(end, "end_date")
    if end_d < start_d:
        raise ValidationFailed("end_date must be on or after start_date")
    q = SpecialDayAssignment.query.filter(
        SpecialDayAssignment.company_id == company_id,
        SpecialDayAssignment.date >= start_d,
        SpecialDayAssignment.date <= end_d,
    )
    if employee_id is not None:
        q = q.filter(SpecialDayAssignment.employee_id == employee_id)
    return q.order_by(SpecialDayAssignment.date.asc(), SpecialDayAssignment.id.asc()).all()
