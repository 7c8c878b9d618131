# workforce_api/services/employee_service.py
from __future__ import annotations

from sqlalchemy import func, or_

from workforce_api.common.dates import parse_date, utc_today
from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.extensions import db
from workforce_api.models.attendance import SpecialDayAssignment
from workforce_api.models.employee import EMPLOYEE_STATUSES, Employee
from workforce_api.models.master import Department
from workforce_api.models.time_entry import TimeEntry

_REQUIRED = ("first_name", "last_name", "email", "id_number")


def _status(raw) -> str:
    s = str(raw or "").strip().upper()
    if s not in EMPLOYEE_STATUSES:
        raise ValidationFailed(f"status must be one of {', '.join(EMPLOYEE_STATUSES)}")
    return s


def _department_id(company_id: int, raw):
    if raw in (None, "", "null"):
        return None
    try:
        did = int(raw)
    except (TypeError, ValueError):
        raise ValidationFailed("department_id must be integer")
    if not Department.query.filter_by(id=did, company_id=company_id).first():
        raise NotFound("Department not found")
    return did


def _date(raw, field):
    try:
        return parse_date(raw, field)
    except ValueError as ex:
        raise ValidationFailed(str(ex))


def get_employee(company_id: int, employee_id: int) -> Employee:
    emp = Employee.query.filter_by(id=employee_id, company_id=company_id).first()
    if not emp:
        raise NotFound("Employee not found")
    return emp


def create_employee(company_id: int, data: dict) -> Employee:
    missing = [f for f in _REQUIRED if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationFailed("Missing required fields", {"fields": missing})

    email = data["email"].strip().lower()
    id_number = str(data["id_number"]).strip()
    if Employee.query.filter_by(company_id=company_id, email=email).first():
        raise Conflict("An employee with this email already exists in the company")
    if Employee.query.filter_by(company_id=company_id, id_number=id_number).first():
        raise Conflict("An employee with this ID number already exists")

    emp = Employee(
        company_id=company_id,
        first_name=data["first_name"].strip(),
        last_name=data["last_name"].strip(),
        email=email,
        id_number=id_number,
        phone=(data.get("phone") or "").strip() or None,
        department_id=_department_id(company_id, data.get("department_id")),
        date_joined=_date(data.get("date_joined"), "date_joined") or utc_today(),
        status=_status(data.get("status") or "ACTIVE"),
    )
    db.session.add(emp)
    db.session.commit()
    return emp


def list_employees(company_id: int, *, search: str | None = None, status: str | None = None,
                   department_id: int | None = None, page: int = 1, limit: int = 10):
    """Returns (items, total, stats-by-status for the whole company)."""
    q = Employee.query.filter(Employee.company_id == company_id)
    if status:
        q = q.filter(Employee.status == _status(status))
    if department_id:
        q = q.filter(Employee.department_id == department_id)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            Employee.first_name.ilike(like),
            Employee.last_name.ilike(like),
            Employee.email.ilike(like),
            Employee.id_number.ilike(like),
        ))
    total = q.count()
    items = q.order_by(Employee.created_at.desc(), Employee.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return items, total, status_counts(company_id)


def status_counts(company_id: int) -> dict:
    rows = (
        db.session.query(Employee.status, func.count(Employee.id))
        .filter(Employee.company_id == company_id)
        .group_by(Employee.status)
        .all()
    )
    by = {s: int(n) for s, n in rows}
    return {
        "total": sum(by.values()),
        "active": by.get("ACTIVE", 0),
        "inactive": by.get("INACTIVE", 0),
        "suspended": by.get("SUSPENDED", 0),
    }


def update_employee(company_id: int, employee_id: int, data: dict) -> Employee:
    emp = get_employee(company_id, employee_id)

    if "email" in data:
        email = (data.get("email") or "").strip().lower()
        if not email:
            raise ValidationFailed("email is required")
        dup = (
            Employee.query
            .filter(Employee.company_id == company_id, Employee.email == email, Employee.id != emp.id)
            .first()
        )
        if dup:
            raise Conflict("The email is already used by another employee")
        emp.email = email
    if "id_number" in data:
        id_number = str(data.get("id_number") or "").strip()
        if not id_number:
            raise ValidationFailed("id_number is required")
        dup = (
            Employee.query
            .filter(Employee.company_id == company_id, Employee.id_number == id_number, Employee.id != emp.id)
            .first()
        )
        if dup:
            raise Conflict("An employee with this ID number already exists")
        emp.id_number = id_number

    for f in ("first_name", "last_name"):
        if f in data:
            v = (data.get(f) or "").strip()
            if not v:
                raise ValidationFailed(f"{f} cannot be empty")
            setattr(emp, f, v)
    if "phone" in data:
        emp.phone = (data.get("phone") or "").strip() or None
    if "department_id" in data:
        emp.department_id = _department_id(company_id, data.get("department_id"))
    if "date_joined" in data:
        emp.date_joined = _date(data.get("date_joined"), "date_joined")
    if "status" in data:
        emp.status = _status(data.get("status"))

    db.session.commit()
    return emp


def delete_employee(company_id: int, employee_id: int) -> None:
    emp = get_employee(company_id, employee_id)
    if TimeEntry.query.filter(TimeEntry.employee_id == emp.id).count() > 0:
        raise Conflict("Cannot delete an employee with time entries")
    SpecialDayAssignment.query.filter(SpecialDayAssignment.employee_id == emp.id).delete(synchronize_session=False)
    db.session.delete(emp)
    db.session.commit()
