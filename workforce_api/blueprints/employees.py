# workforce_api/blueprints/employees.py
from __future__ import annotations

from flask import Blueprint, request

from workforce_api.common.auth import current_company_id, requires_roles
from workforce_api.common.http import ok, fail, page_meta
from workforce_api.common.paging import page_limit, text_q
from workforce_api.services import employee_attendance_service, employee_service, schedule_service

bp = Blueprint("employees", __name__, url_prefix="/api/v1/employees")

WRITE_ROLES = ("admin", "hr")


@bp.get("")
@requires_roles()
def list_employees():
    department_id = request.args.get("department_id")
    if department_id:
        try:
            department_id = int(department_id)
        except ValueError:
            return fail("department_id must be integer", 422)
    page, limit = page_limit()
    items, total, stats = employee_service.list_employees(
        current_company_id(),
        search=text_q(),
        status=request.args.get("status") or None,
        department_id=department_id or None,
        page=page,
        limit=limit,
    )
    return ok([e.to_dict() for e in items], stats=stats, **page_meta(page, limit, total))


@bp.get("/<int:employee_id>")
@requires_roles()
def get_employee(employee_id: int):
    emp = employee_service.get_employee(current_company_id(), employee_id)
    data = emp.to_dict()
    data["schedules"] = [s.to_dict() for s in emp.schedules]
    return ok(data)


@bp.post("")
@requires_roles(*WRITE_ROLES)
def create_employee():
    data = request.get_json(silent=True) or {}
    emp = employee_service.create_employee(current_company_id(), data)
    return ok(emp.to_dict(), status=201)


@bp.put("/<int:employee_id>")
@bp.patch("/<int:employee_id>")
@requires_roles(*WRITE_ROLES)
def update_employee(employee_id: int):
    data = request.get_json(silent=True) or {}
    emp = employee_service.update_employee(current_company_id(), employee_id, data)
    return ok(emp.to_dict())


@bp.delete("/<int:employee_id>")
@requires_roles(*WRITE_ROLES)
def delete_employee(employee_id: int):
    employee_service.delete_employee(current_company_id(), employee_id)
    return ok({"id": employee_id, "deleted": True})


# ---------- weekly schedule ----------

@bp.get("/<int:employee_id>/schedule")
@requires_roles()
def get_schedule(employee_id: int):
    rows = schedule_service.get_schedules(current_company_id(), employee_id)
    return ok([s.to_dict() for s in rows])


@bp.post("/<int:employee_id>/schedule")
@bp.put("/<int:employee_id>/schedule")
@requires_roles(*WRITE_ROLES)
def upsert_schedule(employee_id: int):
    data = request.get_json(silent=True) or {}
    row = schedule_service.upsert_schedule(
        current_company_id(),
        employee_id,
        data.get("day_of_week"),
        data.get("is_work_day", False),
        data.get("work_shift_id"),
    )
    return ok(row.to_dict())


# ---------- monthly attendance ----------

@bp.get("/<int:employee_id>/attendance")
@requires_roles()
def monthly_attendance(employee_id: int):
    report = employee_attendance_service.monthly_attendance(
        current_company_id(), employee_id, request.args.get("month")
    )
    return ok(report)
