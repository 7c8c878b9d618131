# workforce_api/blueprints/special_assignments.py
from __future__ import annotations

from flask import Blueprint, request

from workforce_api.common.auth import current_company_id, requires_roles
from workforce_api.common.http import ok, fail, page_meta
from workforce_api.common.paging import page_limit
from workforce_api.services import special_assignment_service

bp = Blueprint("special_assignments", __name__, url_prefix="/api/v1/special-assignments")

WRITE_ROLES = ("admin", "hr")


@bp.get("")
@requires_roles()
def list_assignments():
    employee_id = request.args.get("employee_id")
    if employee_id:
        try:
            employee_id = int(employee_id)
        except ValueError:
            return fail("employee_id must be integer", 422)
    page, limit = page_limit()
    items, total = special_assignment_service.list_assignments(
        current_company_id(),
        employee_id=employee_id or None,
        assignment_type=request.args.get("type") or None,
        start_date=request.args.get("start_date") or None,
        end_date=request.args.get("end_date") or None,
        page=page,
        limit=limit,
    )
    return ok([a.to_dict() for a in items], **page_meta(page, limit, total))


@bp.get("/range")
@requires_roles()
def in_range():
    rows = special_assignment_service.assignments_in_range(
        current_company_id(), request.args.get("start_date"), request.args.get("end_date")
    )
    return ok([a.to_dict() for a in rows])


@bp.get("/employee/<int:employee_id>")
@requires_roles()
def for_employee(employee_id: int):
    rows = special_assignment_service.assignments_for_employee(current_company_id(), employee_id)
    return ok([a.to_dict() for a in rows])


@bp.get("/<int:assignment_id>")
@requires_roles()
def get_assignment(assignment_id: int):
    return ok(special_assignment_service.get_assignment(current_company_id(), assignment_id).to_dict())


@bp.post("")
@requires_roles(*WRITE_ROLES)
def create_assignment():
    data = request.get_json(silent=True) or {}
    row = special_assignment_service.create_assignment(current_company_id(), data)
    return ok(row.to_dict(), status=201)


@bp.put("/<int:assignment_id>")
@bp.patch("/<int:assignment_id>")
@requires_roles(*WRITE_ROLES)
def update_assignment(assignment_id: int):
    data = request.get_json(silent=True) or {}
    row = special_assignment_service.update_assignment(current_company_id(), assignment_id, data)
    return ok(row.to_dict())


@bp.delete("/<int:assignment_id>")
@requires_roles(*WRITE_ROLES)
def delete_assignment(assignment_id: int):
    special_assignment_service.delete_assignment(current_company_id(), assignment_id)
    return ok({"id": assignment_id, "deleted": True})
