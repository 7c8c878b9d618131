# workforce_api/blueprints/time_entries.py
from __future__ import annotations

from flask import Blueprint, request

from workforce_api.common.auth import current_company_id, requires_roles
from workforce_api.common.http import ok, fail, page_meta
from workforce_api.common.paging import page_limit
from workforce_api.services import time_entry_service

bp = Blueprint("time_entries", __name__, url_prefix="/api/v1/time-entries")

WRITE_ROLES = ("admin", "hr")


@bp.get("")
@requires_roles()
def list_time_entries():
    employee_id = request.args.get("employee_id")
    if employee_id:
        try:
            employee_id = int(employee_id)
        except ValueError:
            return fail("employee_id must be integer", 422)
    page, limit = page_limit()
    items, total = time_entry_service.list_time_entries(
        current_company_id(),
        employee_id=employee_id or None,
        start_date=request.args.get("start_date"),
        end_date=request.args.get("end_date"),
        page=page,
        limit=limit,
    )
    return ok([t.to_dict() for t in items], **page_meta(page, limit, total))


@bp.get("/<int:entry_id>")
@requires_roles()
def get_time_entry(entry_id: int):
    return ok(time_entry_service.get_time_entry(current_company_id(), entry_id).to_dict())


@bp.post("")
@requires_roles(*WRITE_ROLES)
def create_time_entry():
    data = request.get_json(silent=True) or {}
    te = time_entry_service.create_time_entry(current_company_id(), data)
    return ok(te.to_dict(), status=201)


@bp.put("/<int:entry_id>")
@bp.patch("/<int:entry_id>")
@requires_roles(*WRITE_ROLES)
def update_time_entry(entry_id: int):
    data = request.get_json(silent=True) or {}
    te = time_entry_service.update_time_entry(current_company_id(), entry_id, data)
    return ok(te.to_dict())


@bp.delete("/<int:entry_id>")
@requires_roles(*WRITE_ROLES)
def delete_time_entry(entry_id: int):
    time_entry_service.delete_time_entry(current_company_id(), entry_id)
    return ok({"id": entry_id, "deleted": True})
