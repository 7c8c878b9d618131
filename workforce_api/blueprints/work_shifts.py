# workforce_api/blueprints/work_shifts.py
from __future__ import annotations

from flask import Blueprint, request

from workforce_api.common.auth import current_company_id, requires_roles
from workforce_api.common.http import ok, fail, page_meta
from workforce_api.common.paging import bool_arg, page_limit
from workforce_api.services import work_shift_service

bp = Blueprint("work_shifts", __name__, url_prefix="/api/v1/work-shifts")

WRITE_ROLES = ("admin", "hr")


def _row(ws, employee_count: int = 0):
    d = ws.to_dict()
    d["duration_minutes"] = work_shift_service.shift_duration_minutes(
        ws.start_time, ws.end_time, ws.is_night_shift
    )
    d["employee_count"] = employee_count
    return d


@bp.get("")
@requires_roles()
def list_work_shifts():
    try:
        is_active = bool_arg("is_active")
        is_night_shift = bool_arg("is_night_shift")
    except ValueError as e:
        return fail(str(e), 422)
    page, limit = page_limit()
    items, total, stats = work_shift_service.list_work_shifts(
        current_company_id(), is_active=is_active, is_night_shift=is_night_shift, page=page, limit=limit
    )
    counts = work_shift_service.employee_counts([s.id for s in items])
    data = [_row(s, counts.get(s.id, 0)) for s in items]
    return ok(data, stats=stats, **page_meta(page, limit, total))


@bp.get("/stats")
@requires_roles()
def stats():
    return ok(work_shift_service.shift_stats(current_company_id()))


@bp.get("/<int:shift_id>")
@requires_roles()
def get_work_shift(shift_id: int):
    ws = work_shift_service.get_work_shift(current_company_id(), shift_id)
    counts = work_shift_service.employee_counts([ws.id])
    return ok(_row(ws, counts.get(ws.id, 0)))


@bp.get("/<int:shift_id>/contains")
@requires_roles()
def contains(shift_id: int):
    at = request.args.get("time")
    if not at:
        return fail("time is required (HH:MM)", 422)
    ws = work_shift_service.get_work_shift(current_company_id(), shift_id)
    return ok({"time": at, "in_shift": work_shift_service.is_time_in_shift(at, ws)})


@bp.post("")
@requires_roles(*WRITE_ROLES)
def create_work_shift():
    data = request.get_json(silent=True) or {}
    ws = work_shift_service.create_work_shift(current_company_id(), data)
    return ok(_row(ws), status=201)


@bp.put("/<int:shift_id>")
@bp.patch("/<int:shift_id>")
@requires_roles(*WRITE_ROLES)
def update_work_shift(shift_id: int):
    data = request.get_json(silent=True) or {}
    ws = work_shift_service.update_work_shift(current_company_id(), shift_id, data)
    counts = work_shift_service.employee_counts([ws.id])
    return ok(_row(ws, counts.get(ws.id, 0)))


@bp.delete("/<int:shift_id>")
@requires_roles(*WRITE_ROLES)
def delete_work_shift(shift_id: int):
    work_shift_service.delete_work_shift(current_company_id(), shift_id)
    return ok({"id": shift_id, "deleted": True})
