# workforce_api/blueprints/holidays.py
from __future__ import annotations

from flask import Blueprint, request

from workforce_api.common.auth import current_company_id, requires_roles
from workforce_api.common.http import ok, fail, page_meta
from workforce_api.common.paging import bool_arg, page_limit
from workforce_api.services import holiday_service

bp = Blueprint("holidays", __name__, url_prefix="/api/v1/holidays")

WRITE_ROLES = ("admin", "hr")


def _year_arg(required=False):
    raw = request.args.get("year")
    if raw in (None, ""):
        if required:
            raise ValueError("year is required")
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError("year must be integer")


@bp.get("")
@requires_roles()
def list_holidays():
    try:
        year = _year_arg()
        is_recurring = bool_arg("is_recurring")
    except ValueError as e:
        return fail(str(e), 422)
    page, limit = page_limit()
    items, total = holiday_service.list_holidays(
        current_company_id(), year=year, is_recurring=is_recurring, page=page, limit=limit
    )
    return ok([h.to_dict() for h in items], **page_meta(page, limit, total))


@bp.get("/upcoming")
@requires_roles()
def upcoming():
    try:
        limit = max(1, min(int(request.args.get("limit", 5)), 50))
    except ValueError:
        return fail("limit must be integer", 422)
    rows = holiday_service.upcoming_holidays(current_company_id(), limit)
    return ok([h.to_dict() for h in rows])


@bp.get("/by-year")
@requires_roles()
def by_year():
    try:
        year = _year_arg(required=True)
    except ValueError as e:
        return fail(str(e), 422)
    rows = holiday_service.holidays_by_year(current_company_id(), year)
    return ok([h.to_dict() for h in rows], year=year)


@bp.get("/range")
@requires_roles()
def in_range():
    rows = holiday_service.holidays_in_range(
        current_company_id(), request.args.get("start_date"), request.args.get("end_date")
    )
    return ok([h.to_dict() for h in rows])


@bp.post("/generate-recurring")
@requires_roles(*WRITE_ROLES)
def generate_recurring():
    data = request.get_json(silent=True) or {}
    try:
        year = int(data.get("year"))
    except (TypeError, ValueError):
        return fail("year is required", 422)
    created = holiday_service.generate_recurring_holidays(current_company_id(), year)
    return ok([h.to_dict() for h in created], status=201, created=len(created))


@bp.get("/<int:holiday_id>")
@requires_roles()
def get_holiday(holiday_id: int):
    return ok(holiday_service.get_holiday(current_company_id(), holiday_id).to_dict())


@bp.post("")
@requires_roles(*WRITE_ROLES)
def create_holiday():
    data = request.get_json(silent=True) or {}
    hol = holiday_service.create_holiday(current_company_id(), data)
    return ok(hol.to_dict(), status=201)


@bp.put("/<int:holiday_id>")
@bp.patch("/<int:holiday_id>")
@requires_roles(*WRITE_ROLES)
def update_holiday(holiday_id: int):
    data = request.get_json(silent=True) or {}
    hol = holiday_service.update_holiday(current_company_id(), holiday_id, data)
    return ok(hol.to_dict())


@bp.delete("/<int:holiday_id>")
@requires_roles(*WRITE_ROLES)
def delete_holiday(holiday_id: int):
    holiday_service.delete_holiday(current_company_id(), holiday_id)
    return ok({"id": holiday_id, "deleted": True})
