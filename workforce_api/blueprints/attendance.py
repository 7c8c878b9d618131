# workforce_api/blueprints/attendance.py
from __future__ import annotations

from flask import Blueprint, current_app, request

from workforce_api.common.auth import current_company_id, requires_roles
from workforce_api.common.http import ok, fail
from workforce_api.common.paging import bool_arg
from workforce_api.services.attendance_engine import AttendanceEngine, resolve_target_date

bp = Blueprint("attendance", __name__, url_prefix="/api/v1/attendance")


def _target_date():
    return resolve_target_date(
        request.args.get("date"),
        max_year_offset=current_app.config.get("ATTENDANCE_MAX_YEAR_OFFSET"),
    )


@bp.get("/work-day")
@requires_roles()
def work_day():
    info = AttendanceEngine().is_work_day(current_company_id(), _target_date())
    return ok(info.to_dict())


@bp.get("/stats")
@requires_roles()
def daily_stats():
    stats = AttendanceEngine().daily_stats(current_company_id(), _target_date())
    return ok(stats.to_dict())


@bp.get("/employees")
@requires_roles()
def employees():
    try:
        include_unscheduled = bool_arg("include_unscheduled") or False
    except ValueError as e:
        return fail(str(e), 422)
    on_date = _target_date()
    rows = AttendanceEngine().classify(current_company_id(), on_date, include_unscheduled=include_unscheduled)
    return ok([r.to_dict() for r in rows], date=on_date.isoformat(), count=len(rows))


@bp.get("/scheduled")
@requires_roles()
def scheduled():
    on_date = _target_date()
    rows = AttendanceEngine().scheduled_employees(current_company_id(), on_date)
    data = [
        {
            "id": e.id,
            "first_name": e.first_name,
            "last_name": e.last_name,
            "schedule": e.schedule.to_dict() if e.schedule else None,
        }
        for e in rows
    ]
    return ok(data, date=on_date.isoformat(), count=len(data))
