# workforce_api/services/work_shift_service.py
from __future__ import annotations

from datetime import time
from typing import Dict, List

from sqlalchemy import func

from workforce_api.common.dates import minutes_of, parse_hhmm
from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.common.paging import as_bool
from workforce_api.extensions import db
from workforce_api.models.attendance import Schedule, WorkShift
from workforce_api.services.schedule_resolver import ShiftWindow


# ---------- time helpers ----------

def shift_duration_minutes(start_time, end_time, is_night_shift: bool) -> int:
    """Length of a shift in minutes; night shifts may wrap past midnight."""
    try:
        st = parse_hhmm(start_time, "start_time")
        et = parse_hhmm(end_time, "end_time")
    except ValueError:
        return 0
    if st is None or et is None:
        return 0
    return ShiftWindow(st, et, bool(is_night_shift)).duration_minutes


def is_time_in_shift(at, shift: WorkShift) -> bool:
    """Inclusive on both ends; night shifts accept either side of midnight."""
    try:
        t = parse_hhmm(at, "time")
    except ValueError:
        return False
    if t is None or shift.start_time is None or shift.end_time is None:
        return False
    check, start, end = minutes_of(t), minutes_of(shift.start_time), minutes_of(shift.end_time)
    if shift.is_night_shift:
        return check >= start or check <= end
    return start <= check <= end


def _times(data: dict, current: WorkShift | None = None):
    try:
        st = parse_hhmm(data["start_time"], "start_time") if "start_time" in data else (current.start_time if current else None)
        et = parse_hhmm(data["end_time"], "end_time") if "end_time" in data else (current.end_time if current else None)
    except ValueError as ex:
        raise ValidationFailed(str(ex))
    if st is None or et is None:
        raise ValidationFailed("start_time and end_time are required (HH:MM)")
    return st, et


def _check_order(st: time, et: time, is_night: bool) -> None:
    if st >= et and not is_night:
        raise ValidationFailed("end_time must be after start_time for a day shift")


def _grace(data: dict, default: int = 0) -> int:
    raw = data.get("grace_minutes", default)
    try:
        g = int(raw if raw is not None else 0)
    except (TypeError, ValueError):
        raise ValidationFailed("grace_minutes must be integer")
    if g < 0:
        raise ValidationFailed("grace_minutes must be >= 0")
    return g


def _flag(data: dict, key: str, default=None):
    try:
        return as_bool(data.get(key), key, default)
    except ValueError as ex:
        raise ValidationFailed(str(ex))


# ---------- queries ----------

def employee_counts(shift_ids: List[int]) -> Dict[int, int]:
    """Distinct employees scheduled on each shift."""
    if not shift_ids:
        return {}
    rows = (
        db.session.query(Schedule.work_shift_id, func.count(func.distinct(Schedule.employee_id)))
        .filter(Schedule.work_shift_id.in_(shift_ids))
        .group_by(Schedule.work_shift_id)
        .all()
    )
    return {sid: int(n) for sid, n in rows}


def get_work_shift(company_id: int, shift_id: int) -> WorkShift:
    ws = WorkShift.query.filter_by(id=shift_id, company_id=company_id).first()
    if not ws:
        raise NotFound("Work shift not found")
    return ws


def list_work_shifts(company_id: int, *, is_active: bool | None = None, is_night_shift: bool | None = None,
                     page: int = 1, limit: int = 10):
    """Returns (items, total, stats); stats cover every shift matching the filters, not just the page."""
    q = WorkShift.query.filter(WorkShift.company_id == company_id)
    if is_active is not None:
        q = q.filter(WorkShift.is_active.is_(is_active))
    if is_night_shift is not None:
        q = q.filter(WorkShift.is_night_shift.is_(is_night_shift))
    total = q.count()
    items = q.order_by(WorkShift.name.asc()).offset((page - 1) * limit).limit(limit).all()

    active = q.filter(WorkShift.is_active.is_(True))
    stats = {
        "total": total,
        "active": active.count(),
        "inactive": q.filter(WorkShift.is_active.is_(False)).count(),
        "day_shifts": active.filter(WorkShift.is_night_shift.is_(False)).count(),
        "night_shifts": active.filter(WorkShift.is_night_shift.is_(True)).count(),
    }
    return items, total, stats


def shift_stats(company_id: int) -> dict:
    base = WorkShift.query.filter(WorkShift.company_id == company_id)
    return {
        "total": base.count(),
        "active": base.filter(WorkShift.is_active.is_(True)).count(),
        "inactive": base.filter(WorkShift.is_active.is_(False)).count(),
        "night_shifts": base.filter(WorkShift.is_active.is_(True), WorkShift.is_night_shift.is_(True)).count(),
    }


# ---------- commands ----------

def create_work_shift(company_id: int, data: dict) -> WorkShift:
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationFailed("name is required")
    if WorkShift.query.filter_by(company_id=company_id, name=name).first():
        raise Conflict("A work shift with this name already exists")

    st, et = _times(data)
    is_night = _flag(data, "is_night_shift", False)
    _check_order(st, et, is_night)

    ws = WorkShift(
        company_id=company_id,
        name=name,
        description=(data.get("description") or "").strip() or None,
        start_time=st,
        end_time=et,
        grace_minutes=_grace(data),
        is_night_shift=is_night,
        is_active=_flag(data, "is_active", True),
    )
    db.session.add(ws)
    db.session.commit()
    return ws


def update_work_shift(company_id: int, shift_id: int, data: dict) -> WorkShift:
    ws = get_work_shift(company_id, shift_id)
    is_night = _flag(data, "is_night_shift", False) if "is_night_shift" in data else bool(ws.is_night_shift)
    is_active = _flag(data, "is_active", True) if "is_active" in data else ws.is_active

    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationFailed("name cannot be empty")
        if name != ws.name:
            dup = (
                WorkShift.query
                .filter(WorkShift.company_id == company_id, WorkShift.name == name, WorkShift.id != ws.id)
                .first()
            )
            if dup:
                raise Conflict("A work shift with this name already exists")
        ws.name = name

    if "start_time" in data or "end_time" in data or "is_night_shift" in data:
        st, et = _times(data, ws)
        _check_order(st, et, is_night)
        ws.start_time, ws.end_time = st, et
    ws.is_night_shift = is_night

    if "description" in data:
        ws.description = (data.get("description") or "").strip() or None
    ws.is_active = is_active
    if "grace_minutes" in data:
        ws.grace_minutes = _grace(data)

    db.session.commit()
    return ws


def delete_work_shift(company_id: int, shift_id: int) -> None:
    ws = get_work_shift(company_id, shift_id)
    if employee_counts([ws.id]).get(ws.id, 0) > 0:
        raise Conflict("Cannot delete a work shift that has employees assigned")
    db.session.delete(ws)
    db.session.commit()
