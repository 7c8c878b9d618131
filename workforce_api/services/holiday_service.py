# workforce_api/services/holiday_service.py
from __future__ import annotations

from datetime import date
from typing import List, Optional
import logging

from workforce_api.common.dates import parse_date, utc_today
from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.common.paging import as_bool
from workforce_api.extensions import db
from workforce_api.models.attendance import Holiday

log = logging.getLogger(__name__)


def _require_date(raw, field="date") -> date:
    try:
        d = parse_date(raw, field)
    except ValueError as ex:
        raise ValidationFailed(str(ex))
    if d is None:
        raise ValidationFailed(f"{field} is required")
    return d


def _flag(data: dict, key: str, default=None):
    try:
        return as_bool(data.get(key), key, default)
    except ValueError as ex:
        raise ValidationFailed(str(ex))


def get_holiday(company_id: int, holiday_id: int) -> Holiday:
    hol = Holiday.query.filter_by(id=holiday_id, company_id=company_id).first()
    if not hol:
        raise NotFound("Holiday not found")
    return hol


def create_holiday(company_id: int, data: dict) -> Holiday:
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationFailed("name is required")
    on = _require_date(data.get("date"))

    dup = Holiday.query.filter_by(company_id=company_id, name=name, date=on).first()
    if dup:
        raise Conflict("A holiday with this name already exists for this date")

    hol = Holiday(
        company_id=company_id,
        name=name,
        date=on,
        description=(data.get("description") or "").strip() or None,
        is_recurring=_flag(data, "is_recurring", False),
    )
    db.session.add(hol)
    db.session.commit()
    return hol


def list_holidays(company_id: int, *, year: int | None = None, is_recurring: bool | None = None,
                  page: int = 1, limit: int = 10):
    """Returns (items, total) ordered by date."""
    q = Holiday.query.filter(Holiday.company_id == company_id)
    if year:
        q = q.filter(Holiday.date >= date(year, 1, 1), Holiday.date < date(year + 1, 1, 1))
    if is_recurring is not None:
        q = q.filter(Holiday.is_recurring.is_(is_recurring))
    total = q.count()
    items = q.order_by(Holiday.date.asc(), Holiday.id.asc()).offset((page - 1) * limit).limit(limit).all()
    return items, total


def count_holidays(company_id: int) -> int:
    return Holiday.query.filter(Holiday.company_id == company_id).count()


def update_holiday(company_id: int, holiday_id: int, data: dict) -> Holiday:
    hol = get_holiday(company_id, holiday_id)
    is_recurring = _flag(data, "is_recurring", False) if "is_recurring" in data else hol.is_recurring

    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationFailed("name cannot be empty")
        if name != hol.name:
            dup = (
                Holiday.query
                .filter(Holiday.company_id == company_id, Holiday.name == name, Holiday.id != hol.id)
                .first()
            )
            if dup:
                raise Conflict("A holiday with this name already exists")
        hol.name = name
    if "date" in data:
        hol.date = _require_date(data.get("date"))
    if "description" in data:
        hol.description = (data.get("description") or "").strip() or None
    hol.is_recurring = is_recurring

    db.session.commit()
    return hol


def delete_holiday(company_id: int, holiday_id: int) -> None:
    hol = get_holiday(company_id, holiday_id)
    db.session.delete(hol)
    db.session.commit()


def holidays_by_year(company_id: int, year: int) -> List[Holiday]:
    return (
        Holiday.query
        .filter(Holiday.company_id == company_id,
                Holiday.date >= date(year, 1, 1),
                Holiday.date < date(year + 1, 1, 1))
        .order_by(Holiday.date.asc())
        .all()
    )


def holidays_in_range(company_id: int, start, end) -> List[Holiday]:
    start_d = _require_date(start, "start_date")
    end_d = _require_date(end, "end_date")
    if end_d < start_d:
        raise ValidationFailed("end_date must be on or after start_date")
    return (
        Holiday.query
        .filter(Holiday.company_id == company_id, Holiday.date >= start_d, Holiday.date <= end_d)
        .order_by(Holiday.date.asc())
        .all()
    )


def upcoming_holidays(company_id: int, limit: int = 5, *, today: date | None = None) -> List[Holiday]:
    today = today or utc_today()
    return (
        Holiday.query
        .filter(Holiday.company_id == company_id, Holiday.date >= today)
        .order_by(Holiday.date.asc())
        .limit(limit)
        .all()
    )


def _project(d: date, year: int) -> Optional[date]:
    try:
        return d.replace(year=year)
    except ValueError:
        # Feb 29 -> non-leap year
        return None


def generate_recurring_holidays(company_id: int, year: int) -> List[Holiday]:
    """
    Copy every recurring holiday of the company onto `year` (same month/day).
    Existing rows with the same name and date are left alone, so re-running is a no-op.
    """
    recurring = (
        Holiday.query
        .filter(Holiday.company_id == company_id, Holiday.is_recurring.is_(True))
        .order_by(Holiday.date.asc())
        .all()
    )

    created: List[Holiday] = []
    seen = set()
    for src in recurring:
        target = _project(src.date, year)
        if target is None:
            log.warning("[holidays] skip %r: %s has no counterpart in %s", src.name, src.date, year)
            continue
        key = (src.name, target)
        if key in seen:
            continue
        seen.add(key)

        exists = Holiday.query.filter_by(company_id=company_id, name=src.name, date=target).first()
        if exists:
            continue
        hol = Holiday(
            company_id=company_id,
            name=src.name,
            date=target,
            description=src.description,
            is_recurring=True,
        )
        db.session.add(hol)
        created.append(hol)

    db.session.commit()
    log.info("[holidays] company=%s year=%s generated=%s", company_id, year, len(created))
    return created
