# workforce_api/common/dates.py
"""
Date/time conventions shared by the API and the attendance engine.

Every instant is stored and compared as a *naive UTC* datetime. Calendar days
(`Holiday.date`, `TimeEntry.date`) are plain `date` values, so "falls on day D"
is simply `column == D`, i.e. the `[D 00:00, D+1 00:00)` UTC window.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timezone


_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today() -> date:
    return utc_now().date()


def to_utc_naive(dt: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as UTC already."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def day_of_week(d: date) -> int:
    """0=Sunday .. 6=Saturday (schedule convention)."""
    return d.isoweekday() % 7


def parse_date(s, field="date") -> date | None:
    """`YYYY-MM-DD`, or a full ISO timestamp taken as its UTC calendar day."""
    if s in (None, "", "null"):
        return None
    if isinstance(s, datetime):
        return to_utc_naive(s).date()
    if isinstance(s, date):
        return s
    raw = str(s).strip()
    if _DATE_RE.fullmatch(raw):
        try:
            return datetime.strptime(raw, "%Y-%m-%d").date()
        except ValueError:
            raise ValueError(f"{field} must be YYYY-MM-DD")
    if len(raw) > 10 and _DATE_RE.fullmatch(raw[:10]) and raw[10] in "Tt ":
        try:
            return parse_datetime(raw, field).date()
        except ValueError:
            pass
    raise ValueError(f"{field} must be YYYY-MM-DD")


def parse_datetime(s, field="datetime") -> datetime | None:
    """ISO-8601 timestamp (with or without offset) -> naive UTC."""
    if s in (None, "", "null"):
        return None
    if isinstance(s, datetime):
        return to_utc_naive(s)
    raw = str(s).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return to_utc_naive(datetime.fromisoformat(raw))
    except ValueError:
        raise ValueError(f"{field} must be an ISO-8601 timestamp")


def parse_hhmm(s, field="time") -> time | None:
    if s in (None, "", "null"):
        return None
    if isinstance(s, time):
        return s
    try:
        hh, mm = str(s).strip().split(":")
        if len(mm) != 2:
            raise ValueError
        hh = int(hh); mm = int(mm)
        if not (0 <= hh <= 23 and 0 <= mm <= 59):
            raise ValueError
        return time(hour=hh, minute=mm)
    except ValueError:
        raise ValueError(f"{field} must be HH:MM (00-23:00-59)")


def minutes_of(t: time) -> int:
    return t.hour * 60 + t.minute
