# workforce_api/common/paging.py
from flask import request

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

def page_limit(default_limit=DEFAULT_LIMIT, max_limit=MAX_LIMIT):
    try:
        page = max(int(request.args.get("page", DEFAULT_PAGE)), 1)
    except (TypeError, ValueError):
        page = DEFAULT_PAGE
    raw = request.args.get("limit", request.args.get("size", default_limit))
    try:
        limit = max(1, min(int(raw), max_limit))
    except (TypeError, ValueError):
        limit = default_limit
    return page, limit

def as_bool(val, field, default=None):
    """true/1/yes and false/0/no, any case; JSON booleans too. None or "" -> default."""
    if val is None or val == "":
        return default
    v = str(val).strip().lower()
    if v in ("true", "1", "yes"):
        return True
    if v in ("false", "0", "no"):
        return False
    raise ValueError(f"{field} must be true/false")

def bool_arg(name: str):
    """?name=true/false -> True/False, absent -> None."""
    return as_bool(request.args.get(name), name)

def text_q():
    q = request.args.get("search") or request.args.get("q") or ""
    return q.strip() or None
