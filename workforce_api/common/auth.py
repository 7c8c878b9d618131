# workforce_api/common/auth.py
from __future__ import annotations

from functools import wraps
from typing import Set

from flask_jwt_extended import jwt_required, get_jwt, get_jwt_identity

from workforce_api.common.errors import APIError
from workforce_api.common.http import fail
from workforce_api.extensions import db
from workforce_api.models.user import User
from workforce_api.models.security import Role, UserRole


# ---------- helpers ----------

def _collect_roles_from_db(user_id: int) -> Set[str]:
    q = (
        db.session.query(Role.code)
        .join(UserRole, UserRole.role_id == Role.id)
        .filter(UserRole.user_id == user_id)
        .distinct()
    )
    return {row[0] for row in q.all()}


def current_company_id() -> int:
    """
    Tenant of the current request, taken from the `company_id` claim issued at login.
    Every query in the API is scoped by it.
    """
    claims = get_jwt() or {}
    cid = claims.get("company_id")
    if cid is None:
        raise APIError("COMPANY_MISSING", "Company ID not found", 400)
    return int(cid)


def current_user() -> User | None:
    uid = get_jwt_identity()
    if uid is None:
        return None
    return db.session.get(User, int(uid))


# ---------- decorators ----------

def requires_roles(*codes: str):
    """
    Require that the current user has AT LEAST ONE of the given role codes.
    - Uses roles in JWT if present; falls back to DB.
    - 'admin' role always passes.
    """
    def outer(fn):
        @wraps(fn)
        @jwt_required()
        def inner(*args, **kwargs):
            claims = get_jwt() or {}
            jwt_roles = set(claims.get("roles") or [])
            if "admin" in jwt_roles:
                return fn(*args, **kwargs)

            uid = get_jwt_identity()
            if uid is None:
                return fail("Unauthorized", status=401)

            roles: Set[str]
            if jwt_roles:
                roles = jwt_roles
            else:
                # fallback DB
                user = db.session.get(User, int(uid))
                if not user or not user.is_active:
                    return fail("Unauthorized", status=401)
                roles = _collect_roles_from_db(user.id)

            if "admin" in roles:
                return fn(*args, **kwargs)

            if codes and not any(r in roles for r in codes):
                return fail("Forbidden", status=403)

            return fn(*args, **kwargs)
        return inner
    return outer
