# workforce_api/blueprints/auth.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import (
    create_access_token,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)

from workforce_api.common.auth import current_user
from workforce_api.common.http import ok, fail
from workforce_api.models.user import User

bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")


def _user_payload(u: User):
    return {
        "id": u.id,
        "email": u.email,
        "full_name": u.full_name,
        "company_id": u.company_id,
        "roles": u.role_codes(),
    }


@bp.post("/login")
def login():
    data = request.get_json(silent=True, force=True)
    if not isinstance(data, dict):
        data = {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return fail("email and password are required", 422)

    u = User.query.filter_by(email=email).first()
    if not u or not u.is_active or not u.check_password(password):
        current_app.logger.info("[auth] failed login for %s", email)
        return fail("Invalid credentials", 401, code="INVALID_CREDENTIALS")

    roles = u.role_codes()
    claims = {"roles": roles, "company_id": u.company_id, "email": u.email, "name": u.full_name}
    access = create_access_token(identity=str(u.id), additional_claims=claims)

    resp, status = ok({"user": _user_payload(u)})
    set_access_cookies(resp, access)
    return resp, status


@bp.post("/logout")
def logout():
    resp, status = ok({"logged_out": True})
    unset_jwt_cookies(resp)
    return resp, status


@bp.get("/me")
@jwt_required()
def me():
    u = current_user()
    if not u:
        return fail("User not found", 404)
    return ok(_user_payload(u))
