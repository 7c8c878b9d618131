from flask import Blueprint
from sqlalchemy import text

from workforce_api.common.http import ok, fail
from workforce_api.extensions import db

bp = Blueprint("health", __name__, url_prefix="/api")


@bp.get("/health")
def health():
    return ok({"status": "ok"})


@bp.get("/health/db")
def health_db():
    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        db.session.rollback()
        return fail("Database unavailable", 503, detail=str(e))
    return ok({"database": "ok"})
