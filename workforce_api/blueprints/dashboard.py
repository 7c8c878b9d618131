# workforce_api/blueprints/dashboard.py
from flask import Blueprint

from workforce_api.common.auth import current_company_id, requires_roles
from workforce_api.common.http import ok
from workforce_api.services import dashboard_service

bp = Blueprint("dashboard", __name__, url_prefix="/api/v1/dashboard")


@bp.get("/stats")
@requires_roles()
def stats():
    return ok(dashboard_service.get_dashboard_stats(current_company_id()))


@bp.get("/alerts")
@requires_roles()
def alerts():
    return ok(dashboard_service.get_dashboard_alerts(current_company_id()))
