# workforce_api/services/dashboard_service.py
from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import func

from workforce_api.common.dates import utc_today
from workforce_api.common.errors import CompanyNotFound
from workforce_api.extensions import db
from workforce_api.models.attendance import WorkShift
from workforce_api.models.employee import Employee
from workforce_api.models.master import Company, Department
from workforce_api.models.security import Role
from workforce_api.models.time_entry import TimeEntry
from workforce_api.services import employee_service, holiday_service, work_shift_service
from workforce_api.services.attendance_engine import AttendanceEngine

RECENT_EMPLOYEES = 5
UPCOMING_HOLIDAYS_ALERT = 3


def _department_stats(company_id: int):
    rows = (
        db.session.query(Department.name, func.count(Employee.id))
        .join(Employee, Employee.department_id == Department.id)
        .filter(Employee.company_id == company_id)
        .group_by(Department.id, Department.name)
        .order_by(Department.name.asc())
        .all()
    )
    return [{"name": name, "count": int(n)} for name, n in rows]


def _time_entry_stats(company_id: int, today: date):
    base = TimeEntry.query.filter(TimeEntry.company_id == company_id)
    return {
        "total": base.count(),
        "today": base.filter(TimeEntry.date == today).count(),
        "this_week": base.filter(TimeEntry.date >= today - timedelta(days=7)).count(),
        "this_month": base.filter(TimeEntry.date >= today.replace(day=1)).count(),
    }


def _recent_activity(company_id: int):
    emps = (
        Employee.query
        .filter(Employee.company_id == company_id)
        .order_by(Employee.created_at.desc(), Employee.id.desc())
        .limit(RECENT_EMPLOYEES)
        .all()
    )
    return [
        {
            "id": e.id,
            "name": e.full_name,
            "department": e.department.name if e.department else None,
            "date_joined": e.date_joined.isoformat() if e.date_joined else None,
            "created_at": e.created_at.isoformat() if e.created_at else None,
            "type": "new_employee",
            "message": f"{e.full_name} joined",
        }
        for e in emps
    ]


def get_dashboard_stats(company_id: int, *, today: date | None = None, engine: AttendanceEngine | None = None) -> dict:
    """
    Company overview. Every block is an independent read-only count; only the
    company lookup must come first.
    """
    company = db.session.get(Company, company_id)
    if not company:
        raise CompanyNotFound(company_id)
    today = today or utc_today()
    engine = engine or AttendanceEngine()

    today_stats = engine.today_scheduled_stats(company_id, today)
    employees = employee_service.status_counts(company_id)
    departments = _department_stats(company_id)
    shifts = work_shift_service.shift_stats(company_id)
    entries = _time_entry_stats(company_id, today)

    stats = {
        "total_employees": employees["total"],
        "active_employees": employees["active"],
        "inactive_employees": employees["inactive"],
        "suspended_employees": employees["suspended"],
        "total_roles": Role.query.filter(Role.company_id == company_id).count(),
        "total_departments": len(departments),
        "today_scheduled": today_stats["total_scheduled"],
        "today_active": today_stats["total_active"],
        "is_work_day": today_stats["is_work_day"],
        "work_day_reason": today_stats.get("work_day_reason") or "",
        "total_holidays": holiday_service.count_holidays(company_id),
        "active_work_shifts": shifts["active"],
        "total_time_entries": entries["total"],
    }
    return {
        "stats": stats,
        "time_entries": entries,
        "department_stats": departments,
        "recent_activity": _recent_activity(company_id),
        "company": {"name": company.name},
    }


def get_dashboard_alerts(company_id: int, *, today: date | None = None) -> list:
    if not db.session.get(Company, company_id):
        raise CompanyNotFound(company_id)
    alerts = []

    no_dept = Employee.query.filter(
        Employee.company_id == company_id,
        Employee.status == "ACTIVE",
        Employee.department_id.is_(None),
    ).count()
    if no_dept > 0:
        alerts.append({
            "type": "warning",
            "message": f"{no_dept} employee(s) without department",
            "action": "assign_departments",
        })

    upcoming = holiday_service.upcoming_holidays(company_id, UPCOMING_HOLIDAYS_ALERT, today=today)
    if upcoming:
        alerts.append({
            "type": "info",
            "message": f"{len(upcoming)} upcoming holiday(s)",
            "action": "view_holidays",
            "data": [h.to_dict() for h in upcoming],
        })

    inactive_shifts = WorkShift.query.filter(
        WorkShift.company_id == company_id, WorkShift.is_active.is_(False)
    ).count()
    if inactive_shifts > 0:
        alerts.append({
            "type": "warning",
            "message": f"{inactive_shifts} inactive work shift(s)",
            "action": "manage_shifts",
        })

    return alerts
