from datetime import date, time

import pytest

from workforce_api.common.errors import CompanyNotFound
from workforce_api.services import dashboard_service

from conftest import at, mk_company, mk_department, mk_employee, mk_entry, mk_holiday, mk_shift, mk_user

TODAY = date(2024, 3, 5)  # Tuesday


def test_dashboard_stats(session):
    c = mk_company()
    mk_user(c, roles=("admin", "hr"))
    ops = mk_department(c, "Operations")
    shift = mk_shift(c)
    mk_shift(c, "Old", time(9, 0), time(17, 0), active=False)

    ana = mk_employee(c, "Ana", "Rojas", shift=shift, department=ops)
    mk_employee(c, "Ben", "Soto", shift=shift, department=ops)
    mk_employee(c, "Ciro", "Luna", status="INACTIVE")
    mk_holiday(c, date(2024, 5, 1), "Día del Trabajo")

    mk_entry(ana, TODAY, at(TODAY, 8))
    mk_entry(ana, date(2024, 3, 1), at(date(2024, 3, 1), 8))
    mk_entry(ana, date(2024, 2, 10), at(date(2024, 2, 10), 8))

    out = dashboard_service.get_dashboard_stats(c.id, today=TODAY)
    s = out["stats"]
    assert (s["total_employees"], s["active_employees"], s["inactive_employees"]) == (3, 2, 1)
    assert s["total_roles"] == 2
    assert s["today_scheduled"] == 2
    assert s["today_active"] == 2
    assert s["is_work_day"] is True
    assert s["total_holidays"] == 1
    assert s["active_work_shifts"] == 1
    assert out["time_entries"] == {"total": 3, "today": 1, "this_week": 2, "this_month": 2}
    assert out["department_stats"] == [{"name": "Operations", "count": 2}]
    assert len(out["recent_activity"]) == 3
    assert out["company"] == {"name": "Acme SA"}


def test_dashboard_stats_on_holiday(session):
    c = mk_company()
    shift = mk_shift(c)
    mk_employee(c, shift=shift)
    mk_holiday(c, TODAY, "Carnaval")

    s = dashboard_service.get_dashboard_stats(c.id, today=TODAY)["stats"]
    assert s["is_work_day"] is False
    assert s["work_day_reason"] == "Feriado: Carnaval"
    assert s["today_scheduled"] == 1


def test_dashboard_alerts(session):
    c = mk_company()
    mk_employee(c, "Ana", "Rojas")
    mk_shift(c, "Old", active=False)
    mk_holiday(c, date(2024, 4, 1), "A")
    mk_holiday(c, date(2024, 5, 1), "B")
    mk_holiday(c, date(2024, 6, 1), "C")
    mk_holiday(c, date(2024, 7, 1), "D")

    alerts = dashboard_service.get_dashboard_alerts(c.id, today=TODAY)
    assert [a["action"] for a in alerts] == ["assign_departments", "view_holidays", "manage_shifts"]
    assert [h["name"] for h in alerts[1]["data"]] == ["A", "B", "C"]


def test_dashboard_unknown_company(session):
    with pytest.raises(CompanyNotFound):
        dashboard_service.get_dashboard_stats(404, today=TODAY)
    with pytest.raises(CompanyNotFound):
        dashboard_service.get_dashboard_alerts(404)
