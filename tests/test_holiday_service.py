from datetime import date

import pytest

from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.models.attendance import Holiday
from workforce_api.services import holiday_service

from conftest import mk_company, mk_holiday


def test_create_rejects_same_name_and_date(session):
    c = mk_company()
    holiday_service.create_holiday(c.id, {"name": "Año Nuevo", "date": "2024-01-01", "is_recurring": True})
    with pytest.raises(Conflict):
        holiday_service.create_holiday(c.id, {"name": "Año Nuevo", "date": "2024-01-01"})
    # another company may use it
    other = mk_company(code="OTHER", name="Other")
    holiday_service.create_holiday(other.id, {"name": "Año Nuevo", "date": "2024-01-01"})


def test_create_validates_input(session):
    c = mk_company()
    with pytest.raises(ValidationFailed):
        holiday_service.create_holiday(c.id, {"name": "", "date": "2024-01-01"})
    with pytest.raises(ValidationFailed):
        holiday_service.create_holiday(c.id, {"name": "X", "date": "01-01-2024"})
    with pytest.raises(ValidationFailed):
        holiday_service.create_holiday(c.id, {"name": "X"})


def test_list_filters_by_year_and_pages(session):
    c = mk_company()
    mk_holiday(c, date(2024, 5, 1), "Día del Trabajo")
    mk_holiday(c, date(2024, 1, 1), "Año Nuevo", recurring=True)
    mk_holiday(c, date(2025, 1, 1), "Año Nuevo", recurring=True)

    items, total = holiday_service.list_holidays(c.id, year=2024)
    assert total == 2
    assert [h.name for h in items] == ["Año Nuevo", "Día del Trabajo"]

    items, total = holiday_service.list_holidays(c.id, is_recurring=True, page=2, limit=1)
    assert total == 2
    assert [h.date for h in items] == [date(2025, 1, 1)]


def test_update_and_delete_are_company_scoped(session):
    c = mk_company()
    other = mk_company(code="OTHER", name="Other")
    h = mk_holiday(c, date(2024, 1, 1), "Año Nuevo")
    mk_holiday(c, date(2024, 5, 1), "Día del Trabajo")

    with pytest.raises(Conflict):
        holiday_service.update_holiday(c.id, h.id, {"name": "Día del Trabajo"})
    with pytest.raises(NotFound):
        holiday_service.update_holiday(other.id, h.id, {"description": "x"})

    upd = holiday_service.update_holiday(c.id, h.id, {"description": "Primer día del año"})
    assert upd.description == "Primer día del año"

    holiday_service.delete_holiday(c.id, h.id)
    assert db_count(c.id) == 1


def db_count(company_id):
    return Holiday.query.filter_by(company_id=company_id).count()


def test_range_and_upcoming(session):
    c = mk_company()
    mk_holiday(c, date(2024, 1, 1), "Año Nuevo")
    mk_holiday(c, date(2024, 5, 1), "Día del Trabajo")
    mk_holiday(c, date(2024, 12, 25), "Navidad")

    rows = holiday_service.holidays_in_range(c.id, "2024-04-01", "2024-12-31")
    assert [h.name for h in rows] == ["Día del Trabajo", "Navidad"]
    with pytest.raises(ValidationFailed):
        holiday_service.holidays_in_range(c.id, "2024-12-31", "2024-01-01")

    up = holiday_service.upcoming_holidays(c.id, 1, today=date(2024, 5, 1))
    assert [h.name for h in up] == ["Día del Trabajo"]
    assert [h.name for h in holiday_service.holidays_by_year(c.id, 2024)] == [
        "Año Nuevo", "Día del Trabajo", "Navidad",
    ]


def test_generate_recurring_projects_and_is_repeatable(session):
    c = mk_company()
    mk_holiday(c, date(2024, 1, 1), "Año Nuevo", recurring=True, description="Feriado nacional")
    mk_holiday(c, date(2024, 5, 1), "Día del Trabajo")  # not recurring
    mk_holiday(c, date(2024, 2, 29), "Bisiesto", recurring=True)

    created = holiday_service.generate_recurring_holidays(c.id, 2025)
    assert [(h.name, h.date) for h in created] == [("Año Nuevo", date(2025, 1, 1))]
    assert created[0].description == "Feriado nacional"
    assert created[0].is_recurring is True

    # second run creates nothing
    assert holiday_service.generate_recurring_holidays(c.id, 2025) == []

    # leap year keeps Feb 29
    leap = holiday_service.generate_recurring_holidays(c.id, 2028)
    assert sorted(h.date for h in leap) == [date(2028, 1, 1), date(2028, 2, 29)]


def test_is_recurring_accepts_text_booleans(session):
    c = mk_company()
    h = holiday_service.create_holiday(c.id, {"name": "Año Nuevo", "date": "2024-01-01", "is_recurring": "false"})
    assert h.is_recurring is False

    assert holiday_service.update_holiday(c.id, h.id, {"is_recurring": "1"}).is_recurring is True
    with pytest.raises(ValidationFailed):
        holiday_service.update_holiday(c.id, h.id, {"is_recurring": "maybe"})
    with pytest.raises(ValidationFailed):
        holiday_service.create_holiday(c.id, {"name": "X", "date": "2024-02-01", "is_recurring": "si"})
