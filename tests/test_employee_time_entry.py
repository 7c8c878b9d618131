from datetime import date, datetime

import pytest

from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.services import employee_service, time_entry_service

from conftest import at, mk_company, mk_department, mk_employee, mk_entry

DAY = date(2024, 1, 2)


def _payload(**kw):
    data = {"first_name": "Ana", "last_name": "Rojas", "email": "ANA@acme.test", "id_number": "12.345.678-9"}
    data.update(kw)
    return data


# ---------- employees ----------

def test_create_employee_normalizes_and_rejects_duplicates(session):
    c = mk_company()
    emp = employee_service.create_employee(c.id, _payload())
    assert emp.email == "ana@acme.test"
    assert emp.status == "ACTIVE"
    assert emp.date_joined is not None

    with pytest.raises(Conflict):
        employee_service.create_employee(c.id, _payload(id_number="other"))
    with pytest.raises(Conflict):
        employee_service.create_employee(c.id, _payload(email="other@acme.test"))
    with pytest.raises(ValidationFailed) as ex:
        employee_service.create_employee(c.id, {"first_name": "X"})
    assert ex.value.payload == {"fields": ["last_name", "email", "id_number"]}


def test_create_employee_checks_department_company(session):
    c = mk_company()
    other = mk_company(code="OTHER", name="Other")
    foreign = mk_department(other)
    with pytest.raises(NotFound):
        employee_service.create_employee(c.id, _payload(department_id=foreign.id))


def test_list_employees_search_and_stats(session):
    c = mk_company()
    dept = mk_department(c)
    mk_employee(c, "Ana", "Rojas", department=dept)
    mk_employee(c, "Ben", "Soto", status="INACTIVE")
    mk_employee(c, "Ciro", "Luna", status="SUSPENDED")

    items, total, stats = employee_service.list_employees(c.id, search="soto")
    assert total == 1 and items[0].first_name == "Ben"
    assert stats == {"total": 3, "active": 1, "inactive": 1, "suspended": 1}

    items, total, _ = employee_service.list_employees(c.id, department_id=dept.id)
    assert [e.first_name for e in items] == ["Ana"]

    with pytest.raises(ValidationFailed):
        employee_service.list_employees(c.id, status="RETIRED")


def test_update_employee(session):
    c = mk_company()
    a = mk_employee(c, "Ana", "Rojas")
    b = mk_employee(c, "Ben", "Soto")

    with pytest.raises(Conflict):
        employee_service.update_employee(c.id, a.id, {"email": b.email})
    with pytest.raises(ValidationFailed):
        employee_service.update_employee(c.id, a.id, {"status": "GONE"})

    upd = employee_service.update_employee(c.id, a.id, {"status": "inactive", "phone": " 555 "})
    assert (upd.status, upd.phone) == ("INACTIVE", "555")


def test_delete_employee_guarded_by_time_entries(session):
    c = mk_company()
    a = mk_employee(c, "Ana", "Rojas")
    b = mk_employee(c, "Ben", "Soto")
    mk_entry(a, DAY, at(DAY, 8))

    with pytest.raises(Conflict):
        employee_service.delete_employee(c.id, a.id)
    employee_service.delete_employee(c.id, b.id)
    with pytest.raises(NotFound):
        employee_service.get_employee(c.id, b.id)


# ---------- time entries ----------

def test_create_time_entry(session):
    c = mk_company()
    emp = mk_employee(c)
    te = time_entry_service.create_time_entry(c.id, {
        "employee_id": emp.id,
        "date": "2024-01-02",
        "clock_in": "2024-01-02T11:05:00Z",
        "clock_out": "2024-01-02T15:00:00-03:00",
    })
    assert te.clock_in == datetime(2024, 1, 2, 11, 5)
    assert te.clock_out == datetime(2024, 1, 2, 18, 0)
    assert te.to_dict()["employee"]["first_name"] == "Ana"

    with pytest.raises(Conflict):
        time_entry_service.create_time_entry(c.id, {"employee_id": emp.id, "date": "2024-01-02"})


def test_create_time_entry_validation(session):
    c = mk_company()
    other = mk_company(code="OTHER", name="Other")
    emp = mk_employee(c)
    foreign = mk_employee(other, "Zoe", "Paz")

    with pytest.raises(NotFound):
        time_entry_service.create_time_entry(c.id, {"employee_id": foreign.id, "date": "2024-01-02"})
    with pytest.raises(ValidationFailed):
        time_entry_service.create_time_entry(c.id, {"employee_id": emp.id})
    with pytest.raises(ValidationFailed):
        time_entry_service.create_time_entry(c.id, {
            "employee_id": emp.id, "date": "2024-01-02",
            "clock_in": "2024-01-02T17:00:00", "clock_out": "2024-01-02T08:00:00",
        })


def test_update_time_entry_rechecks_date(session):
    c = mk_company()
    emp = mk_employee(c)
    first = mk_entry(emp, DAY, at(DAY, 8))
    mk_entry(emp, date(2024, 1, 3), at(date(2024, 1, 3), 8))

    with pytest.raises(Conflict):
        time_entry_service.update_time_entry(c.id, first.id, {"date": "2024-01-03"})
    with pytest.raises(ValidationFailed):
        time_entry_service.update_time_entry(c.id, first.id, {"clock_out": "2024-01-02T07:00:00"})
    assert first.clock_out is None

    upd = time_entry_service.update_time_entry(c.id, first.id, {"clock_out": "2024-01-02T16:00:00"})
    assert upd.clock_out == at(DAY, 16)


def test_list_time_entries_filters(session):
    c = mk_company()
    a = mk_employee(c, "Ana", "Rojas")
    b = mk_employee(c, "Ben", "Soto")
    mk_entry(a, date(2024, 1, 2), at(date(2024, 1, 2), 8))
    mk_entry(a, date(2024, 1, 5), at(date(2024, 1, 5), 8))
    mk_entry(b, date(2024, 1, 5), at(date(2024, 1, 5), 9))

    items, total = time_entry_service.list_time_entries(c.id, employee_id=a.id)
    assert total == 2
    assert [t.date for t in items] == [date(2024, 1, 5), date(2024, 1, 2)]

    items, total = time_entry_service.list_time_entries(c.id, start_date="2024-01-03", end_date="2024-01-31")
    assert total == 2

    time_entry_service.delete_time_entry(c.id, items[0].id)
    assert time_entry_service.list_time_entries(c.id)[1] == 2
