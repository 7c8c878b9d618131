from datetime import date

import pytest

from workforce_api.common.errors import Conflict, NotFound, ValidationFailed
from workforce_api.services import employee_service
from workforce_api.services import special_assignment_service as svc

from conftest import mk_assignment, mk_company, mk_department, mk_employee


def test_create_validates_and_defaults(session):
    c = mk_company()
    ops = mk_department(c)
    emp = mk_employee(c, department=ops)

    row = svc.create_assignment(c.id, {"employee_id": emp.id, "date": "2024-01-06", "type": "guard", "notes": " Turno "})
    assert (row.type, row.is_mandatory, row.notes) == ("GUARD", True, "Turno")
    d = row.to_dict()
    assert d["employee"]["department"] == "Operations"
    assert d["date"] == "2024-01-06"

    with pytest.raises(Conflict):
        svc.create_assignment(c.id, {"employee_id": emp.id, "date": "2024-01-06", "type": "OVERTIME"})
    with pytest.raises(ValidationFailed):
        svc.create_assignment(c.id, {"employee_id": emp.id, "date": "2024-01-07", "type": "PICNIC"})
    with pytest.raises(ValidationFailed):
        svc.create_assignment(c.id, {"employee_id": emp.id, "date": "07/01/2024", "type": "GUARD"})
    with pytest.raises(ValidationFailed):
        svc.create_assignment(c.id, {"date": "2024-01-07", "type": "GUARD"})
    with pytest.raises(ValidationFailed):
        svc.create_assignment(c.id, {"employee_id": emp.id, "date": "2024-01-07", "type": "GUARD", "is_mandatory": "perhaps"})

    optional = svc.create_assignment(c.id, {"employee_id": emp.id, "date": "2024-01-07", "type": "WEEKEND", "is_mandatory": "false"})
    assert optional.is_mandatory is False


def test_employee_must_belong_to_company(session):
    c = mk_company()
    other = mk_company(code="OTHER", name="Other")
    outsider = mk_employee(other, "Otto", "Ajeno")
    with pytest.raises(NotFound):
        svc.create_assignment(c.id, {"employee_id": outsider.id, "date": "2024-01-06", "type": "GUARD"})

    a = mk_assignment(outsider, date(2024, 1, 6))
    with pytest.raises(NotFound):
        svc.get_assignment(c.id, a.id)
    with pytest.raises(NotFound):
        svc.delete_assignment(c.id, a.id)


def test_list_filters_and_orders_newest_first(session):
    c = mk_company()
    ana = mk_employee(c, "Ana", "Rojas")
    ben = mk_employee(c, "Ben", "Soto")
    mk_assignment(ana, date(2024, 1, 6), "GUARD")
    mk_assignment(ana, date(2024, 2, 3), "OVERTIME")
    mk_assignment(ben, date(2024, 1, 13), "GUARD")

    items, total = svc.list_assignments(c.id)
    assert total == 3
    assert [a.date for a in items] == [date(2024, 2, 3), date(2024, 1, 13), date(2024, 1, 6)]

    items, total = svc.list_assignments(c.id, employee_id=ana.id, assignment_type="guard")
    assert [a.date for a in items] == [date(2024, 1, 6)]

    items, total = svc.list_assignments(c.id, start_date="2024-01-01", end_date="2024-01-31", limit=1, page=2)
    assert total == 2
    assert [a.date for a in items] == [date(2024, 1, 6)]

    # one bound alone does not filter
    assert svc.list_assignments(c.id, start_date="2024-02-01")[1] == 3

    assert [a.date for a in svc.assignments_for_employee(c.id, ana.id)] == [date(2024, 2, 3), date(2024, 1, 6)]
    rng = svc.assignments_in_range(c.id, "2024-01-01", "2024-01-31")
    assert [a.date for a in rng] == [date(2024, 1, 6), date(2024, 1, 13)]
    with pytest.raises(ValidationFailed):
        svc.assignments_in_range(c.id, "2024-02-01", "2024-01-01")


def test_update_checks_duplicates_and_applies_fields(session):
    c = mk_company()
    ana = mk_employee(c, "Ana", "Rojas")
    ben = mk_employee(c, "Ben", "Soto")
    a = mk_assignment(ana, date(2024, 1, 6))
    mk_assignment(ben, date(2024, 1, 6))

    with pytest.raises(Conflict):
        svc.update_assignment(c.id, a.id, {"employee_id": ben.id})
    with pytest.raises(ValidationFailed):
        svc.update_assignment(c.id, a.id, {"type": "NAP", "notes": "x"})
    assert svc.get_assignment(c.id, a.id).notes is None

    upd = svc.update_assignment(c.id, a.id, {"date": "2024-01-07", "type": "EMERGENCY", "is_mandatory": False, "notes": "Corte de luz"})
    assert (upd.date, upd.type, upd.is_mandatory, upd.notes) == (date(2024, 1, 7), "EMERGENCY", False, "Corte de luz")

    svc.delete_assignment(c.id, a.id)
    assert svc.list_assignments(c.id)[1] == 1


def test_deleting_employee_removes_assignments(session):
    c = mk_company()
    emp = mk_employee(c)
    mk_assignment(emp, date(2024, 1, 6))
    employee_service.delete_employee(c.id, emp.id)
    assert svc.list_assignments(c.id)[1] == 0
