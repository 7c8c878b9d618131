from datetime import time
from types import SimpleNamespace

import pytest

from workforce_api.common.errors import Conflict, ValidationFailed
from workforce_api.services import work_shift_service as svc

from conftest import mk_company, mk_employee, mk_shift


def test_duration_with_and_without_wraparound():
    assert svc.shift_duration_minutes("08:00", "16:30", False) == 510
    assert svc.shift_duration_minutes("22:00", "06:00", True) == 480
    assert svc.shift_duration_minutes("bad", "06:00", True) == 0


def test_is_time_in_shift():
    day = SimpleNamespace(start_time=time(8, 0), end_time=time(16, 0), is_night_shift=False)
    night = SimpleNamespace(start_time=time(22, 0), end_time=time(6, 0), is_night_shift=True)
    assert svc.is_time_in_shift("08:00", day)
    assert svc.is_time_in_shift("16:00", day)
    assert not svc.is_time_in_shift("16:01", day)
    assert svc.is_time_in_shift("23:30", night)
    assert svc.is_time_in_shift("05:59", night)
    assert not svc.is_time_in_shift("12:00", night)
    assert not svc.is_time_in_shift("25:00", day)


def test_create_validates_times_and_names(session):
    c = mk_company()
    ws = svc.create_work_shift(c.id, {"name": "Mañana", "start_time": "08:00", "end_time": "16:00", "grace_minutes": 5})
    assert ws.to_dict()["start_time"] == "08:00"
    assert ws.grace_minutes == 5

    with pytest.raises(Conflict):
        svc.create_work_shift(c.id, {"name": "Mañana", "start_time": "09:00", "end_time": "17:00"})
    with pytest.raises(ValidationFailed):
        svc.create_work_shift(c.id, {"name": "Tarde", "start_time": "16:00", "end_time": "08:00"})
    with pytest.raises(ValidationFailed):
        svc.create_work_shift(c.id, {"name": "Tarde", "start_time": "8", "end_time": "16:00"})
    with pytest.raises(ValidationFailed):
        svc.create_work_shift(c.id, {"name": "Tarde", "start_time": "08:00", "end_time": "16:00", "grace_minutes": -1})

    night = svc.create_work_shift(c.id, {"name": "Noche", "start_time": "22:00", "end_time": "06:00", "is_night_shift": True})
    assert night.is_night_shift is True


def test_update_rechecks_order(session):
    c = mk_company()
    ws = mk_shift(c, "Noche", time(22, 0), time(6, 0), night=True)
    with pytest.raises(ValidationFailed):
        svc.update_work_shift(c.id, ws.id, {"is_night_shift": False})
    upd = svc.update_work_shift(c.id, ws.id, {"end_time": "23:30", "is_night_shift": False})
    assert (upd.end_time, upd.is_night_shift) == (time(23, 30), False)


def test_list_stats_and_employee_counts(session):
    c = mk_company()
    day = mk_shift(c, "Día")
    mk_shift(c, "Noche", time(22, 0), time(6, 0), night=True)
    mk_shift(c, "Viejo", active=False)
    mk_employee(c, "Ana", "Rojas", shift=day)
    mk_employee(c, "Ben", "Soto", shift=day)

    items, total, stats = svc.list_work_shifts(c.id)
    assert total == 3
    assert stats == {"total": 3, "active": 2, "inactive": 1, "day_shifts": 1, "night_shifts": 1}
    assert svc.employee_counts([s.id for s in items]) == {day.id: 2}

    items, total, stats = svc.list_work_shifts(c.id, page=2, limit=1)
    assert [s.name for s in items] == ["Noche"]
    assert total == 3
    # counts span every matching shift, not the single row on this page
    assert stats == {"total": 3, "active": 2, "inactive": 1, "day_shifts": 1, "night_shifts": 1}

    items, total, stats = svc.list_work_shifts(c.id, is_active=False)
    assert [s.name for s in items] == ["Viejo"]
    assert stats == {"total": 1, "active": 0, "inactive": 1, "day_shifts": 0, "night_shifts": 0}

    assert svc.shift_stats(c.id) == {"total": 3, "active": 2, "inactive": 1, "night_shifts": 1}


def test_delete_blocked_while_scheduled(session):
    c = mk_company()
    used = mk_shift(c, "Día")
    free = mk_shift(c, "Libre")
    mk_employee(c, "Ana", "Rojas", shift=used)

    with pytest.raises(Conflict):
        svc.delete_work_shift(c.id, used.id)
    svc.delete_work_shift(c.id, free.id)
    assert svc.shift_stats(c.id)["total"] == 1


def test_flags_parse_text_booleans(session):
    c = mk_company()
    ws = svc.create_work_shift(c.id, {
        "name": "Tarde", "start_time": "14:00", "end_time": "22:00",
        "is_night_shift": "false", "is_active": "no",
    })
    assert (ws.is_night_shift, ws.is_active) == (False, False)

    upd = svc.update_work_shift(c.id, ws.id, {"is_active": "true"})
    assert upd.is_active is True
    upd = svc.update_work_shift(c.id, ws.id, {"is_active": 0})
    assert upd.is_active is False

    with pytest.raises(ValidationFailed):
        svc.create_work_shift(c.id, {"name": "Otra", "start_time": "08:00", "end_time": "16:00", "is_active": "maybe"})
    with pytest.raises(ValidationFailed):
        svc.update_work_shift(c.id, ws.id, {"name": "Renombrado", "is_night_shift": "sometimes"})
    assert svc.get_work_shift(c.id, ws.id).name == "Tarde"
