import os
from datetime import date, datetime, time

import pytest
from flask_jwt_extended import create_access_token

from workforce_api import create_app
from workforce_api.extensions import db
from workforce_api.models.attendance import Holiday, Schedule, SpecialDayAssignment, WorkShift
from workforce_api.models.employee import Employee
from workforce_api.models.master import Company, Department
from workforce_api.models.security import Role, UserRole
from workforce_api.models.time_entry import TimeEntry
from workforce_api.models.user import User

WEEKDAYS = (1, 2, 3, 4, 5)  # Mon..Fri, 0=Sunday


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()


@pytest.fixture(scope="function")
def session(app):
    yield db.session


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


# ---------- factories ----------

def mk_company(code="ACME", name="Acme SA"):
    c = Company(code=code, name=name)
    db.session.add(c)
    db.session.commit()
    return c


def mk_department(company, name="Operations"):
    d = Department(company_id=company.id, name=name)
    db.session.add(d)
    db.session.commit()
    return d


def mk_shift(company, name="Day", start=time(8, 0), end=time(16, 0), night=False, grace=0, active=True):
    ws = WorkShift(
        company_id=company.id, name=name, start_time=start, end_time=end,
        is_night_shift=night, grace_minutes=grace, is_active=active,
    )
    db.session.add(ws)
    db.session.commit()
    return ws


def mk_employee(company, first="Ana", last="Rojas", shift=None, days=WEEKDAYS, status="ACTIVE", department=None, n=None):
    n = n or (Employee.query.count() + 1)
    emp = Employee(
        company_id=company.id,
        department_id=department.id if department else None,
        first_name=first,
        last_name=last,
        email=f"{first.lower()}.{last.lower()}{n}@acme.test",
        id_number=f"ID-{n:04d}",
        status=status,
        date_joined=date(2023, 1, 2),
    )
    db.session.add(emp)
    db.session.flush()
    if shift is not None:
        for dow in range(7):
            work = dow in days
            db.session.add(Schedule(
                company_id=company.id, employee_id=emp.id, day_of_week=dow,
                is_work_day=work, work_shift_id=shift.id if work else None,
            ))
    db.session.commit()
    return emp


def mk_entry(employee, on, clock_in=None, clock_out=None):
    te = TimeEntry(
        company_id=employee.company_id, employee_id=employee.id, date=on,
        clock_in=clock_in, clock_out=clock_out,
    )
    db.session.add(te)
    db.session.commit()
    return te


def mk_holiday(company, on, name="Año Nuevo", recurring=False, description=None):
    h = Holiday(company_id=company.id, date=on, name=name, is_recurring=recurring, description=description)
    db.session.add(h)
    db.session.commit()
    return h


def mk_assignment(employee, on, kind="GUARD", mandatory=True, notes=None):
    a = SpecialDayAssignment(
        company_id=employee.company_id, employee_id=employee.id, date=on,
        type=kind, is_mandatory=mandatory, notes=notes,
    )
    db.session.add(a)
    db.session.commit()
    return a


def mk_user(company, email="admin@acme.test", password="secret", roles=("admin",), full_name="Admin"):
    u = User(company_id=company.id, email=email, full_name=full_name)
    u.set_password(password)
    db.session.add(u)
    db.session.flush()
    for code in roles:
        r = Role.query.filter_by(company_id=company.id, code=code).first()
        if not r:
            r = Role(company_id=company.id, code=code, name=code.title())
            db.session.add(r)
            db.session.flush()
        db.session.add(UserRole(user_id=u.id, role_id=r.id))
    db.session.commit()
    return u


def bearer(user, roles=None, company_id=None):
    claims = {
        "roles": list(roles if roles is not None else user.role_codes()),
        "company_id": company_id if company_id is not None else user.company_id,
        "email": user.email,
        "name": user.full_name,
    }
    token = create_access_token(identity=str(user.id), additional_claims=claims)
    return {"Authorization": f"Bearer {token}"}


def at(d, hh, mm=0):
    return datetime.combine(d, time(hh, mm))
