from datetime import datetime
from workforce_api.extensions import db

def _hhmm(t):
    return t.strftime("%H:%M") if t else None

class Holiday(db.Model):
    __tablename__ = "holidays"
    id = db.Column(db.Integer, primary_key=True)
    company_id   = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    date         = db.Column(db.Date, nullable=False)
    name         = db.Column(db.String(120), nullable=False)
    description  = db.Column(db.String(255), nullable=True)
    is_recurring = db.Column(db.Boolean, nullable=False, default=False)
    created_at   = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    __table_args__ = (
        db.UniqueConstraint("company_id", "date", "name", name="uq_holiday_company_date_name"),
        db.Index("ix_holiday_company_date", "company_id", "date"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "company_id": self.company_id,
            "name": self.name,
            "date": self.date.isoformat(),
            "description": self.description,
            "is_recurring": bool(self.is_recurring),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class WorkShift(db.Model):
    __tablename__ = "work_shifts"
    id = db.Column(db.Integer, primary_key=True)
    company_id     = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    name           = db.Column(db.String(60), nullable=False)
    description    = db.Column(db.String(255), nullable=True)
    start_time     = db.Column(db.Time, nullable=False)
    end_time       = db.Column(db.Time, nullable=False)   # may be < start_time when is_night_shift
    grace_minutes  = db.Column(db.Integer, nullable=False, default=0)
    is_night_shift = db.Column(db.Boolean, nullable=False, default=False)
    is_active      = db.Column(db.Boolean, nullable=False, default=True)
    created_at     = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    __table_args__ = (
        db.UniqueConstraint("company_id", "name", name="uq_work_shift_company_name"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "company_id": self.company_id,
            "name": self.name,
            "description": self.description,
            "start_time": _hhmm(self.start_time),
            "end_time": _hhmm(self.end_time),
            "grace_minutes": int(self.grace_minutes or 0),
            "is_night_shift": bool(self.is_night_shift),
            "is_active": bool(self.is_active),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class Schedule(db.Model):
    __tablename__ = "schedules"
    id = db.Column(db.Integer, primary_key=True)
    company_id    = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    employee_id   = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week   = db.Column(db.SmallInteger, nullable=False)  # 0=Sun .. 6=Sat
    is_work_day   = db.Column(db.Boolean, nullable=False, default=False)
    work_shift_id = db.Column(db.Integer, db.ForeignKey("work_shifts.id", ondelete="RESTRICT"), nullable=True, index=True)
    __table_args__ = (
        db.UniqueConstraint("employee_id", "day_of_week", name="uq_schedule_employee_day"),
        db.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_schedule_day_of_week"),
    )

    employee   = db.relationship("Employee", back_populates="schedules")
    work_shift = db.relationship("WorkShift", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "day_of_week": self.day_of_week,
            "is_work_day": bool(self.is_work_day),
            "work_shift_id": self.work_shift_id,
            "work_shift": self.work_shift.to_dict() if self.work_shift else None,
        }

SPECIAL_DAY_TYPES = ("GUARD", "HOLIDAY", "WEEKEND", "EMERGENCY", "OVERTIME")

# An employee called in for one specific calendar day (guard duty, holiday cover, ...)
class SpecialDayAssignment(db.Model):
    __tablename__ = "special_day_assignments"
    id = db.Column(db.Integer, primary_key=True)
    company_id   = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    employee_id  = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    date         = db.Column(db.Date, nullable=False)
    type         = db.Column(db.String(20), nullable=False)
    is_mandatory = db.Column(db.Boolean, nullable=False, default=True)
    notes        = db.Column(db.String(255), nullable=True)
    created_at   = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    __table_args__ = (
        db.UniqueConstraint("employee_id", "date", name="uq_special_day_employee_date"),
        db.Index("ix_special_day_company_date", "company_id", "date"),
    )

    employee = db.relationship("Employee", lazy="joined")

    def to_dict(self):
        emp = self.employee
        return {
            "id": self.id,
            "company_id": self.company_id,
            "employee_id": self.employee_id,
            "employee": {
                "id": emp.id,
                "first_name": emp.first_name,
                "last_name": emp.last_name,
                "email": emp.email,
                "department": emp.department.name if emp.department else None,
            } if emp else None,
            "date": self.date.isoformat(),
            "type": self.type,
            "is_mandatory": bool(self.is_mandatory),
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
