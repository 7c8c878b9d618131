from datetime import datetime

from workforce_api.extensions import db


class TimeEntry(db.Model):
    """
    One clock-in / clock-out pair for an employee on a calendar day.

    `date` is the work day the entry belongs to; `clock_in` / `clock_out` are
    naive UTC instants. At most one row per (employee_id, date) is kept by the
    create/update path, not by a DB constraint.
    """

    __tablename__ = "time_entries"

    id          = db.Column(db.Integer, primary_key=True)
    company_id  = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)
    date        = db.Column(db.Date, nullable=False)
    clock_in    = db.Column(db.DateTime, nullable=True)
    clock_out   = db.Column(db.DateTime, nullable=True)
    created_at  = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_time_entry_company_date", "company_id", "date"),
        db.Index("ix_time_entry_employee_date", "employee_id", "date"),
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
            "clock_in": self.clock_in.isoformat() if self.clock_in else None,
            "clock_out": self.clock_out.isoformat() if self.clock_out else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
