from datetime import datetime
from workforce_api.extensions import db

EMPLOYEE_STATUSES = ("ACTIVE", "INACTIVE", "SUSPENDED")

class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    company_id    = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)

    first_name = db.Column(db.String(80), nullable=False)
    last_name  = db.Column(db.String(80), nullable=False)
    email      = db.Column(db.String(255), nullable=False)   # unique per company
    id_number  = db.Column(db.String(32), nullable=False)    # unique per company
    phone      = db.Column(db.String(20), nullable=True)

    date_joined = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(16), default="ACTIVE", nullable=False)  # ACTIVE/INACTIVE/SUSPENDED

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("company_id", "email", name="uq_employee_company_email"),
        db.UniqueConstraint("company_id", "id_number", name="uq_employee_company_id_number"),
        db.Index("ix_emp_company_status", "company_id", "status"),
        db.Index("ix_emp_dept_id", "department_id"),
    )

    department = db.relationship("Department", lazy="joined")
    schedules  = db.relationship(
        "Schedule",
        back_populates="employee",
        order_by="Schedule.day_of_week",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self):
        return {
            "id": self.id,
            "company_id": self.company_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "id_number": self.id_number,
            "phone": self.phone,
            "department_id": self.department_id,
            "department": self.department.name if self.department else None,
            "status": self.status,
            "date_joined": self.date_joined.isoformat() if self.date_joined else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
