from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import backref, relationship

from dayflow.db.session import Base
from dayflow.payroll.models import SalaryProfile
from dayflow.payroll.profile import default_salary_profile

EMPLOYEE_STATUSES = ("active", "inactive", "terminated")


def _default_salary_info() -> dict:
    return default_salary_profile().to_dict()


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # personal details
    full_name = Column(String(200), nullable=False)
    phone = Column(String(40), nullable=True)
    address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    personal_email = Column(String(255), nullable=True)
    gender = Column(String(30), nullable=True)
    marital_status = Column(String(30), nullable=True)
    nationality = Column(String(100), nullable=True)
    about = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)

    # job details
    designation = Column(String(200), nullable=False, default="Not Assigned")
    department = Column(String(200), nullable=False, default="General", index=True)
    joining_date = Column(Date, nullable=False, default=lambda: datetime.utcnow().date())
    employment_type = Column(String(20), nullable=False, default="full-time")
    manager = Column(String(200), nullable=True)
    location = Column(String(200), nullable=True)

    status = Column(String(20), nullable=False, default="active", index=True)  # active|inactive|terminated

    # written only through dayflow.payroll.profile.apply_salary_update
    salary_info = Column(JSON, nullable=False, default=_default_salary_info)

    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", backref=backref("employee", uselist=False))

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def salary_profile(self) -> SalaryProfile:
        if not self.salary_info:
            return default_salary_profile()
        return SalaryProfile.from_dict(self.salary_info)
