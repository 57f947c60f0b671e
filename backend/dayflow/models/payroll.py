from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from dayflow.db.session import Base

ALLOWANCE_KEYS = ("hra", "transport", "medical", "other")
DEDUCTION_KEYS = ("tax", "provident_fund", "other")


def zero_allowances() -> dict:
    return {key: 0.0 for key in ALLOWANCE_KEYS}


def zero_deductions() -> dict:
    return {key: 0.0 for key in DEDUCTION_KEYS}


class Payroll(Base):
    __tablename__ = "payrolls"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), unique=True, nullable=False)
    basic_salary = Column(Numeric(12, 2), nullable=False)
    allowances = Column(JSON, nullable=False, default=zero_allowances)
    deductions = Column(JSON, nullable=False, default=zero_deductions)
    net_salary = Column(Numeric(12, 2), nullable=False)
    effective_from = Column(Date, nullable=False, default=lambda: datetime.utcnow().date())
    currency = Column(String(3), nullable=False, default="INR")

    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee")

    __mapper_args__ = {"version_id_col": version_id}
