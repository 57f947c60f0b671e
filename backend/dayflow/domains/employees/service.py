from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from sqlalchemy.orm import Query, Session

from dayflow.core.config import settings
from dayflow.core.errors import NotFoundError, ValidationError
from dayflow.core.logging import get_logger
from dayflow.core.observability import salary_recomputes
from dayflow.core.permissions import authorize_fields, field_paths
from dayflow.db.session import commit_or_conflict
from dayflow.domains.employees.schemas import EmployeeCreate, EmployeeUpdate, SalaryProfileUpdate
from dayflow.domains.users.service import create_user
from dayflow.models import Attendance, Employee, Leave, Payroll, User
from dayflow.payroll.components import STATUTORY_COMPONENTS
from dayflow.payroll.models import ComponentOverride, SalaryProfile, SalaryUpdate
from dayflow.payroll.profile import apply_salary_update, default_salary_profile

logger = get_logger(__name__)

DETAIL_SECTIONS = ("personal_details", "job_details")
REQUIRED_FIELDS = {"full_name", "designation", "department", "joining_date", "employment_type"}


def _apply_details(employee: Employee, values: Dict[str, Any]) -> None:
    for field, value in values.items():
        if value is None and field in REQUIRED_FIELDS:
            raise ValidationError(f"{field} cannot be empty")
        if field == "skills" and value is None:
            value = []
        setattr(employee, field, value)


def get_employee(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def list_employees(db: Session, department: str | None = None, status: str | None = None) -> Query:
    query = db.query(Employee)
    if department:
        query = query.filter(Employee.department == department)
    if status:
        query = query.filter(Employee.status == status)
    return query.order_by(Employee.created_at.desc(), Employee.id.desc())


def create_employee(db: Session, payload: EmployeeCreate) -> Employee:
    personal = payload.personal_details.model_dump(exclude_none=True)
    job = payload.job_details.model_dump(exclude_none=True)
    job.setdefault("joining_date", datetime.utcnow().date())

    user = create_user(
        db,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        full_name=personal["full_name"],
        company_name=settings.company_name,
        joining_year=job["joining_date"].year,
        employee_code=payload.employee_code,
    )
    employee = Employee(user_id=user.id, salary_info=default_salary_profile().to_dict())
    _apply_details(employee, personal)
    _apply_details(employee, job)
    db.add(employee)
    commit_or_conflict(db, "User with this email or employee code already exists")
    db.refresh(employee)

    logger.info("employee_created", employee_id=employee.id, login_id=user.login_id)
    return employee


def update_employee(db: Session, employee_id: int, payload: EmployeeUpdate, role: str) -> Employee:
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    authorize_fields(role, field_paths(changes))

    employee = get_employee(db, employee_id)
    for section in DETAIL_SECTIONS:
        _apply_details(employee, changes.get(section) or {})
    commit_or_conflict(db, "Employee was modified concurrently, reload and retry")
    db.refresh(employee)

    logger.info("employee_updated", employee_id=employee.id, fields=field_paths(changes))
    return employee


def update_status(db: Session, employee_id: int, status: str, role: str) -> Employee:
    authorize_fields(role, ["status"])
    employee = get_employee(db, employee_id)
    employee.status = status
    commit_or_conflict(db, "Employee was modified concurrently, reload and retry")
    db.refresh(employee)
    logger.info("employee_status_changed", employee_id=employee.id, status=status)
    return employee


def delete_employee(db: Session, employee_id: int) -> None:
    employee = get_employee(db, employee_id)
    user_id = employee.user_id

    db.query(Payroll).filter(Payroll.employee_id == employee_id).delete(synchronize_session=False)
    db.query(Attendance).filter(Attendance.employee_id == employee_id).delete(synchronize_session=False)
    db.query(Leave).filter(Leave.employee_id == employee_id).delete(synchronize_session=False)
    db.query(Leave).filter(Leave.reviewed_by == user_id).update(
        {Leave.reviewed_by: None}, synchronize_session=False
    )
    db.delete(employee)
    db.flush()
    user = db.get(User, user_id)
    if user is not None:
        db.delete(user)
    db.commit()
    logger.info("employee_deleted", employee_id=employee_id, user_id=user_id)


def get_salary_profile(db: Session, employee_id: int) -> SalaryProfile:
    return get_employee(db, employee_id).salary_profile


def _to_salary_update(changes: Dict[str, Any]) -> SalaryUpdate:
    overrides = {
        name: ComponentOverride(**values)
        for name, values in (changes.get("salary_components") or {}).items()
    }
    for name in STATUTORY_COMPONENTS:
        if name in changes:
            overrides[name] = ComponentOverride(**changes[name])
    return SalaryUpdate(
        month_wage=changes.get("month_wage"),
        working_days=changes.get("working_days"),
        break_time=changes.get("break_time"),
        overrides=overrides,
    )


def update_salary_profile(db: Session, employee_id: int, payload: SalaryProfileUpdate, role: str) -> SalaryProfile:
    """Apply a salary change to an employee.

    A ``month_wage`` in the payload recomputes every component from the wage
    table; otherwise the supplied fields are merged as given and survive until
    the next wage change.
    """
    changes = payload.model_dump(exclude_none=True)
    authorize_fields(role, [f"salary_info.{path}" for path in field_paths(changes, depth=1)])

    employee = get_employee(db, employee_id)
    try:
        profile = apply_salary_update(employee.salary_profile, _to_salary_update(changes))
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    employee.salary_info = profile.to_dict()
    commit_or_conflict(db, "Salary profile was modified concurrently, reload and retry")
    db.refresh(employee)

    recomputed = payload.month_wage is not None
    if recomputed:
        salary_recomputes.add(1)
    logger.info(
        "salary_profile_updated",
        employee_id=employee_id,
        recomputed=recomputed,
        fields=sorted(changes),
    )
    return employee.salary_profile
