from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Query, Session

from dayflow.core.config import settings
from dayflow.core.errors import NotFoundError, ValidationError
from dayflow.core.logging import get_logger
from dayflow.core.observability import payroll_writes
from dayflow.db.session import commit_or_conflict
from dayflow.domains.payroll.schemas import PayrollUpsert
from dayflow.models import Employee, Payroll
from dayflow.models.payroll import zero_allowances, zero_deductions
from dayflow.payroll.calculator import net_salary, to_decimal

logger = get_logger(__name__)


def recompute_net_salary(record: Payroll) -> Payroll:
    record.net_salary = net_salary(record.basic_salary, record.allowances or {}, record.deductions or {})
    return record


def create_or_update_payroll(db: Session, fields: PayrollUpsert) -> tuple[Payroll, bool]:
    """Create the employee's payroll record or merge ``fields`` into it.

    Returns the saved record and whether it was created.
    """
    if db.get(Employee, fields.employee_id) is None:
        raise NotFoundError("Employee not found")

    supplied = fields.model_dump(exclude_unset=True, exclude_none=True, exclude={"employee_id"})
    payroll = db.query(Payroll).filter(Payroll.employee_id == fields.employee_id).one_or_none()
    created = payroll is None

    if created:
        if "basic_salary" not in supplied:
            raise ValidationError("Basic salary is required")
        payroll = Payroll(
            employee_id=fields.employee_id,
            basic_salary=to_decimal(supplied["basic_salary"]),
            allowances={**zero_allowances(), **supplied.get("allowances", {})},
            deductions={**zero_deductions(), **supplied.get("deductions", {})},
            effective_from=supplied.get("effective_from") or datetime.utcnow().date(),
            currency=(supplied.get("currency") or settings.default_currency).upper(),
        )
        db.add(payroll)
    else:
        if "basic_salary" in supplied:
            payroll.basic_salary = to_decimal(supplied["basic_salary"])
        if "allowances" in supplied:
            payroll.allowances = {**(payroll.allowances or {}), **supplied["allowances"]}
        if "deductions" in supplied:
            payroll.deductions = {**(payroll.deductions or {}), **supplied["deductions"]}
        if "effective_from" in supplied:
            payroll.effective_from = supplied["effective_from"]
        if "currency" in supplied:
            payroll.currency = supplied["currency"].upper()

    recompute_net_salary(payroll)
    commit_or_conflict(db, "Payroll for this employee was modified concurrently, reload and retry")
    db.refresh(payroll)

    payroll_writes.add(1, {"operation": "create" if created else "update"})
    logger.info(
        "payroll_created" if created else "payroll_updated",
        employee_id=payroll.employee_id,
        payroll_id=payroll.id,
        net_salary=float(payroll.net_salary),
        fields=sorted(supplied),
    )
    return payroll, created


def get_payroll_by_employee(db: Session, employee_id: int) -> Payroll:
    payroll = db.query(Payroll).filter(Payroll.employee_id == employee_id).one_or_none()
    if payroll is None:
        raise NotFoundError("Payroll information not found")
    return payroll


def list_payrolls(db: Session) -> Query:
    return db.query(Payroll).order_by(Payroll.created_at.desc(), Payroll.id.desc())


def delete_payroll(db: Session, payroll_id: int) -> None:
    payroll = db.get(Payroll, payroll_id)
    if payroll is None:
        raise NotFoundError("Payroll not found")
    db.delete(payroll)
    db.commit()
    logger.info("payroll_deleted", payroll_id=payroll_id, employee_id=payroll.employee_id)
