from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from dayflow.core.pagination import Page, PageParams, page_params, paginate
from dayflow.core.permissions import ADMIN_ROLES, ELEVATED_ROLES
from dayflow.core.security import Principal, get_principal, require_roles
from dayflow.db.session import get_session
from dayflow.domains.payroll import service
from dayflow.domains.payroll.schemas import PayrollOut, PayrollUpsert
from dayflow.models.payroll import Payroll

router = APIRouter(prefix="/payroll", tags=["payroll"])


def payroll_out(row: Payroll) -> PayrollOut:
    return PayrollOut(
        id=row.id,
        employee_id=row.employee_id,
        employee_name=row.employee.full_name if row.employee else None,
        basic_salary=float(row.basic_salary),
        allowances={k: float(v) for k, v in (row.allowances or {}).items()},
        deductions={k: float(v) for k, v in (row.deductions or {}).items()},
        net_salary=float(row.net_salary),
        effective_from=row.effective_from,
        currency=row.currency,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


@router.get("", response_model=Page[PayrollOut])
def list_payrolls(
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
):
    return paginate(service.list_payrolls(db), params, payroll_out)


@router.post("", response_model=PayrollOut, responses={201: {"model": PayrollOut}})
def create_or_update_payroll(
    payload: PayrollUpsert,
    response: Response,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> PayrollOut:
    payroll, created = service.create_or_update_payroll(db, payload)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return payroll_out(payroll)


@router.get("/me", response_model=PayrollOut)
def get_my_payroll(
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
) -> PayrollOut:
    return payroll_out(service.get_payroll_by_employee(db, principal.require_employee()))


@router.get("/employee/{employee_id}", response_model=PayrollOut)
def get_payroll_by_employee(
    employee_id: int,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> PayrollOut:
    return payroll_out(service.get_payroll_by_employee(db, employee_id))


@router.delete("/{payroll_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payroll(
    payroll_id: int,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ADMIN_ROLES)),
):
    service.delete_payroll(db, payroll_id)
    return None
