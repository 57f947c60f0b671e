from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dayflow.core.pagination import Page, PageParams, page_params, paginate
from dayflow.core.permissions import ADMIN_ROLES, ELEVATED_ROLES
from dayflow.core.security import Principal, get_principal, require_roles
from dayflow.db.session import get_session
from dayflow.domains.employees import service
from dayflow.domains.employees.schemas import (
    EmployeeCreate,
    EmployeeOut,
    EmployeeStatus,
    EmployeeUpdate,
    JobDetailsOut,
    PersonalDetailsOut,
    SalaryInfoOut,
    SalaryProfileUpdate,
    StatusUpdate,
)
from dayflow.models.employee import Employee
from dayflow.payroll.models import SalaryProfile

router = APIRouter(prefix="/employees", tags=["employees"])


def salary_out(profile: SalaryProfile) -> SalaryInfoOut:
    return SalaryInfoOut.model_validate(profile.to_dict())


def employee_out(employee: Employee) -> EmployeeOut:
    user = employee.user
    return EmployeeOut(
        id=employee.id,
        user_id=employee.user_id,
        login_id=user.login_id,
        employee_code=user.employee_code,
        email=user.email,
        role=user.role,
        status=employee.status,
        personal_details=PersonalDetailsOut(
            full_name=employee.full_name,
            phone=employee.phone,
            address=employee.address,
            date_of_birth=employee.date_of_birth,
            personal_email=employee.personal_email,
            gender=employee.gender,
            marital_status=employee.marital_status,
            nationality=employee.nationality,
            about=employee.about,
            skills=employee.skills or [],
        ),
        job_details=JobDetailsOut(
            designation=employee.designation,
            department=employee.department,
            joining_date=employee.joining_date,
            employment_type=employee.employment_type,
            manager=employee.manager,
            location=employee.location,
        ),
        salary_info=salary_out(employee.salary_profile),
        created_at=employee.created_at,
    )


@router.get("/me", response_model=EmployeeOut)
def get_my_profile(
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
) -> EmployeeOut:
    return employee_out(service.get_employee(db, principal.require_employee()))


@router.put("/me", response_model=EmployeeOut)
def update_my_profile(
    payload: EmployeeUpdate,
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
) -> EmployeeOut:
    employee = service.update_employee(db, principal.require_employee(), payload, principal.role)
    return employee_out(employee)


@router.get("", response_model=Page[EmployeeOut])
def list_employees(
    department: str | None = None,
    status: EmployeeStatus | None = None,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
):
    return paginate(service.list_employees(db, department=department, status=status), params, employee_out)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> EmployeeOut:
    return employee_out(service.create_employee(db, payload))


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: int,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> EmployeeOut:
    return employee_out(service.get_employee(db, employee_id))


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> EmployeeOut:
    return employee_out(service.update_employee(db, employee_id, payload, principal.role))


@router.patch("/{employee_id}/status", response_model=EmployeeOut)
def update_employee_status(
    employee_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> EmployeeOut:
    return employee_out(service.update_status(db, employee_id, payload.status, principal.role))


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: int,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ADMIN_ROLES)),
):
    service.delete_employee(db, employee_id)
    return None


@router.get("/{employee_id}/salary", response_model=SalaryInfoOut)
def get_salary_profile(
    employee_id: int,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> SalaryInfoOut:
    return salary_out(service.get_salary_profile(db, employee_id))


@router.put("/{employee_id}/salary", response_model=SalaryInfoOut)
def update_salary_profile(
    employee_id: int,
    payload: SalaryProfileUpdate,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> SalaryInfoOut:
    return salary_out(service.update_salary_profile(db, employee_id, payload, principal.role))
