from datetime import date

from sqlalchemy.orm import Session

from dayflow.core.config import settings
from dayflow.core.security import hash_password
from dayflow.domains.users.service import next_login_id
from dayflow.domains.payroll.service import recompute_net_salary
from dayflow.models import Employee, Payroll, User
from dayflow.payroll.models import SalaryUpdate
from dayflow.payroll.profile import apply_salary_update, default_salary_profile


def _account(session: Session, email: str, role: str, full_name: str, code: str, joined: date) -> User:
    user = User(
        email=email,
        hashed_password=hash_password("changeme123"),
        role=role,
        company_name=settings.company_name,
        employee_code=code,
        login_id=next_login_id(session, settings.company_name, full_name, joined.year),
    )
    session.add(user)
    session.flush()
    return user


def seed(session: Session) -> None:
    admin = _account(session, "admin@example.com", "admin", "Grace Hopper", "EMP000001", date(2020, 1, 1))
    hr = _account(session, "hr@example.com", "hr", "Frances Allen", "EMP000002", date(2021, 3, 1))
    staff = _account(session, "employee@example.com", "employee", "Ada Lovelace", "EMP000003", date(2022, 6, 1))

    profile = apply_salary_update(default_salary_profile(), SalaryUpdate(month_wage=50000))
    for user, full_name, designation, joined in (
        (admin, "Grace Hopper", "Administrator", date(2020, 1, 1)),
        (hr, "Frances Allen", "HR Manager", date(2021, 3, 1)),
    ):
        session.add(
            Employee(
                user_id=user.id,
                full_name=full_name,
                designation=designation,
                department="People",
                joining_date=joined,
                salary_info=default_salary_profile().to_dict(),
            )
        )

    employee = Employee(
        user_id=staff.id,
        full_name="Ada Lovelace",
        designation="Engineer",
        department="Engineering",
        joining_date=date(2022, 6, 1),
        salary_info=profile.to_dict(),
    )
    session.add(employee)
    session.flush()

    payroll = Payroll(
        employee_id=employee.id,
        basic_salary=25000,
        allowances={"hra": 12500.0, "transport": 1600.0, "medical": 1250.0, "other": 0.0},
        deductions={"tax": 200.0, "provident_fund": 2500.0, "other": 0.0},
        effective_from=date(2024, 4, 1),
        currency=settings.default_currency,
    )
    session.add(recompute_net_salary(payroll))
    session.commit()


if __name__ == "__main__":
    from dayflow.db.session import Base, engine, session_scope

    Base.metadata.create_all(bind=engine)
    with session_scope() as db:
        seed(db)
