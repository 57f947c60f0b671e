import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dayflow.core.errors import ConflictError
from dayflow.db.session import Base, commit_or_conflict
from dayflow.domains.employees.schemas import EmployeeCreate, PersonalDetails, SalaryProfileUpdate
from dayflow.domains.employees.service import create_employee, get_employee, update_salary_profile
from dayflow.domains.payroll.schemas import AllowancesIn, PayrollUpsert
from dayflow.domains.payroll.service import create_or_update_payroll, get_payroll_by_employee
from dayflow.models import Payroll


# File-backed, so each session holds its own connection.
@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'dayflow.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def employee_id(session_factory):
    session = session_factory()
    try:
        employee = create_employee(
            session,
            EmployeeCreate(
                email="ada@example.com",
                password="supersecure",
                personal_details=PersonalDetails(full_name="Ada Lovelace"),
            ),
        )
        return employee.id
    finally:
        session.close()


def test_stale_payroll_write_is_a_conflict(session_factory, employee_id):
    setup = session_factory()
    create_or_update_payroll(setup, PayrollUpsert(employee_id=employee_id, basic_salary=30000))
    setup.close()

    first, second = session_factory(), session_factory()
    try:
        assert get_payroll_by_employee(first, employee_id).version_id == 1
        assert get_payroll_by_employee(second, employee_id).version_id == 1

        saved, created = create_or_update_payroll(
            first, PayrollUpsert(employee_id=employee_id, allowances=AllowancesIn(hra=5000))
        )
        assert not created
        assert saved.version_id == 2

        with pytest.raises(ConflictError):
            create_or_update_payroll(
                second, PayrollUpsert(employee_id=employee_id, allowances=AllowancesIn(medical=500))
            )
    finally:
        first.close()
        second.close()

    check = session_factory()
    try:
        payroll = get_payroll_by_employee(check, employee_id)
        assert payroll.allowances["hra"] == 5000
        assert payroll.allowances["medical"] == 0
        assert float(payroll.net_salary) == 35000
    finally:
        check.close()


def test_stale_salary_profile_write_is_a_conflict(session_factory, employee_id):
    first, second = session_factory(), session_factory()
    try:
        assert get_employee(first, employee_id).version_id == 1
        assert get_employee(second, employee_id).version_id == 1

        update_salary_profile(first, employee_id, SalaryProfileUpdate(month_wage=50000), "hr")

        with pytest.raises(ConflictError):
            update_salary_profile(second, employee_id, SalaryProfileUpdate(working_days=6), "hr")
    finally:
        first.close()
        second.close()

    check = session_factory()
    try:
        profile = get_employee(check, employee_id).salary_profile
        assert profile.month_wage == 50000
        assert profile.working_days == 5
    finally:
        check.close()


def test_second_payroll_row_for_employee_is_a_conflict(session_factory, employee_id):
    session = session_factory()
    try:
        create_or_update_payroll(session, PayrollUpsert(employee_id=employee_id, basic_salary=30000))

        session.add(Payroll(employee_id=employee_id, basic_salary=1, net_salary=1))
        with pytest.raises(ConflictError):
            commit_or_conflict(session, "Payroll already exists for this employee")

        assert session.query(Payroll).filter(Payroll.employee_id == employee_id).count() == 1
    finally:
        session.close()
