from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dayflow.db.session import Base, get_session
from dayflow.domains.employees.schemas import EmployeeCreate, JobDetails, PersonalDetails
from dayflow.domains.employees.service import create_employee
from dayflow.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session


@dataclass
class Account:
    user_id: int
    employee_id: int
    login_id: str
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_account():
    def _make(
        role: str = "employee",
        full_name: str = "Ada Lovelace",
        email: str | None = None,
        department: str = "Engineering",
        joining_date: date = date(2024, 1, 15),
    ) -> Account:
        payload = EmployeeCreate(
            email=email or f"{role}-{uuid4().hex[:8]}@example.com",
            password="supersecure",
            role=role,
            employee_code=f"EMP{uuid4().hex[:10]}",
            personal_details=PersonalDetails(full_name=full_name),
            job_details=JobDetails(
                designation="Engineer",
                department=department,
                joining_date=joining_date,
            ),
        )
        session = TestingSessionLocal()
        try:
            employee = create_employee(session, payload)
            user = employee.user
            user.access_token = f"token-{uuid4().hex}"
            session.commit()
            return Account(
                user_id=user.id,
                employee_id=employee.id,
                login_id=user.login_id,
                email=user.email,
                token=user.access_token,
            )
        finally:
            session.close()

    return _make


@pytest.fixture
def admin(make_account) -> Account:
    return make_account(role="admin", full_name="Grace Hopper", email="admin@example.com")


@pytest.fixture
def hr(make_account) -> Account:
    return make_account(role="hr", full_name="Frances Allen", email="hr@example.com")


@pytest.fixture
def employee(make_account) -> Account:
    return make_account(role="employee", full_name="Ada Lovelace", email="ada@example.com")
