from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from dayflow.core.config import settings
from dayflow.core.logging import get_logger
from dayflow.core.permissions import ADMIN_ROLES
from dayflow.core.security import Principal, require_roles
from dayflow.db.session import commit_or_conflict, get_session
from dayflow.domains.users.service import create_user, get_user
from dayflow.models.user import User

router = APIRouter(prefix="/users", tags=["users"])
logger = get_logger(__name__)

Role = Literal["employee", "hr", "admin"]


class UserOut(BaseModel):
    id: int
    login_id: str | None
    employee_code: str
    email: str
    role: Role
    company_name: str | None
    employee_id: int | None
    created_at: datetime


class UserCreate(BaseModel):
    email: str
    password: str = Field(..., min_length=8)
    role: Role = "employee"
    full_name: str = Field(..., min_length=1, max_length=200)
    employee_code: str | None = Field(default=None, max_length=32)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        email = value.strip()
        if "@" not in email:
            raise ValueError("Invalid email format")
        return email


class RoleUpdate(BaseModel):
    role: Role


def _sanitize(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        login_id=user.login_id,
        employee_code=user.employee_code,
        email=user.email,
        role=user.role,
        company_name=user.company_name,
        employee_id=user.employee.id if user.employee else None,
        created_at=user.created_at or datetime.utcnow(),
    )


@router.get("", response_model=list[UserOut])
def list_users(
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ADMIN_ROLES)),
) -> list[UserOut]:
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [_sanitize(user) for user in users]


@router.patch("/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ADMIN_ROLES)),
) -> UserOut:
    user = get_user(db, user_id)
    user.role = payload.role
    commit_or_conflict(db, "User was modified concurrently")
    db.refresh(user)
    logger.info("user_role_changed", user_id=user.id, role=user.role, changed_by=principal.user_id)
    return _sanitize(user)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: UserCreate,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ADMIN_ROLES)),
) -> UserOut:
    user = create_user(
        db,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        full_name=payload.full_name,
        company_name=settings.company_name,
        joining_year=datetime.utcnow().year,
        employee_code=payload.employee_code,
    )
    commit_or_conflict(db, "User with this email or employee code already exists")
    db.refresh(user)
    return _sanitize(user)
