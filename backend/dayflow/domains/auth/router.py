from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from dayflow.core.errors import AuthenticationError
from dayflow.core.logging import get_logger
from dayflow.core.security import Principal, get_principal, issue_token, verify_password
from dayflow.db.session import get_session
from dayflow.models.user import User

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


class LoginRequest(BaseModel):
    login_id_or_email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("login_id_or_email")
    @classmethod
    def normalize_identifier(cls, value: str) -> str:
        return value.strip()


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    login_id: str | None
    email: str
    role: str
    employee_id: int | None


class MeResponse(BaseModel):
    user_id: int
    role: str
    employee_id: int | None


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_session)) -> LoginResponse:
    identifier = payload.login_id_or_email
    logger.info("login_attempt", identifier=identifier)
    user = (
        db.query(User)
        .filter(
            or_(
                func.lower(User.email) == identifier.lower(),
                User.login_id == identifier.upper(),
            )
        )
        .one_or_none()
    )

    if not user or not verify_password(payload.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")

    user.access_token = issue_token()
    db.commit()
    db.refresh(user)
    logger.info("login_success", user_id=user.id, role=user.role)

    return LoginResponse(
        access_token=user.access_token,
        login_id=user.login_id,
        email=user.email,
        role=user.role,
        employee_id=user.employee.id if user.employee else None,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(principal: Principal = Depends(get_principal), db: Session = Depends(get_session)) -> None:
    user = db.get(User, principal.user_id)
    user.access_token = None
    db.commit()
    logger.info("logout", user_id=principal.user_id)
    return None


@router.get("/me", response_model=MeResponse)
def me(principal: Principal = Depends(get_principal)) -> MeResponse:
    return MeResponse(user_id=principal.user_id, role=principal.role, employee_id=principal.employee_id)
