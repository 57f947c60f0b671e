from __future__ import annotations

import secrets
from dataclasses import dataclass
from hashlib import sha256
from hmac import compare_digest
from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from dayflow.core.errors import AuthenticationError, NotFoundError, PermissionDeniedError
from dayflow.db.session import get_session
from dayflow.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: str
    employee_id: int | None = None

    def require_employee(self) -> int:
        if self.employee_id is None:
            raise NotFoundError("Employee profile not found")
        return self.employee_id


def hash_password(raw: str) -> str:
    return sha256(raw.encode("utf-8")).hexdigest()


def verify_password(raw: str, hashed: str) -> bool:
    return compare_digest(hashed, hash_password(raw))


def issue_token() -> str:
    return secrets.token_urlsafe(32)


def principal_for(user: User) -> Principal:
    employee = user.employee
    return Principal(user_id=user.id, role=user.role, employee_id=employee.id if employee else None)


def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> Principal:
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    user = db.query(User).filter(User.access_token == credentials.credentials).one_or_none()
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return principal_for(user)


def require_roles(*roles: str) -> Callable[..., Principal]:
    def dependency(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.role not in roles:
            raise PermissionDeniedError("You do not have permission to perform this action")
        return principal

    return dependency
