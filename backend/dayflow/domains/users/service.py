from __future__ import annotations

import re
import secrets
import time

from sqlalchemy import func
from sqlalchemy.orm import Session

from dayflow.core.errors import ConflictError, NotFoundError
from dayflow.core.logging import get_logger
from dayflow.core.security import hash_password
from dayflow.models.user import User

logger = get_logger(__name__)

SERIAL_WIDTH = 4


def _letters(value: str, size: int) -> str:
    cleaned = re.sub(r"[^A-Za-z]", "", value or "").upper()
    return cleaned[:size].ljust(size, "X")


def login_id_prefix(company_name: str, full_name: str) -> str:
    parts = (full_name or "").split()
    first = parts[0] if parts else ""
    last = parts[-1] if len(parts) > 1 else ""
    return _letters(company_name, 2) + _letters(first, 2) + _letters(last, 2)


def next_login_id(db: Session, company_name: str, full_name: str, year: int) -> str:
    """Build ``CCFFLLYYYYNNNN``: company, first name, last name, joining year, serial.

    The serial counts up per company and joining year, whatever the name.
    """
    company = _letters(company_name, 2)
    pattern = f"{company}____{year:04d}%"
    existing = db.query(User.login_id).filter(User.login_id.like(pattern)).all()
    serials = [int(login_id[-SERIAL_WIDTH:]) for (login_id,) in existing if login_id[-SERIAL_WIDTH:].isdigit()]
    serial = max(serials, default=0) + 1
    return f"{login_id_prefix(company_name, full_name)}{year:04d}{serial:0{SERIAL_WIDTH}d}"


def generate_employee_code() -> str:
    stamp = int(time.time() * 1000) % 1_000_000
    return f"EMP{stamp:06d}{secrets.randbelow(1000):03d}"


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).one_or_none()


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    role: str,
    full_name: str,
    company_name: str,
    joining_year: int,
    employee_code: str | None = None,
) -> User:
    """Add a user to the session; the caller commits together with the profile."""
    if find_by_email(db, email):
        raise ConflictError("User with this email already exists")
    if employee_code and db.query(User).filter(User.employee_code == employee_code).one_or_none():
        raise ConflictError("User with this employee code already exists")

    user = User(
        email=email.strip().lower(),
        hashed_password=hash_password(password),
        role=role,
        company_name=company_name,
        employee_code=employee_code or generate_employee_code(),
        login_id=next_login_id(db, company_name, full_name, joining_year),
    )
    db.add(user)
    db.flush()
    logger.info("user_created", user_id=user.id, login_id=user.login_id, role=role)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
