from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from dayflow.db.session import Base

ROLES = ("employee", "hr", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    login_id = Column(String(32), unique=True, index=True, nullable=True)
    employee_code = Column(String(32), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="employee")  # employee|hr|admin
    company_name = Column(String(200), nullable=True)
    access_token = Column(String(128), unique=True, index=True, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
