from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Role = Literal["employee", "hr", "admin"]
EmployeeStatus = Literal["active", "inactive", "terminated"]
Gender = Literal["male", "female", "other", "prefer-not-to-say"]
MaritalStatus = Literal["single", "married", "divorced", "widowed"]
EmploymentType = Literal["full-time", "part-time", "contract", "intern"]
EarningComponent = Literal[
    "basic_salary",
    "hra",
    "standard_allowance",
    "performance_bonus",
    "lta",
    "fixed_allowance",
]


class PersonalDetails(BaseModel):
    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=40)
    address: str | None = None
    date_of_birth: date | None = None
    personal_email: str | None = None
    gender: Gender | None = None
    marital_status: MaritalStatus | None = None
    nationality: str | None = None
    about: str | None = None
    skills: list[str] | None = None

    @field_validator("full_name", "phone", "personal_email")
    @classmethod
    def strip(cls, value: str | None) -> str | None:
        return value.strip() if isinstance(value, str) else value


class JobDetails(BaseModel):
    model_config = ConfigDict(extra="forbid")

    designation: str | None = Field(default=None, min_length=1, max_length=200)
    department: str | None = Field(default=None, min_length=1, max_length=200)
    joining_date: date | None = None
    employment_type: EmploymentType | None = None
    manager: str | None = None
    location: str | None = None


class EmployeeCreate(BaseModel):
    email: str
    password: str = Field(..., min_length=8)
    role: Role = "employee"
    employee_code: str | None = Field(default=None, max_length=32)
    personal_details: PersonalDetails
    job_details: JobDetails = Field(default_factory=JobDetails)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        email = value.strip()
        if "@" not in email:
            raise ValueError("Invalid email format")
        return email

    @model_validator(mode="after")
    def require_full_name(self) -> "EmployeeCreate":
        if not self.personal_details.full_name:
            raise ValueError("personal_details.full_name is required")
        return self


class EmployeeUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    personal_details: PersonalDetails | None = None
    job_details: JobDetails | None = None


class StatusUpdate(BaseModel):
    status: EmployeeStatus


class ComponentOverrideIn(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    amount: float | None = Field(default=None, ge=0)
    percentage: float | None = Field(default=None, ge=0, le=100)


class SalaryProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    month_wage: float | None = Field(default=None, ge=0)
    working_days: int | None = Field(default=None, ge=1, le=7)
    break_time: float | None = Field(default=None, ge=0)
    salary_components: dict[EarningComponent, ComponentOverrideIn] | None = None
    pf_employee: ComponentOverrideIn | None = None
    pf_employer: ComponentOverrideIn | None = None
    professional_tax: ComponentOverrideIn | None = None


class ComponentOut(BaseModel):
    amount: float
    percentage: float


class SalaryInfoOut(BaseModel):
    month_wage: float
    yearly_wage: float
    working_days: int
    break_time: float
    salary_components: dict[str, ComponentOut]
    pf_employee: ComponentOut
    pf_employer: ComponentOut
    professional_tax: ComponentOut


class PersonalDetailsOut(BaseModel):
    full_name: str
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    personal_email: str | None = None
    gender: str | None = None
    marital_status: str | None = None
    nationality: str | None = None
    about: str | None = None
    skills: list[str] = []


class JobDetailsOut(BaseModel):
    designation: str
    department: str
    joining_date: date
    employment_type: str
    manager: str | None = None
    location: str | None = None


class EmployeeOut(BaseModel):
    id: int
    user_id: int
    login_id: str | None
    employee_code: str
    email: str
    role: Role
    status: EmployeeStatus
    personal_details: PersonalDetailsOut
    job_details: JobDetailsOut
    salary_info: SalaryInfoOut
    created_at: datetime | None = None
