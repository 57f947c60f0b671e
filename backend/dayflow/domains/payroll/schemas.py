from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class AllowancesIn(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    hra: float | None = Field(default=None, ge=0)
    transport: float | None = Field(default=None, ge=0)
    medical: float | None = Field(default=None, ge=0)
    other: float | None = Field(default=None, ge=0)


class DeductionsIn(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    tax: float | None = Field(default=None, ge=0)
    provident_fund: float | None = Field(default=None, ge=0)
    other: float | None = Field(default=None, ge=0)


class PayrollUpsert(BaseModel):
    """Fields a caller may set; ``net_salary`` is always derived."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    employee_id: int
    basic_salary: float | None = Field(default=None, ge=0)
    allowances: AllowancesIn | None = None
    deductions: DeductionsIn | None = None
    effective_from: date | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class PayrollOut(BaseModel):
    id: int
    employee_id: int
    employee_name: str | None = None
    basic_salary: float
    allowances: dict[str, float]
    deductions: dict[str, float]
    net_salary: float
    effective_from: date
    currency: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
