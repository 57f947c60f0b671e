from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .components import EARNING_COMPONENTS, STATUTORY_COMPONENTS


@dataclass(frozen=True)
class Component:
    amount: float = 0.0
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"amount": self.amount, "percentage": self.percentage}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Component":
        data = data or {}
        return cls(
            amount=float(data.get("amount") or 0),
            percentage=float(data.get("percentage") or 0),
        )


@dataclass(frozen=True)
class SalaryBreakdown:
    basic_salary: Component
    hra: Component
    standard_allowance: Component
    performance_bonus: Component
    lta: Component
    fixed_allowance: Component
    pf_employee: Component
    pf_employer: Component
    professional_tax: Component

    def earnings(self) -> Dict[str, Component]:
        return {name: getattr(self, name) for name in EARNING_COMPONENTS}

    def gross(self) -> float:
        return round(sum(c.amount for c in self.earnings().values()), 2)


@dataclass(frozen=True)
class ComponentOverride:
    amount: Optional[float] = None
    percentage: Optional[float] = None

    def apply(self, component: Component) -> Component:
        return Component(
            amount=component.amount if self.amount is None else float(self.amount),
            percentage=component.percentage if self.percentage is None else float(self.percentage),
        )


@dataclass(frozen=True)
class SalaryUpdate:
    month_wage: Optional[float] = None
    working_days: Optional[int] = None
    break_time: Optional[float] = None
    overrides: Dict[str, ComponentOverride] = field(default_factory=dict)


@dataclass(frozen=True)
class SalaryProfile:
    """Salary block embedded in an employee record.

    The component amounts always come from the wage calculator or from an
    explicit override; see ``apply_salary_update`` for the only way to change them.
    """

    month_wage: float = 0.0
    yearly_wage: float = 0.0
    working_days: int = 5
    break_time: float = 1.0
    salary_components: Dict[str, Component] = field(default_factory=dict)
    pf_employee: Component = field(default_factory=Component)
    pf_employer: Component = field(default_factory=Component)
    professional_tax: Component = field(default_factory=Component)

    def component(self, name: str) -> Component:
        if name in STATUTORY_COMPONENTS:
            return getattr(self, name)
        return self.salary_components.get(name, Component())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month_wage": self.month_wage,
            "yearly_wage": self.yearly_wage,
            "working_days": self.working_days,
            "break_time": self.break_time,
            "salary_components": {
                name: self.component(name).to_dict() for name in EARNING_COMPONENTS
            },
            "pf_employee": self.pf_employee.to_dict(),
            "pf_employer": self.pf_employer.to_dict(),
            "professional_tax": self.professional_tax.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SalaryProfile":
        components = data.get("salary_components") or {}
        return cls(
            month_wage=float(data.get("month_wage") or 0),
            yearly_wage=float(data.get("yearly_wage") or 0),
            working_days=int(data.get("working_days") or 5),
            break_time=float(data["break_time"]) if data.get("break_time") is not None else 1.0,
            salary_components={
                name: Component.from_dict(components.get(name)) for name in EARNING_COMPONENTS
            },
            pf_employee=Component.from_dict(data.get("pf_employee")),
            pf_employer=Component.from_dict(data.get("pf_employer")),
            professional_tax=Component.from_dict(data.get("professional_tax")),
        )
