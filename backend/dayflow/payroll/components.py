"""Salary component table.

Each row says how one component of the monthly wage is derived. The calculator
walks the table in order, so a row may only refer to components above it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

EARNING = "earning"
STATUTORY = "statutory"

# bases
WAGE = "wage"
BASIC = "basic"
FIXED = "fixed"
REMAINDER = "remainder"


@dataclass(frozen=True)
class ComponentRule:
    name: str
    kind: str
    basis: str
    percentage: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")


COMPONENT_TABLE: Tuple[ComponentRule, ...] = (
    ComponentRule("basic_salary", EARNING, WAGE, percentage=Decimal("50")),
    ComponentRule("hra", EARNING, BASIC, percentage=Decimal("50")),
    ComponentRule("standard_allowance", EARNING, FIXED, amount=Decimal("4167")),
    ComponentRule("performance_bonus", EARNING, BASIC, percentage=Decimal("8.33")),
    ComponentRule("lta", EARNING, BASIC, percentage=Decimal("8.33")),
    ComponentRule("fixed_allowance", EARNING, REMAINDER),
    ComponentRule("pf_employee", STATUTORY, BASIC, percentage=Decimal("10")),
    ComponentRule("pf_employer", STATUTORY, BASIC, percentage=Decimal("12")),
    ComponentRule("professional_tax", STATUTORY, FIXED, amount=Decimal("200")),
)

EARNING_COMPONENTS: Tuple[str, ...] = tuple(r.name for r in COMPONENT_TABLE if r.kind == EARNING)
STATUTORY_COMPONENTS: Tuple[str, ...] = tuple(r.name for r in COMPONENT_TABLE if r.kind == STATUTORY)
ALL_COMPONENTS: Tuple[str, ...] = EARNING_COMPONENTS + STATUTORY_COMPONENTS
