from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Mapping, Optional

from .components import BASIC, COMPONENT_TABLE, EARNING, FIXED, REMAINDER, WAGE, ComponentRule
from .models import Component, SalaryBreakdown

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Convert a stored or submitted number; ``None`` counts as zero.

    Anything else that is not a number raises ``decimal.InvalidOperation``.
    """
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _rule_amount(rule: ComponentRule, wage: Decimal, amounts: Dict[str, Decimal]) -> Decimal:
    if rule.basis == WAGE:
        return quantize(wage * rule.percentage / HUNDRED)
    if rule.basis == BASIC:
        return quantize(amounts["basic_salary"] * rule.percentage / HUNDRED)
    if rule.basis == FIXED:
        return quantize(rule.amount)
    raise ValueError(f"Unsupported basis {rule.basis!r} for {rule.name}")


def compute_salary_components(month_wage: Optional[float] = None) -> SalaryBreakdown:
    """Derive the full component set from a monthly wage.

    Percentage rows follow the table; the remainder row absorbs whatever the
    other earnings leave of the wage and never goes below zero. A missing wage
    is treated as zero, which still yields the fixed-amount rows.
    """
    wage = max(to_decimal(month_wage), Decimal("0"))
    amounts: Dict[str, Decimal] = {}
    percentages: Dict[str, Decimal] = {}

    for rule in COMPONENT_TABLE:
        if rule.basis == REMAINDER:
            continue
        amounts[rule.name] = _rule_amount(rule, wage, amounts)
        percentages[rule.name] = rule.percentage

    for rule in COMPONENT_TABLE:
        if rule.basis != REMAINDER:
            continue
        allocated = sum(
            (amounts[r.name] for r in COMPONENT_TABLE if r.kind == EARNING and r.basis != REMAINDER),
            Decimal("0"),
        )
        remainder = quantize(max(wage - allocated, Decimal("0")))
        amounts[rule.name] = remainder
        percentages[rule.name] = quantize(remainder / wage * HUNDRED) if wage > 0 else Decimal("0")

    return SalaryBreakdown(
        **{
            rule.name: Component(
                amount=float(amounts[rule.name]),
                percentage=float(percentages[rule.name]),
            )
            for rule in COMPONENT_TABLE
        }
    )


def net_salary(basic_salary, allowances: Mapping[str, float], deductions: Mapping[str, float]) -> Decimal:
    total_allowances = _total(allowances.values())
    total_deductions = _total(deductions.values())
    return quantize(to_decimal(basic_salary) + total_allowances - total_deductions)


def _total(values: Iterable[float]) -> Decimal:
    return sum((to_decimal(v) for v in values), Decimal("0"))
