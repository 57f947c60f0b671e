from __future__ import annotations

from dataclasses import replace
from typing import Dict

from .calculator import compute_salary_components, quantize, to_decimal
from .components import ALL_COMPONENTS, EARNING_COMPONENTS, STATUTORY_COMPONENTS
from .models import Component, ComponentOverride, SalaryBreakdown, SalaryProfile, SalaryUpdate

MONTHS_PER_YEAR = 12


def default_salary_profile() -> SalaryProfile:
    return _with_breakdown(SalaryProfile(), compute_salary_components(0))


def _with_breakdown(profile: SalaryProfile, breakdown: SalaryBreakdown) -> SalaryProfile:
    return replace(
        profile,
        salary_components=breakdown.earnings(),
        pf_employee=breakdown.pf_employee,
        pf_employer=breakdown.pf_employer,
        professional_tax=breakdown.professional_tax,
    )


def _rounded(override: ComponentOverride) -> ComponentOverride:
    if override.amount is None:
        return override
    return replace(override, amount=float(quantize(to_decimal(override.amount))))


def apply_salary_update(profile: SalaryProfile, update: SalaryUpdate) -> SalaryProfile:
    """Return the profile that results from ``update``.

    A new monthly wage replaces every derived component at once. Without one,
    only the supplied fields and overrides are merged and nothing is recomputed.
    """
    unknown = sorted(set(update.overrides) - set(ALL_COMPONENTS))
    if unknown:
        raise ValueError(f"Unknown salary components: {', '.join(unknown)}")

    if update.working_days is not None:
        profile = replace(profile, working_days=update.working_days)
    if update.break_time is not None:
        profile = replace(profile, break_time=update.break_time)

    if update.month_wage is not None:
        if update.overrides:
            raise ValueError("Component overrides cannot be combined with a monthly wage change")
        month_wage = quantize(to_decimal(update.month_wage))
        profile = replace(
            profile,
            month_wage=float(month_wage),
            yearly_wage=float(quantize(month_wage * MONTHS_PER_YEAR)),
        )
        return _with_breakdown(profile, compute_salary_components(month_wage))

    if not update.overrides:
        return profile

    components: Dict[str, Component] = dict(profile.salary_components)
    statutory = {}
    for name, override in update.overrides.items():
        if name in EARNING_COMPONENTS:
            components[name] = _rounded(override).apply(profile.component(name))
        elif name in STATUTORY_COMPONENTS:
            statutory[name] = _rounded(override).apply(profile.component(name))
    return replace(profile, salary_components=components, **statutory)
