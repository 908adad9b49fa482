"""
Simplified US take-home estimator (married filing jointly, no state income tax).

Illustrative only: brackets and limits are the 2024 published figures and the
household federal tax is split between earners by income share.
"""

from __future__ import annotations

import dataclasses
from typing import Tuple

from budget_core.domain.rounding import round_whole

# (lower bound, upper bound, rate)
FEDERAL_BRACKETS_MFJ: Tuple[Tuple[float, float, float], ...] = (
    (0, 23_200, 0.10),
    (23_200, 94_300, 0.12),
    (94_300, 201_050, 0.22),
    (201_050, 383_900, 0.24),
    (383_900, 487_450, 0.32),
    (487_450, 731_200, 0.35),
    (731_200, float("inf"), 0.37),
)

SOCIAL_SECURITY_RATE = 0.062
SOCIAL_SECURITY_WAGE_BASE = 168_600
MEDICARE_RATE = 0.0145
ADDITIONAL_MEDICARE_RATE = 0.009
ADDITIONAL_MEDICARE_THRESHOLD_MFJ = 250_000
STANDARD_DEDUCTION_MFJ = 29_200


@dataclasses.dataclass(frozen=True)
class TaxEstimate:
    gross_annual: float
    federal_tax: int
    social_security: int
    medicare: int
    total_tax: int
    net_annual: int
    net_monthly: int
    effective_rate: float


@dataclasses.dataclass(frozen=True)
class HouseholdTaxEstimate:
    earner1: TaxEstimate
    earner2: TaxEstimate
    gross_annual: float
    total_tax: int
    net_annual: int
    net_monthly: int
    effective_rate: float


def federal_tax(taxable_income: float) -> float:
    if taxable_income <= 0:
        return 0.0
    tax = 0.0
    remaining = taxable_income
    for lower, upper, rate in FEDERAL_BRACKETS_MFJ:
        if remaining <= 0:
            break
        in_bracket = min(remaining, upper - lower)
        tax += in_bracket * rate
        remaining -= in_bracket
    return tax


def fica(gross: float, household_gross: float) -> Tuple[float, float]:
    """Social Security (capped) and Medicare (plus the surtax share above the threshold)."""
    social_security = min(gross, SOCIAL_SECURITY_WAGE_BASE) * SOCIAL_SECURITY_RATE
    medicare = gross * MEDICARE_RATE
    if household_gross > ADDITIONAL_MEDICARE_THRESHOLD_MFJ:
        other_income = household_gross - gross
        base = max(0.0, gross - max(0.0, ADDITIONAL_MEDICARE_THRESHOLD_MFJ - other_income))
        medicare += base * ADDITIONAL_MEDICARE_RATE
    return social_security, medicare


def estimate_take_home(gross_annual: float, household_gross_annual: float, pre_tax: float = 0.0) -> TaxEstimate:
    if household_gross_annual <= 0:
        raise ValueError("Household gross income must be positive")
    share = gross_annual / household_gross_annual
    household_taxable = max(0.0, household_gross_annual - STANDARD_DEDUCTION_MFJ)
    fed = federal_tax(household_taxable) * share
    social_security, medicare = fica(gross_annual, household_gross_annual)

    total = fed + social_security + medicare
    net_annual = gross_annual - total - pre_tax
    return TaxEstimate(
        gross_annual=gross_annual,
        federal_tax=round_whole(fed),
        social_security=round_whole(social_security),
        medicare=round_whole(medicare),
        total_tax=round_whole(total),
        net_annual=round_whole(net_annual),
        net_monthly=round_whole(net_annual / 12),
        effective_rate=total / gross_annual if gross_annual > 0 else 0.0,
    )


def household_take_home(
    earner1_gross: float,
    earner2_gross: float,
    earner1_pre_tax: float = 0.0,
    earner2_pre_tax: float = 0.0,
) -> HouseholdTaxEstimate:
    household_gross = earner1_gross + earner2_gross
    earner1 = estimate_take_home(earner1_gross, household_gross, earner1_pre_tax)
    earner2 = estimate_take_home(earner2_gross, household_gross, earner2_pre_tax)
    total_tax = earner1.total_tax + earner2.total_tax
    return HouseholdTaxEstimate(
        earner1=earner1,
        earner2=earner2,
        gross_annual=household_gross,
        total_tax=total_tax,
        net_annual=earner1.net_annual + earner2.net_annual,
        net_monthly=earner1.net_monthly + earner2.net_monthly,
        effective_rate=total_tax / household_gross,
    )
