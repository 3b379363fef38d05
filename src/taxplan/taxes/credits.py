"""Child Tax Credit and Child and Dependent Care Credit."""

from __future__ import annotations

import math
from dataclasses import dataclass

from taxplan.config.schema import CreditInputs, FilingStatus
from taxplan.taxes.rules import TaxRuleTable


@dataclass(frozen=True)
class CreditResult:
    """Credits claimed for the year. All credits are treated as non-refundable."""

    child_tax_credit: float = 0.0
    dependent_care_credit: float = 0.0
    education_credits: float = 0.0
    other_credits: float = 0.0
    total: float = 0.0


def child_tax_credit(
    children_under_17: int,
    agi: float,
    filing_status: FilingStatus,
    rules: TaxRuleTable,
) -> float:
    """Per-child credit reduced by a fixed amount per (partial) step of AGI over the threshold."""
    c = rules.credits
    base_credit = max(0, children_under_17) * c.child_credit_amount
    threshold = c.child_credit_phaseout_threshold[filing_status]
    if agi <= threshold:
        return base_credit
    steps = math.ceil((agi - threshold) / c.child_credit_phaseout_step)
    return max(0.0, base_credit - steps * c.child_credit_phaseout_per_step)


def dependent_care_rate(agi: float, rules: TaxRuleTable) -> float:
    """Credit percentage: 35% at low AGI, one point less per $2,000, 20% past the floor AGI."""
    c = rules.credits
    if agi <= c.dependent_care_full_rate_agi:
        return c.dependent_care_max_rate
    if agi > c.dependent_care_floor_agi:
        return c.dependent_care_min_rate
    steps = (agi - c.dependent_care_full_rate_agi) / c.dependent_care_rate_step_agi
    rate = c.dependent_care_max_rate - steps * c.dependent_care_rate_step
    return max(c.dependent_care_min_rate, rate)


def dependent_care_credit(
    expenses: float,
    qualifying_count: int,
    agi: float,
    rules: TaxRuleTable,
) -> float:
    caps = rules.credits.dependent_care_expense_caps
    max_expenses = caps.two_or_more if qualifying_count >= 2 else caps.one
    qualifying = min(max(0.0, expenses), max_expenses)
    return qualifying * dependent_care_rate(agi, rules)


def calculate_credits(
    credits: CreditInputs,
    agi: float,
    filing_status: FilingStatus,
    rules: TaxRuleTable,
) -> CreditResult:
    """Sum every credit the household claims at the given AGI."""
    ctc = child_tax_credit(credits.children_under_17, agi, filing_status, rules)
    care = dependent_care_credit(
        credits.dependent_care_expenses,
        credits.children_under_17 + credits.other_dependents,
        agi,
        rules,
    )
    total = ctc + care + credits.education_credits + credits.other_credits
    return CreditResult(
        child_tax_credit=ctc,
        dependent_care_credit=care,
        education_credits=credits.education_credits,
        other_credits=credits.other_credits,
        total=total,
    )


def total_tax_liability(federal_tax: float, se_tax_total: float, total_credits: float) -> float:
    """Income tax plus SE tax less credits, floored at zero."""
    return max(0.0, federal_tax + se_tax_total - total_credits)
