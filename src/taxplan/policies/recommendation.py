"""W-4 recommendations: gap classification, bonus check, two-earner check."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from taxplan.config.schema import CreditInputs, DeductionInputs, FilingStatus, IncomeInputs
from taxplan.taxes.brackets import progressive_tax
from taxplan.taxes.rules import TaxRuleTable

WithholdingStatus = Literal["overwithheld", "underwithheld", "optimal"]
Confidence = Literal["high", "medium"]
BonusStatus = Literal["overwithheld", "underwithheld", "adequate"]

# Periods assumed when no pay stub tells us the real frequency
DEFAULT_PERIODS_PER_YEAR = 12


@dataclass(frozen=True)
class W4Recommendation:
    """Suggested Form W-4 entries and how sure we are about them.

    Attributes:
        status: Classification of the withholding gap.
        withholding_gap: Projected withholding minus liability
            (positive = refund, negative = owed).
        extra_per_period: Step 4(c) extra withholding per paycheck.
        step3_dependents: Step 3 dependent credit amount.
        step4a_other_income: Step 4(a) income not subject to withholding.
        step4b_deductions: Step 4(b) deductions beyond the standard deduction.
        confidence: ``"high"`` unless SE income or large other income make
            withholding alone an incomplete answer.
        explanation: Plain-language summary for display.
    """

    status: WithholdingStatus
    withholding_gap: float
    extra_per_period: float
    step3_dependents: float
    step4a_other_income: float
    step4b_deductions: float
    confidence: Confidence
    explanation: str


@dataclass(frozen=True)
class BonusAnalysis:
    """Flat supplemental withholding versus tax at the marginal rate."""

    bonus: float
    flat_withholding: float
    marginal_withholding: float
    difference: float
    status: BonusStatus
    explanation: str


@dataclass(frozen=True)
class TwoEarnerAnalysis:
    """Joint return versus two single returns, and the combined withholding gap."""

    combined_income: float
    combined_withholding: float
    sum_as_singles: float
    joint_tax: float
    marriage_effect: float
    underwithholding: float
    higher_earner: Literal["self", "spouse"]
    higher_earner_adjustment: float
    explanation: str


def classify_gap(gap: float, tolerance: float = 500.0) -> WithholdingStatus:
    """Bucket a withholding gap; within +/- ``tolerance`` counts as optimal."""
    if gap > tolerance:
        return "overwithheld"
    if gap < -tolerance:
        return "underwithheld"
    return "optimal"


def _total_income(income: IncomeInputs) -> float:
    return income.household_wages + income.self_employment_income + income.other_income


def _large_other_income(income: IncomeInputs) -> bool:
    return income.other_income > _total_income(income) * 0.2


def assess_confidence(income: IncomeInputs) -> Confidence:
    if income.self_employment_income > 0:
        return "medium"
    if _large_other_income(income):
        return "medium"
    return "high"


def w4_deductions(
    deductions: DeductionInputs, filing_status: FilingStatus, rules: TaxRuleTable
) -> float:
    """Step 4(b): itemized excess over the standard deduction plus above-the-line items."""
    amount = 0.0
    standard = rules.standard_deduction_for(filing_status)
    if not deductions.use_standard_deduction and deductions.itemized_total > standard:
        amount = deductions.itemized_total - standard
    amount += (
        deductions.retirement_contributions
        + deductions.traditional_ira
        + deductions.hsa_contributions
    )
    amount += min(deductions.student_loan_interest, rules.deductions.student_loan_interest_cap)
    return amount


def w4_dependents(credits: CreditInputs, rules: TaxRuleTable) -> float:
    """Step 3: per-child credit plus the other-dependent credit."""
    c = rules.credits
    return (
        credits.children_under_17 * c.child_credit_amount
        + credits.other_dependents * c.other_dependent_credit_amount
    )


def recommend_w4(
    projected_withholding: float,
    total_liability: float,
    income: IncomeInputs,
    deductions: DeductionInputs,
    credits: CreditInputs,
    filing_status: FilingStatus,
    rules: TaxRuleTable,
    periods_per_year: int = DEFAULT_PERIODS_PER_YEAR,
) -> W4Recommendation:
    """Turn the withholding gap into concrete W-4 entries.

    Args:
        projected_withholding: Expected federal withholding for the year.
        total_liability: Tax after credits.
        income: Income inputs (drive Step 4(a) and confidence).
        deductions: Deduction inputs (drive Step 4(b)).
        credits: Dependents (drive Step 3).
        filing_status: Selects the standard deduction for Step 4(b).
        rules: Rule table for the tax year.
        periods_per_year: Paychecks left to spread any shortfall over.

    Returns:
        W4Recommendation for display.
    """
    gap = projected_withholding - total_liability
    status = classify_gap(gap, rules.withholding.gap_tolerance)
    periods = max(1, periods_per_year)

    extra = 0.0
    if status == "overwithheld":
        explanation = (
            f"You're on track for a ~${round(gap):,} refund. Consider reducing "
            f"withholding to keep about ${round(gap / 12):,}/month in your paychecks."
        )
    elif status == "underwithheld":
        extra = float(math.ceil(abs(gap) / periods))
        explanation = (
            f"You're projected to owe ~${round(abs(gap)):,}. Add ${extra:,.0f} extra "
            "withholding per pay period to avoid a tax bill."
        )
    else:
        explanation = "You're on track for a minimal refund or balance due."

    confidence = assess_confidence(income)
    if income.self_employment_income > 0:
        explanation += " Self-employment income requires quarterly estimated payments."
    if _large_other_income(income):
        explanation += " Significant other income may need further adjustment."

    return W4Recommendation(
        status=status,
        withholding_gap=gap,
        extra_per_period=extra,
        step3_dependents=w4_dependents(credits, rules),
        step4a_other_income=income.other_income + income.self_employment_income,
        step4b_deductions=w4_deductions(deductions, filing_status, rules),
        confidence=confidence,
        explanation=explanation,
    )


def analyze_bonus(bonus: float, marginal: float, rules: TaxRuleTable) -> BonusAnalysis:
    """Compare flat supplemental withholding on a bonus with tax at the marginal rate."""
    flat = bonus * rules.withholding.supplemental_rate
    at_marginal = bonus * marginal
    difference = flat - at_marginal
    tolerance = rules.withholding.bonus_tolerance

    if abs(difference) <= tolerance:
        status: BonusStatus = "adequate"
        explanation = "The flat supplemental rate is close to your marginal rate."
    elif difference > 0:
        status = "overwithheld"
        explanation = (
            f"Your bonus is overwithheld by ~${round(difference):,}. Consider the "
            "aggregate method or reducing other withholding."
        )
    else:
        status = "underwithheld"
        explanation = (
            f"Your bonus is underwithheld by ~${round(abs(difference)):,}. Consider "
            "adding extra withholding on your W-4."
        )

    return BonusAnalysis(
        bonus=bonus,
        flat_withholding=flat,
        marginal_withholding=at_marginal,
        difference=difference,
        status=status,
        explanation=explanation,
    )


def analyze_two_earners(
    wages_self: float,
    withholding_self: float,
    wages_spouse: float,
    withholding_spouse: float,
    rules: TaxRuleTable,
) -> TwoEarnerAnalysis:
    """Surface the marriage penalty or bonus and the combined withholding shortfall.

    Each spouse is taxed as a single filer on wages less the single
    standard deduction; the joint figure uses the joint brackets and
    deduction. A positive ``marriage_effect`` is a penalty.
    """
    single_std = rules.standard_deduction_for("single")
    joint_std = rules.standard_deduction_for("mfj")
    tax_self = progressive_tax(wages_self - single_std, rules.brackets("single"))
    tax_spouse = progressive_tax(wages_spouse - single_std, rules.brackets("single"))
    sum_as_singles = tax_self + tax_spouse

    combined_income = wages_self + wages_spouse
    combined_withholding = withholding_self + withholding_spouse
    joint_tax = progressive_tax(combined_income - joint_std, rules.brackets("mfj"))

    marriage_effect = joint_tax - sum_as_singles
    underwithholding = joint_tax - combined_withholding

    w = rules.withholding
    adjustment = (
        float(math.ceil(underwithholding / w.two_earner_pay_periods))
        if underwithholding > 0
        else 0.0
    )
    notice = w.two_earner_notice_threshold

    if underwithholding > notice:
        explanation = (
            f"Combined withholding falls ~${round(underwithholding):,} short. The higher "
            f"earner should add ~${adjustment:,.0f}/paycheck, or use the IRS Multiple "
            "Jobs Worksheet."
        )
    elif underwithholding < -notice:
        explanation = (
            f"You're overwithheld by ~${round(abs(underwithholding)):,} combined. The "
            "Multiple Jobs Worksheet can help you trim it."
        )
    else:
        explanation = "Your combined withholding is close to your expected tax."

    if marriage_effect > notice:
        explanation += (
            f" Filing jointly costs ~${round(marriage_effect):,} more than two single "
            "returns (marriage penalty)."
        )
    elif marriage_effect < -notice:
        explanation += (
            f" Filing jointly saves ~${round(abs(marriage_effect)):,} compared to two "
            "single returns (marriage bonus)."
        )

    return TwoEarnerAnalysis(
        combined_income=combined_income,
        combined_withholding=combined_withholding,
        sum_as_singles=sum_as_singles,
        joint_tax=joint_tax,
        marriage_effect=marriage_effect,
        underwithholding=underwithholding,
        higher_earner="self" if wages_self >= wages_spouse else "spouse",
        higher_earner_adjustment=adjustment,
        explanation=explanation,
    )
