"""Calculation engine: one pass from inputs to a full tax-year result."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from taxplan import __version__
from taxplan.config.schema import (
    CreditInputs,
    DeductionInputs,
    FilingProfile,
    IncomeInputs,
    PayStubSnapshot,
)
from taxplan.core.income import IncomeSummary, assemble_income, self_employment_tax_for
from taxplan.io.serialize import compute_scenario_hash
from taxplan.policies.recommendation import (
    DEFAULT_PERIODS_PER_YEAR,
    BonusAnalysis,
    TwoEarnerAnalysis,
    W4Recommendation,
    analyze_bonus,
    analyze_two_earners,
    recommend_w4,
)
from taxplan.policies.retirement import RetirementSizing, size_retirement_contributions
from taxplan.taxes.credits import CreditResult, calculate_credits, total_tax_liability
from taxplan.taxes.rules import TaxRuleTable, load_rule_table
from taxplan.taxes.self_employment import SelfEmploymentTaxResult
from taxplan.withholding.projection import project_annual_withholding
from taxplan.withholding.schedule import (
    QuarterlyPayment,
    SafeHarborCheck,
    quarterly_schedule,
    safe_harbor_check,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationResult:
    """Everything computed for one scenario and tax year.

    ``withholding_gap`` is signed: positive means a refund, negative means
    tax owed. ``bonus`` is None without an expected bonus, and
    ``two_earner`` is None unless a joint return has spouse wages.
    """

    tax_year: int
    net_self_employment_income: float
    se_tax: SelfEmploymentTaxResult
    income: IncomeSummary
    agi: float
    taxable_income: float
    federal_tax: float
    marginal_rate: float
    effective_rate: float
    credits: CreditResult
    total_credits: float
    total_tax_liability: float
    projected_annual_withholding: float
    withholding_gap: float
    quarterly_schedule: tuple[QuarterlyPayment, ...]
    safe_harbor: SafeHarborCheck
    recommendation: W4Recommendation
    bonus: BonusAnalysis | None
    two_earner: TwoEarnerAnalysis | None
    retirement: RetirementSizing
    scenario_hash: str = ""
    engine_version: str = ""


def projected_household_withholding(
    income: IncomeInputs, pay_stub: PayStubSnapshot | None = None
) -> float:
    """Full-year withholding for the household.

    The taxpayer's share comes from the pay stub when one is given, else
    from ``annual_federal_withholding``. The spouse's annual withholding is
    added on top.
    """
    if pay_stub is not None:
        own = project_annual_withholding(pay_stub)
    else:
        own = income.annual_federal_withholding
    return own + income.spouse_federal_withholding


def calculate(
    profile: FilingProfile,
    income: IncomeInputs,
    deductions: DeductionInputs,
    credits: CreditInputs,
    pay_stub: PayStubSnapshot | None = None,
    *,
    rules: TaxRuleTable | None = None,
    tax_year: int = 2026,
    as_of: date | None = None,
) -> CalculationResult:
    """Run the full tax-year calculation.

    Args:
        profile: Filing status and age.
        income: Annual income and withholding figures.
        deductions: Business expenses and personal deductions.
        credits: Dependents and other credits.
        pay_stub: Latest pay stub, used to project withholding.
        rules: Rule table to use. Loaded for ``tax_year`` when omitted.
        tax_year: Tax year whose rule table is loaded when ``rules`` is None.
        as_of: Date the quarterly ``is_past`` flags are measured against.
            Defaults to January 1 of the tax year.

    Returns:
        CalculationResult with liability, withholding gap, schedule, and
        recommendations.

    Raises:
        ConfigError: If no valid rule table exists for ``tax_year``.
    """
    if rules is None:
        rules = load_rule_table(tax_year)
    if as_of is None:
        as_of = date(rules.tax_year, 1, 1)

    # Self-employment tax comes first: its deductible half feeds AGI
    se_tax = self_employment_tax_for(profile, income, deductions, rules)
    summary = assemble_income(profile, income, deductions, rules, se_tax)
    logger.debug(
        "tax_year=%d agi=%.2f taxable=%.2f federal_tax=%.2f se_tax=%.2f",
        rules.tax_year,
        summary.agi,
        summary.taxable_income,
        summary.federal_tax,
        se_tax.total,
    )

    credit_result = calculate_credits(credits, summary.agi, profile.filing_status, rules)
    liability = total_tax_liability(summary.federal_tax, se_tax.total, credit_result.total)

    projected = projected_household_withholding(income, pay_stub)
    gap = projected - liability
    logger.debug(
        "liability=%.2f projected_withholding=%.2f gap=%.2f", liability, projected, gap
    )

    withholds = income.has_w2_job or income.spouse_federal_withholding > 0
    schedule = quarterly_schedule(liability, projected if withholds else 0.0, rules, as_of)
    safe_harbor = safe_harbor_check(
        liability,
        projected + income.estimated_payments_made,
        rules,
        prior_year_tax=income.prior_year_tax,
        prior_year_agi=income.prior_year_agi,
    )

    periods = pay_stub.periods_per_year if pay_stub is not None else DEFAULT_PERIODS_PER_YEAR
    recommendation = recommend_w4(
        projected,
        liability,
        income,
        deductions,
        credits,
        profile.filing_status,
        rules,
        periods_per_year=periods,
    )

    bonus = None
    if income.expected_bonus > 0:
        bonus = analyze_bonus(income.expected_bonus, summary.marginal_rate, rules)

    two_earner = None
    if profile.filing_status == "mfj" and income.spouse_wages > 0:
        own_withholding = projected - income.spouse_federal_withholding
        two_earner = analyze_two_earners(
            income.w2_wages,
            own_withholding,
            income.spouse_wages,
            income.spouse_federal_withholding,
            rules,
        )

    retirement = size_retirement_contributions(
        summary.net_self_employment_income,
        profile.age_band,
        summary.marginal_rate,
        rules,
    )

    return CalculationResult(
        tax_year=rules.tax_year,
        net_self_employment_income=summary.net_self_employment_income,
        se_tax=se_tax,
        income=summary,
        agi=summary.agi,
        taxable_income=summary.taxable_income,
        federal_tax=summary.federal_tax,
        marginal_rate=summary.marginal_rate,
        effective_rate=summary.effective_rate,
        credits=credit_result,
        total_credits=credit_result.total,
        total_tax_liability=liability,
        projected_annual_withholding=projected,
        withholding_gap=gap,
        quarterly_schedule=schedule,
        safe_harbor=safe_harbor,
        recommendation=recommendation,
        bonus=bonus,
        two_earner=two_earner,
        retirement=retirement,
        scenario_hash=compute_scenario_hash(profile, income, deductions, credits, pay_stub),
        engine_version=__version__,
    )
