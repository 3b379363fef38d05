"""Gross income to taxable income, and the ordinary tax on it."""

from __future__ import annotations

from dataclasses import dataclass

from taxplan.config.schema import DeductionInputs, FilingProfile, IncomeInputs
from taxplan.taxes.brackets import bracket_headroom, marginal_rate, progressive_tax
from taxplan.taxes.rules import TaxRuleTable
from taxplan.taxes.self_employment import (
    SelfEmploymentTaxResult,
    calculate_self_employment_tax,
)


@dataclass(frozen=True)
class IncomeSummary:
    """AGI, taxable income, and ordinary federal tax for the year."""

    gross_income: float
    business_deductions: float
    net_self_employment_income: float
    above_the_line: float
    agi: float
    deduction_amount: float
    taxable_income: float
    federal_tax: float
    marginal_rate: float
    effective_rate: float
    bracket_headroom: float


def business_deductions(deductions: DeductionInputs, rules: TaxRuleTable) -> float:
    """Schedule C style expense total, with mileage at the standard rate."""
    return (
        deductions.home_office
        + deductions.business_miles * rules.deductions.mileage_rate
        + deductions.equipment
        + deductions.other_business_expenses
    )


def simplified_home_office(square_feet: float, rules: TaxRuleTable) -> float:
    """Simplified-method home office deduction ($ per sq ft up to the area cap)."""
    area = min(max(0.0, square_feet), rules.deductions.home_office_max_sqft)
    return area * rules.deductions.home_office_rate_per_sqft


def net_self_employment_income(
    income: IncomeInputs, deductions: DeductionInputs, rules: TaxRuleTable
) -> float:
    return max(0.0, income.self_employment_income - business_deductions(deductions, rules))


def self_employment_tax_for(
    profile: FilingProfile,
    income: IncomeInputs,
    deductions: DeductionInputs,
    rules: TaxRuleTable,
) -> SelfEmploymentTaxResult:
    """SE tax for the household, wiring W-2 wages into the wage base.

    Only the taxpayer's own wages share their Social Security wage base.
    The Additional Medicare threshold applies per return, so joint filers
    count the spouse's wages too.
    """
    net_se = net_self_employment_income(income, deductions, rules)
    ss_withheld = income.w2_social_security_withheld if income.has_w2_job else 0.0
    combined = net_se + income.w2_wages
    if profile.filing_status == "mfj":
        combined += income.spouse_wages
    return calculate_self_employment_tax(
        net_se,
        profile.filing_status,
        rules,
        w2_wages=income.w2_wages,
        w2_social_security_withheld=ss_withheld,
        combined_earned_income=combined,
    )


def assemble_income(
    profile: FilingProfile,
    income: IncomeInputs,
    deductions: DeductionInputs,
    rules: TaxRuleTable,
    se_tax: SelfEmploymentTaxResult,
) -> IncomeSummary:
    """Walk gross income down to taxable income and apply the brackets.

    Args:
        profile: Filing status selects brackets and standard deduction.
        income: Annual income figures.
        deductions: Business expenses and personal deductions.
        rules: Rule table for the tax year.
        se_tax: Result of :func:`self_employment_tax_for`; its deductible
            half is an above-the-line deduction.

    Returns:
        IncomeSummary with AGI, taxable income, and ordinary tax.
    """
    expenses = business_deductions(deductions, rules)
    net_se = max(0.0, income.self_employment_income - expenses)

    student_loan = min(
        deductions.student_loan_interest, rules.deductions.student_loan_interest_cap
    )
    above_the_line = (
        se_tax.deductible_portion
        + deductions.health_insurance_premium
        + deductions.retirement_contributions
        + deductions.traditional_ira
        + deductions.hsa_contributions
        + student_loan
    )

    gross_income = net_se + income.household_wages + income.other_income
    agi = max(0.0, gross_income - above_the_line)

    standard = rules.standard_deduction_for(profile.filing_status)
    if deductions.use_standard_deduction:
        deduction_amount = standard
    else:
        # Itemizing never does worse than the standard deduction
        deduction_amount = max(standard, deductions.itemized_total)

    taxable_income = max(0.0, agi - deduction_amount)
    brackets = rules.brackets(profile.filing_status)
    federal_tax = progressive_tax(taxable_income, brackets)

    return IncomeSummary(
        gross_income=gross_income,
        business_deductions=expenses,
        net_self_employment_income=net_se,
        above_the_line=above_the_line,
        agi=agi,
        deduction_amount=deduction_amount,
        taxable_income=taxable_income,
        federal_tax=federal_tax,
        marginal_rate=marginal_rate(taxable_income, brackets),
        effective_rate=federal_tax / gross_income if gross_income > 0 else 0.0,
        bracket_headroom=bracket_headroom(taxable_income, brackets),
    )
