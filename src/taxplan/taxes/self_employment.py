"""Self-employment (SECA) tax with W-2 wage base interaction."""

from __future__ import annotations

from dataclasses import dataclass

from taxplan.config.schema import FilingStatus
from taxplan.taxes.rules import TaxRuleTable


@dataclass(frozen=True)
class SelfEmploymentTaxResult:
    """Breakdown of self-employment tax for one year.

    Attributes:
        base: Net SE income times the 92.35% multiplier.
        social_security: 12.4% on the part of ``base`` that still fits
            under the wage base after W-2 wages.
        medicare: 2.9% on all of ``base``.
        additional_medicare: 0.9% on combined earned income above the
            filing-status threshold.
        total: Sum of the three components.
        deductible_portion: Half of Social Security plus Medicare. The
            Additional Medicare component is never deductible.
        wage_base_remaining: Wage base room left after W-2 wages.
        w2_social_security_withheld: Employee Social Security already
            withheld on W-2 wages (informational).
    """

    base: float = 0.0
    social_security: float = 0.0
    medicare: float = 0.0
    additional_medicare: float = 0.0
    total: float = 0.0
    deductible_portion: float = 0.0
    wage_base_remaining: float = 0.0
    w2_social_security_withheld: float = 0.0


def calculate_self_employment_tax(
    net_se_income: float,
    filing_status: FilingStatus,
    rules: TaxRuleTable,
    w2_wages: float = 0.0,
    w2_social_security_withheld: float = 0.0,
    combined_earned_income: float | None = None,
) -> SelfEmploymentTaxResult:
    """Compute SE tax, letting W-2 wages claim the Social Security wage base first.

    Args:
        net_se_income: Net self-employment income (after business expenses).
        filing_status: Selects the Additional Medicare threshold.
        rules: Rule table for the tax year.
        w2_wages: The self-employed person's own W-2 wages.
        w2_social_security_withheld: Employee Social Security withheld on
            those wages; carried through for display only.
        combined_earned_income: Earned income measured against the
            Additional Medicare threshold. Defaults to
            ``net_se_income + w2_wages``; joint filers pass household wages.

    Returns:
        SelfEmploymentTaxResult with each component and the deductible half.
    """
    se = rules.self_employment
    net_se_income = max(0.0, net_se_income)
    w2_wages = max(0.0, w2_wages)

    se_base = net_se_income * se.base_multiplier

    # W-2 wages consume the shared wage base before SE income does
    w2_wage_base_used = min(w2_wages, se.social_security_wage_base)
    wage_base_remaining = max(0.0, se.social_security_wage_base - w2_wage_base_used)

    ss_taxable_base = min(se_base, wage_base_remaining)
    social_security = ss_taxable_base * se.social_security_rate
    medicare = se_base * se.medicare_rate

    if combined_earned_income is None:
        combined_earned_income = net_se_income + w2_wages
    threshold = rules.additional_medicare_threshold[filing_status]
    additional_medicare = (
        max(0.0, combined_earned_income - threshold) * se.additional_medicare_rate
    )

    return SelfEmploymentTaxResult(
        base=se_base,
        social_security=social_security,
        medicare=medicare,
        additional_medicare=additional_medicare,
        total=social_security + medicare + additional_medicare,
        deductible_portion=(social_security + medicare) / 2,
        wage_base_remaining=wage_base_remaining,
        w2_social_security_withheld=max(0.0, w2_social_security_withheld),
    )
