"""Solo 401(k) and SEP-IRA contribution sizing for self-employment income."""

from __future__ import annotations

from dataclasses import dataclass

from taxplan.config.schema import AgeBand
from taxplan.taxes.rules import TaxRuleTable


@dataclass(frozen=True)
class RetirementOption:
    """Maximum contribution under one plan type and its income-tax value."""

    name: str
    employee_contribution: float
    employer_contribution: float
    total_contribution: float
    tax_savings: float


@dataclass(frozen=True)
class RetirementSizing:
    """Contribution ceilings for a self-employed saver."""

    age_band: AgeBand
    net_earnings: float
    employee_limit: float
    total_limit: float
    solo_401k: RetirementOption
    sep_ira: RetirementOption


def size_retirement_contributions(
    net_se_income: float,
    band: AgeBand,
    marginal: float,
    rules: TaxRuleTable,
) -> RetirementSizing:
    """Size Solo 401(k) and SEP-IRA contributions.

    Net earnings for plan purposes are approximated as 92.35% of net SE
    income. The employer share is 25% of that, capped so employee plus
    employer stays within the age band's total limit.

    Args:
        net_se_income: Net self-employment income.
        band: Age band selecting catch-up and total limits.
        marginal: Marginal income-tax rate used to value each option.
        rules: Rule table for the tax year.

    Returns:
        RetirementSizing with both plan options.
    """
    r = rules.retirement
    net_earnings = max(0.0, net_se_income) * rules.self_employment.base_multiplier
    employer_max = net_earnings * r.employer_contribution_rate

    employee_limit = r.employee_limit(band)
    total_limit = r.total_contribution_limit[band]

    employee = min(employee_limit, net_earnings)
    employer = max(0.0, min(employer_max, total_limit - employee))
    solo_total = min(employee + employer, total_limit)

    sep = min(employer_max, r.sep_ira_limit)

    return RetirementSizing(
        age_band=band,
        net_earnings=net_earnings,
        employee_limit=employee_limit,
        total_limit=total_limit,
        solo_401k=RetirementOption(
            name="Solo 401(k)",
            employee_contribution=employee,
            employer_contribution=employer,
            total_contribution=solo_total,
            tax_savings=solo_total * marginal,
        ),
        sep_ira=RetirementOption(
            name="SEP-IRA",
            employee_contribution=0.0,
            employer_contribution=sep,
            total_contribution=sep,
            tax_savings=sep * marginal,
        ),
    )
