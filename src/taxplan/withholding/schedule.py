"""Quarterly estimated payments and the safe-harbor check."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from taxplan.taxes.rules import TaxRuleTable


@dataclass(frozen=True)
class QuarterlyPayment:
    """One estimated-tax installment."""

    quarter: str
    period: str
    due_date: date
    amount: float
    cumulative_income_pct: float
    is_past: bool


@dataclass(frozen=True)
class SafeHarborCheck:
    """Whether prepayments are on track to avoid an underpayment penalty.

    Informational only: the quarterly schedule is not adjusted by it.

    Attributes:
        current_year_target: Share of this year's liability (90%).
        prior_year_target: 100% of last year's tax, or 110% when last
            year's AGI was over the high-income threshold. None when the
            prior-year tax is unknown.
        required_payment: The smaller of the available targets.
        payments: Projected withholding plus estimated payments made.
        shortfall: Amount still needed to reach ``required_payment``.
        is_covered: True when ``payments`` reach ``required_payment``.
    """

    current_year_target: float
    prior_year_target: float | None
    required_payment: float
    payments: float
    shortfall: float
    is_covered: bool


def quarterly_schedule(
    total_liability: float,
    prior_withholding_credit: float,
    rules: TaxRuleTable,
    as_of: date,
) -> tuple[QuarterlyPayment, ...]:
    """Split what withholding does not cover into four equal installments.

    Args:
        total_liability: Tax after credits for the year.
        prior_withholding_credit: Withholding already expected to be paid.
        rules: Rule table holding the due dates.
        as_of: The date the ``is_past`` flags are measured against.

    Returns:
        Four QuarterlyPayment entries in due-date order.
    """
    net_owed = max(0.0, total_liability - prior_withholding_credit)
    quarterly_amount = net_owed / 4
    due_dates = rules.estimated_payments.due_dates
    return tuple(
        QuarterlyPayment(
            quarter=entry.quarter,
            period=entry.period,
            due_date=entry.due_date,
            amount=quarterly_amount,
            cumulative_income_pct=(index + 1) / len(due_dates) * 100,
            is_past=as_of > entry.due_date,
        )
        for index, entry in enumerate(due_dates)
    )


def safe_harbor_check(
    total_liability: float,
    payments: float,
    rules: TaxRuleTable,
    prior_year_tax: float | None = None,
    prior_year_agi: float | None = None,
) -> SafeHarborCheck:
    """Compare prepayments against the current- and prior-year safe harbors."""
    sh = rules.estimated_payments.safe_harbor
    current_target = max(0.0, total_liability) * sh.current_year_pct

    prior_target: float | None = None
    if prior_year_tax is not None:
        pct = sh.prior_year_pct
        if prior_year_agi is not None and prior_year_agi > sh.high_income_agi_threshold:
            pct = sh.high_income_prior_year_pct
        prior_target = prior_year_tax * pct

    required = current_target if prior_target is None else min(current_target, prior_target)
    payments = max(0.0, payments)
    return SafeHarborCheck(
        current_year_target=current_target,
        prior_year_target=prior_target,
        required_payment=required,
        payments=payments,
        shortfall=max(0.0, required - payments),
        is_covered=payments >= required,
    )
