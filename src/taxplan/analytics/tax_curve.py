"""Ordinary income tax across a grid of incomes."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from taxplan.config.schema import FilingStatus
from taxplan.taxes.brackets import marginal_rate_vectorized, progressive_tax_vectorized
from taxplan.taxes.rules import TaxRuleTable


@dataclass(frozen=True)
class TaxCurve:
    """Tax, marginal and effective rates at each grid income.

    ``income`` is AGI; ``taxable_income`` is AGI less the standard
    deduction when one was applied.
    """

    filing_status: FilingStatus
    income: np.ndarray
    taxable_income: np.ndarray
    tax: np.ndarray
    marginal_rate: np.ndarray
    effective_rate: np.ndarray


def default_income_grid(upper: float = 500_000.0, n_points: int = 51) -> np.ndarray:
    return np.linspace(0.0, upper, n_points)


def tax_curve(
    rules: TaxRuleTable,
    filing_status: FilingStatus,
    incomes: np.ndarray | None = None,
    apply_standard_deduction: bool = True,
) -> TaxCurve:
    """Evaluate the bracket schedule for one filing status over an income grid.

    Args:
        rules: Rule table for the tax year.
        filing_status: Selects brackets and standard deduction.
        incomes: AGI values to evaluate. Defaults to $0-$500k in $10k steps.
        apply_standard_deduction: Subtract the standard deduction before
            applying brackets.

    Returns:
        TaxCurve with one entry per grid income.
    """
    income = default_income_grid() if incomes is None else np.asarray(incomes, dtype=float)
    income = np.maximum(income, 0.0)

    deduction = rules.standard_deduction_for(filing_status) if apply_standard_deduction else 0.0
    taxable = np.maximum(income - deduction, 0.0)

    brackets = rules.brackets(filing_status)
    tax = progressive_tax_vectorized(taxable, brackets)
    marginal = marginal_rate_vectorized(taxable, brackets)

    effective = np.zeros_like(income)
    positive = income > 0
    effective[positive] = tax[positive] / income[positive]

    return TaxCurve(
        filing_status=filing_status,
        income=income,
        taxable_income=taxable,
        tax=tax,
        marginal_rate=marginal,
        effective_rate=effective,
    )
