"""Progressive bracket evaluation.

Bracket lists are assumed valid (ascending, final tier unbounded); that is
checked once when a rule table is loaded.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray

from taxplan.taxes.rules import Bracket


def progressive_tax(taxable_income: float, brackets: Sequence[Bracket]) -> float:
    """Compute tax using progressive brackets."""
    if taxable_income <= 0:
        return 0.0
    tax = 0.0
    prev_bound = 0.0
    for bracket in brackets:
        upper_bound = bracket.ceiling
        taxable_in_bracket = min(taxable_income, upper_bound) - prev_bound
        if taxable_in_bracket <= 0:
            break
        tax += taxable_in_bracket * bracket.rate
        prev_bound = upper_bound
    return tax


def progressive_tax_vectorized(
    taxable_income: NDArray[np.floating[Any]],
    brackets: Sequence[Bracket],
) -> NDArray[np.floating[Any]]:
    """Vectorized progressive bracket computation over an income grid."""
    tax: NDArray[np.floating[Any]] = np.zeros_like(taxable_income, dtype=float)
    prev_bound = 0.0
    for bracket in brackets:
        upper_bound = bracket.ceiling
        taxable_in_bracket = np.minimum(taxable_income, upper_bound) - prev_bound
        tax += np.maximum(taxable_in_bracket, 0.0) * bracket.rate
        prev_bound = upper_bound
    return tax


def marginal_rate(taxable_income: float, brackets: Sequence[Bracket]) -> float:
    """Return the rate of the first bracket whose ceiling covers the income."""
    for bracket in brackets:
        if taxable_income <= bracket.ceiling:
            return float(bracket.rate)
    return float(brackets[-1].rate)


def marginal_rate_vectorized(
    taxable_income: NDArray[np.floating[Any]],
    brackets: Sequence[Bracket],
) -> NDArray[np.floating[Any]]:
    """Marginal rate at each point of an income grid."""
    ceilings = np.array([b.ceiling for b in brackets], dtype=float)
    rates = np.array([b.rate for b in brackets], dtype=float)
    idx = np.searchsorted(ceilings, taxable_income, side="left")
    idx = np.minimum(idx, len(rates) - 1)
    result: NDArray[np.floating[Any]] = rates[idx]
    return result


def bracket_headroom(taxable_income: float, brackets: Sequence[Bracket]) -> float:
    """Taxable income that can be added before the next bracket begins.

    Returns ``math.inf`` inside the top bracket.
    """
    income = max(0.0, taxable_income)
    for bracket in brackets:
        if income <= bracket.ceiling:
            return bracket.ceiling - income
    return math.inf
