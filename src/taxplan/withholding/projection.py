"""Project full-year federal withholding from a partial-year pay stub."""

from __future__ import annotations

from taxplan.config.schema import PERIODS_PER_YEAR, PayFrequency, PayStubSnapshot


def periods_per_year(frequency: PayFrequency) -> int:
    """Number of pay periods in a year for a pay frequency."""
    return PERIODS_PER_YEAR[frequency]


def project_annual_withholding(pay_stub: PayStubSnapshot) -> float:
    """Extrapolate annual withholding from year-to-date figures.

    When at least one period has elapsed, the observed average per period
    is carried forward over the remaining periods. At the start of the year
    there is no history, so the current period's withholding is annualized.
    """
    periods = periods_per_year(pay_stub.pay_frequency)
    remaining = min(pay_stub.periods_remaining, periods)
    elapsed = periods - remaining

    if elapsed > 0:
        average = pay_stub.ytd_withholding / elapsed
        return pay_stub.ytd_withholding + average * remaining

    return pay_stub.federal_withholding * periods
