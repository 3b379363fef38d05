"""Default scenarios for taxplan."""

from __future__ import annotations

from taxplan.config.schema import (
    CreditInputs,
    DeductionInputs,
    FilingProfile,
    IncomeInputs,
    PayStubSnapshot,
)
from taxplan.io.serialize import Scenario


def default_profile() -> FilingProfile:
    """Default profile: single filer, age 35."""
    return FilingProfile(filing_status="single", age=35)


def default_income() -> IncomeInputs:
    """Default income: W-2 employee with a side business."""
    return IncomeInputs(
        wages=85_000,
        self_employment_income=20_000,
        w2_social_security_withheld=5_270,
    )


def default_deductions() -> DeductionInputs:
    return DeductionInputs(home_office=1_500, business_miles=2_000, equipment=1_200)


def default_credits() -> CreditInputs:
    return CreditInputs()


def default_pay_stub() -> PayStubSnapshot:
    """Default pay stub: biweekly, ten periods in."""
    return PayStubSnapshot(
        gross_pay=3_269.23,
        federal_withholding=380,
        pay_frequency="biweekly",
        ytd_gross=32_692.30,
        ytd_withholding=3_800,
        periods_remaining=16,
    )


def default_scenario() -> Scenario:
    """All five default records, in ``calculate`` argument order."""
    return (
        default_profile(),
        default_income(),
        default_deductions(),
        default_credits(),
        default_pay_stub(),
    )


# --- Quick Start Templates ---


def freelancer_scenario() -> Scenario:
    """Full-time freelancer with no W-2 job, paying quarterly."""
    return (
        FilingProfile(filing_status="single", age=42),
        IncomeInputs(self_employment_income=120_000, prior_year_tax=24_000),
        DeductionInputs(
            home_office=1_500,
            business_miles=4_000,
            equipment=3_000,
            health_insurance_premium=6_000,
        ),
        CreditInputs(),
        None,
    )


def dual_income_scenario() -> Scenario:
    """Married couple, both on payroll, two children in day care."""
    return (
        FilingProfile(filing_status="mfj", age=38),
        IncomeInputs(
            wages=140_000,
            spouse_wages=110_000,
            expected_bonus=15_000,
            spouse_federal_withholding=11_000,
        ),
        DeductionInputs(retirement_contributions=23_000),
        CreditInputs(children_under_17=2, dependent_care_expenses=8_000),
        PayStubSnapshot(
            gross_pay=5_833.33,
            federal_withholding=780,
            pay_frequency="semimonthly",
            ytd_gross=58_333.30,
            ytd_withholding=7_800,
            periods_remaining=14,
        ),
    )
