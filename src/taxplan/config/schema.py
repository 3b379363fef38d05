"""Pydantic v2 input records for taxplan.

Money fields and counts are clamped to zero rather than rejected, so a
half-typed negative value recomputes cleanly instead of raising.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

FilingStatus = Literal["single", "mfj", "mfs", "hoh"]
AgeBand = Literal["under_50", "50_to_59", "60_to_63", "64_plus"]
PayFrequency = Literal["weekly", "biweekly", "semimonthly", "monthly", "quarterly"]

FILING_STATUSES: tuple[FilingStatus, ...] = ("single", "mfj", "mfs", "hoh")
AGE_BANDS: tuple[AgeBand, ...] = ("under_50", "50_to_59", "60_to_63", "64_plus")

PERIODS_PER_YEAR: dict[PayFrequency, int] = {
    "weekly": 52,
    "biweekly": 26,
    "semimonthly": 24,
    "monthly": 12,
    "quarterly": 4,
}


def _clamp(value: float) -> float:
    return max(0.0, value)


def _clamp_count(value: int) -> int:
    return max(0, value)


Money = Annotated[float, AfterValidator(_clamp)]
Count = Annotated[int, AfterValidator(_clamp_count)]


def age_band(age: int) -> AgeBand:
    """Map an age onto its retirement catch-up band."""
    if age >= 64:
        return "64_plus"
    if age >= 60:
        return "60_to_63"
    if age >= 50:
        return "50_to_59"
    return "under_50"


class FilingProfile(BaseModel):
    """Who is filing: status, age, and whether a spouse is on the return."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filing_status: FilingStatus = "single"
    age: Count = Field(default=40, description="Taxpayer age at year end")
    has_spouse: bool | None = Field(
        default=None, description="Defaults to True for married filing jointly"
    )

    @model_validator(mode="before")
    @classmethod
    def _default_spouse(cls, data: object) -> object:
        if isinstance(data, dict) and data.get("has_spouse") is None:
            data = dict(data)
            data["has_spouse"] = data.get("filing_status") == "mfj"
        return data

    @property
    def age_band(self) -> AgeBand:
        return age_band(self.age)


class IncomeInputs(BaseModel):
    """Annual income and known prepayments."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    wages: Money = Field(default=0.0, description="Taxpayer W-2 wages")
    spouse_wages: Money = Field(default=0.0, description="Spouse W-2 wages")
    self_employment_income: Money = Field(
        default=0.0, description="Gross 1099 / self-employment receipts"
    )
    other_income: Money = 0.0
    expected_bonus: Money = Field(default=0.0, description="Supplemental wages expected")
    has_w2_job: bool | None = Field(default=None, description="Defaults to wages > 0")
    w2_social_security_withheld: Money = 0.0
    annual_federal_withholding: Money = Field(
        default=0.0, description="Known annual withholding, used when no pay stub is given"
    )
    spouse_federal_withholding: Money = Field(
        default=0.0, description="Spouse annual federal withholding"
    )
    estimated_payments_made: Money = 0.0
    prior_year_tax: Money | None = None
    prior_year_agi: Money | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_w2_flag(cls, data: object) -> object:
        if isinstance(data, dict) and data.get("has_w2_job") is None:
            data = dict(data)
            wages = data.get("wages") or 0
            data["has_w2_job"] = float(wages) > 0
        return data

    @property
    def w2_wages(self) -> float:
        """Taxpayer's own W-2 wages including supplemental pay.

        Regular ``wages`` count only while ``has_w2_job`` is set.
        """
        wages = self.wages if self.has_w2_job else 0.0
        return wages + self.expected_bonus

    @property
    def household_wages(self) -> float:
        return self.w2_wages + self.spouse_wages


class DeductionInputs(BaseModel):
    """Business expenses and personal deductions."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    home_office: Money = 0.0
    business_miles: Money = 0.0
    equipment: Money = 0.0
    other_business_expenses: Money = 0.0
    health_insurance_premium: Money = Field(
        default=0.0, description="Self-employed health insurance premium"
    )
    retirement_contributions: Money = Field(
        default=0.0, description="Pre-tax 401(k) / SEP / solo plan contributions"
    )
    traditional_ira: Money = 0.0
    hsa_contributions: Money = 0.0
    student_loan_interest: Money = 0.0
    use_standard_deduction: bool = True
    itemized_total: Money = 0.0


class CreditInputs(BaseModel):
    """Dependents and fixed credits."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    children_under_17: Count = 0
    other_dependents: Count = 0
    dependent_care_expenses: Money = 0.0
    education_credits: Money = 0.0
    other_credits: Money = 0.0


class PayStubSnapshot(BaseModel):
    """A single pay stub observation, supplied fresh on every recompute."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_pay: Money = 0.0
    federal_withholding: Money = Field(default=0.0, description="Withholding this period")
    pay_frequency: PayFrequency = "biweekly"
    ytd_gross: Money = 0.0
    ytd_withholding: Money = 0.0
    periods_remaining: Count = 0

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self.pay_frequency]
