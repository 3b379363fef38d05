"""Versioned per-year tax rule tables.

Each tax year ships as a YAML file under ``taxes/tables/``. Tables are
validated once on load; the calculators downstream trust them and never
re-check bracket ordering per call.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from datetime import date
from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from taxplan.config.schema import AGE_BANDS, FILING_STATUSES, AgeBand, FilingStatus
from taxplan.io.yaml_loader import load_package_yaml, match_package_files
from taxplan.utils.exceptions import ConfigError

logger = logging.getLogger(__name__)

_TABLE_DIR = "taxes/tables"
_TABLE_PATTERN = re.compile(r"^tax_rules_(\d{4})\.yaml$")


def _read_only(mapping: dict[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(mapping)


# Cached tables are shared between callers, so nested mappings are read-only views
ByStatus = Annotated[dict[FilingStatus, float], AfterValidator(_read_only)]
ByAgeBand = Annotated[dict[AgeBand, float], AfterValidator(_read_only)]


class _Frozen(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Bracket(_Frozen):
    """One progressive bracket: income up to ``upper_bound`` taxed at ``rate``."""

    upper_bound: float | None = Field(description="Ceiling of the bracket; None if unbounded")
    rate: float = Field(ge=0, le=1)

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(f"bracket must be [upper_bound, rate], got {data!r}")
            return {"upper_bound": data[0], "rate": data[1]}
        return data

    @property
    def ceiling(self) -> float:
        return math.inf if self.upper_bound is None else self.upper_bound


class SelfEmploymentRules(_Frozen):
    base_multiplier: float = Field(gt=0, le=1)
    social_security_rate: float = Field(ge=0, le=1)
    medicare_rate: float = Field(ge=0, le=1)
    additional_medicare_rate: float = Field(ge=0, le=1)
    social_security_wage_base: float = Field(gt=0)


class RetirementRules(_Frozen):
    employee_deferral_limit: float = Field(ge=0)
    catch_up_50_plus: float = Field(ge=0)
    catch_up_60_to_63: float = Field(ge=0)
    total_contribution_limit: ByAgeBand
    sep_ira_limit: float = Field(ge=0)
    employer_contribution_rate: float = Field(default=0.25, ge=0, le=1)

    def employee_limit(self, band: AgeBand) -> float:
        """Employee deferral ceiling including any catch-up for the band."""
        catch_up: dict[AgeBand, float] = {
            "under_50": 0.0,
            "50_to_59": self.catch_up_50_plus,
            "60_to_63": self.catch_up_60_to_63,
            "64_plus": self.catch_up_50_plus,
        }
        return self.employee_deferral_limit + catch_up[band]


class DependentCareCaps(_Frozen):
    one: float = Field(ge=0)
    two_or_more: float = Field(ge=0)


class CreditRules(_Frozen):
    child_credit_amount: float = Field(ge=0)
    child_credit_phaseout_threshold: ByStatus
    child_credit_phaseout_step: float = Field(gt=0)
    child_credit_phaseout_per_step: float = Field(ge=0)
    other_dependent_credit_amount: float = Field(ge=0)
    dependent_care_expense_caps: DependentCareCaps
    dependent_care_max_rate: float = Field(ge=0, le=1)
    dependent_care_min_rate: float = Field(ge=0, le=1)
    dependent_care_full_rate_agi: float = Field(ge=0)
    dependent_care_rate_step_agi: float = Field(gt=0)
    dependent_care_rate_step: float = Field(ge=0, le=1)
    dependent_care_floor_agi: float = Field(ge=0)


class DeductionRules(_Frozen):
    student_loan_interest_cap: float = Field(ge=0)
    mileage_rate: float = Field(ge=0)
    home_office_rate_per_sqft: float = Field(ge=0)
    home_office_max_sqft: float = Field(ge=0)


class WithholdingRules(_Frozen):
    supplemental_rate: float = Field(ge=0, le=1)
    gap_tolerance: float = Field(ge=0)
    bonus_tolerance: float = Field(ge=0)
    two_earner_pay_periods: int = Field(gt=0)
    two_earner_notice_threshold: float = Field(ge=0)


class DueDate(_Frozen):
    quarter: str
    period: str
    due_date: date


class SafeHarborRules(_Frozen):
    current_year_pct: float = Field(gt=0)
    prior_year_pct: float = Field(gt=0)
    high_income_prior_year_pct: float = Field(gt=0)
    high_income_agi_threshold: float = Field(ge=0)


class EstimatedPaymentRules(_Frozen):
    due_dates: tuple[DueDate, ...] = Field(min_length=4, max_length=4)
    safe_harbor: SafeHarborRules

    @model_validator(mode="after")
    def _validate_due_dates(self) -> EstimatedPaymentRules:
        dates = [d.due_date for d in self.due_dates]
        if dates != sorted(dates) or len(set(dates)) != len(dates):
            raise ValueError("estimated payment due dates must be strictly ascending")
        return self


class TaxRuleTable(_Frozen):
    """All federal parameters for one tax year."""

    tax_year: int = Field(ge=2000, le=2100)
    ordinary_brackets: Annotated[
        dict[FilingStatus, tuple[Bracket, ...]], AfterValidator(_read_only)
    ]
    standard_deduction: ByStatus
    self_employment: SelfEmploymentRules
    additional_medicare_threshold: ByStatus
    retirement: RetirementRules
    credits: CreditRules
    deductions: DeductionRules
    withholding: WithholdingRules
    estimated_payments: EstimatedPaymentRules

    @model_validator(mode="after")
    def _validate_table(self) -> TaxRuleTable:
        for name in (
            "ordinary_brackets",
            "standard_deduction",
            "additional_medicare_threshold",
        ):
            _require_keys(name, getattr(self, name), FILING_STATUSES)
        _require_keys(
            "credits.child_credit_phaseout_threshold",
            self.credits.child_credit_phaseout_threshold,
            FILING_STATUSES,
        )
        _require_keys(
            "retirement.total_contribution_limit",
            self.retirement.total_contribution_limit,
            AGE_BANDS,
        )
        for status, brackets in self.ordinary_brackets.items():
            validate_brackets(brackets, label=status)
        for status, amount in self.standard_deduction.items():
            if amount < 0:
                raise ValueError(f"standard_deduction[{status}] must be non-negative")
        return self

    def brackets(self, filing_status: FilingStatus) -> tuple[Bracket, ...]:
        return self.ordinary_brackets[filing_status]

    def standard_deduction_for(self, filing_status: FilingStatus) -> float:
        return self.standard_deduction[filing_status]


def _require_keys(name: str, mapping: Mapping[Any, Any], keys: tuple[str, ...]) -> None:
    missing = [k for k in keys if k not in mapping]
    if missing:
        raise ValueError(f"{name} is missing entries for: {', '.join(missing)}")


def validate_brackets(brackets: Sequence[Bracket], label: str = "") -> None:
    """Check a bracket list is ascending, gap-free, and ends unbounded.

    Raises:
        ValueError: If the list is empty, out of order, or has a bounded
            final tier or an unbounded tier before the end.
    """
    prefix = f"brackets[{label}]: " if label else "brackets: "
    if not brackets:
        raise ValueError(prefix + "at least one bracket is required")
    previous = 0.0
    for i, bracket in enumerate(brackets[:-1]):
        if bracket.upper_bound is None:
            raise ValueError(prefix + f"tier {i} is unbounded but is not the last tier")
        if bracket.upper_bound <= previous:
            raise ValueError(
                prefix + f"tier {i} ceiling {bracket.upper_bound} is not above {previous}"
            )
        previous = bracket.upper_bound
    if brackets[-1].upper_bound is not None:
        raise ValueError(prefix + "final tier must be unbounded (upper_bound: null)")


def available_tax_years() -> list[int]:
    """Tax years with a shipped rule table, ascending."""
    return sorted(int(m.group(1)) for m in match_package_files(_TABLE_DIR, _TABLE_PATTERN))


def parse_rule_table(data: Any, source: str = "<data>") -> TaxRuleTable:
    """Validate raw table data, converting failures into ``ConfigError``."""
    try:
        return TaxRuleTable.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid tax rule table {source}: {exc}") from exc


@lru_cache(maxsize=None)
def load_rule_table(tax_year: int = 2026) -> TaxRuleTable:
    """Load and validate the shipped rule table for ``tax_year``.

    Tables are cached; the returned model is frozen.

    Raises:
        ConfigError: If no table exists for the year or it fails validation.
    """
    relative = f"{_TABLE_DIR}/tax_rules_{tax_year}.yaml"
    try:
        data = load_package_yaml(relative)
    except FileNotFoundError as exc:
        raise ConfigError(
            f"no tax rule table for {tax_year}; available: {available_tax_years()}"
        ) from exc
    table = parse_rule_table(data, source=relative)
    if table.tax_year != tax_year:
        raise ConfigError(f"{relative} declares tax_year {table.tax_year}")
    logger.info("Loaded tax rule table for %d", tax_year)
    return table
