"""Tests for the calculation engine."""

from __future__ import annotations

import math
from datetime import date

import pytest

from taxplan import __version__
from taxplan.config.defaults import default_scenario, dual_income_scenario, freelancer_scenario
from taxplan.config.schema import (
    CreditInputs,
    DeductionInputs,
    FilingProfile,
    IncomeInputs,
    PayStubSnapshot,
)
from taxplan.core.engine import calculate, projected_household_withholding
from taxplan.taxes.rules import TaxRuleTable
from taxplan.utils.exceptions import ConfigError


class TestCalculate:
    def test_all_zero_inputs(self) -> None:
        """Empty inputs still produce a complete result."""
        result = calculate(FilingProfile(), IncomeInputs(), DeductionInputs(), CreditInputs())
        assert result.tax_year == 2026
        assert result.total_tax_liability == 0.0
        assert result.withholding_gap == 0.0
        assert result.recommendation.status == "optimal"
        assert isinstance(result.quarterly_schedule, tuple)
        assert len(result.quarterly_schedule) == 4
        assert all(p.amount == 0.0 for p in result.quarterly_schedule)
        assert result.bonus is None
        assert result.two_earner is None
        assert result.retirement.solo_401k.total_contribution == 0.0
        assert len(result.scenario_hash) == 64
        assert result.engine_version == __version__

    def test_freelancer_25k(self) -> None:
        """$25k of 1099 income with no W-2 job pays it all quarterly."""
        income = IncomeInputs(self_employment_income=25_000)
        result = calculate(FilingProfile(), income, DeductionInputs(), CreditInputs())

        deductible = (2_862.85 + 669.5375) / 2
        agi = 25_000 - deductible
        federal = (agi - 16_100) * 0.10
        liability = federal + 3_532.3875

        assert result.net_self_employment_income == pytest.approx(25_000)
        assert result.se_tax.total == pytest.approx(3_532.39, abs=0.01)
        assert result.agi == pytest.approx(agi)
        assert result.federal_tax == pytest.approx(federal)
        assert result.total_tax_liability == pytest.approx(liability)
        assert result.quarterly_schedule[0].amount == pytest.approx(liability / 4)
        assert result.recommendation.status == "underwithheld"
        assert result.recommendation.confidence == "medium"
        # No pay stub: the shortfall is spread over 12 months
        assert result.recommendation.extra_per_period == math.ceil(liability / 12)

    def test_rules_year_override(self, rules_2025: TaxRuleTable) -> None:
        income = IncomeInputs(wages=176_100, self_employment_income=10_000)
        result = calculate(
            FilingProfile(), income, DeductionInputs(), CreditInputs(), rules=rules_2025
        )
        assert result.tax_year == 2025
        assert result.se_tax.social_security == 0.0
        assert result.se_tax.medicare == pytest.approx(267.815)

    def test_tax_year_argument(self) -> None:
        result = calculate(
            FilingProfile(), IncomeInputs(), DeductionInputs(), CreditInputs(), tax_year=2025
        )
        assert result.tax_year == 2025
        assert result.quarterly_schedule[0].due_date == date(2025, 4, 15)

    def test_unknown_tax_year(self) -> None:
        with pytest.raises(ConfigError):
            calculate(
                FilingProfile(), IncomeInputs(), DeductionInputs(), CreditInputs(), tax_year=1990
            )

    def test_pay_stub_projection_and_periods(self) -> None:
        income = IncomeInputs(wages=60_000)
        stub = PayStubSnapshot(
            federal_withholding=400,
            pay_frequency="biweekly",
            ytd_withholding=4_800,
            periods_remaining=14,
        )
        result = calculate(FilingProfile(), income, DeductionInputs(), CreditInputs(), stub)
        assert result.projected_annual_withholding == pytest.approx(10_400)
        assert result.withholding_gap == pytest.approx(10_400 - result.total_tax_liability)
        # 60k W-2 only: liability well under 10,400, so a refund
        assert result.recommendation.status == "overwithheld"
        # Withholding covers everything; nothing left to pay quarterly
        assert all(p.amount == 0.0 for p in result.quarterly_schedule)

    def test_wages_dropped_without_w2_job(self) -> None:
        """Wages entered with the W-2 flag off change nothing."""
        freelance_only = calculate(
            FilingProfile(),
            IncomeInputs(self_employment_income=25_000),
            DeductionInputs(),
            CreditInputs(),
        )
        income = IncomeInputs(
            self_employment_income=25_000,
            wages=180_000,
            w2_social_security_withheld=11_160,
            has_w2_job=False,
        )
        result = calculate(FilingProfile(), income, DeductionInputs(), CreditInputs())
        assert result.se_tax.social_security == pytest.approx(freelance_only.se_tax.social_security)
        assert result.se_tax.w2_social_security_withheld == 0.0
        assert result.agi == pytest.approx(freelance_only.agi)
        assert result.total_tax_liability == pytest.approx(freelance_only.total_tax_liability)

    def test_annual_withholding_without_stub(self) -> None:
        income = IncomeInputs(wages=60_000, annual_federal_withholding=5_000)
        result = calculate(FilingProfile(), income, DeductionInputs(), CreditInputs())
        assert result.projected_annual_withholding == 5_000

    def test_spouse_withholding_added(self) -> None:
        income = IncomeInputs(
            wages=60_000,
            annual_federal_withholding=5_000,
            spouse_wages=40_000,
            spouse_federal_withholding=3_000,
        )
        profile = FilingProfile(filing_status="mfj")
        result = calculate(profile, income, DeductionInputs(), CreditInputs())
        assert result.projected_annual_withholding == 8_000
        assert result.two_earner is not None
        assert result.two_earner.combined_withholding == pytest.approx(8_000)
        assert result.two_earner.combined_income == pytest.approx(100_000)

    def test_two_earner_only_for_joint_filers(self) -> None:
        income = IncomeInputs(wages=60_000, spouse_wages=40_000)
        result = calculate(
            FilingProfile(filing_status="mfs"), income, DeductionInputs(), CreditInputs()
        )
        assert result.two_earner is None

    def test_bonus_analysis(self) -> None:
        income = IncomeInputs(wages=150_000, expected_bonus=20_000)
        result = calculate(FilingProfile(), income, DeductionInputs(), CreditInputs())
        assert result.bonus is not None
        assert result.bonus.bonus == 20_000
        assert result.marginal_rate == 0.24
        assert result.bonus.status == "underwithheld"

    def test_as_of_defaults_to_start_of_year(self) -> None:
        income = IncomeInputs(self_employment_income=50_000)
        result = calculate(FilingProfile(), income, DeductionInputs(), CreditInputs())
        assert not any(p.is_past for p in result.quarterly_schedule)

    def test_as_of_injected(self) -> None:
        income = IncomeInputs(self_employment_income=50_000)
        result = calculate(
            FilingProfile(),
            income,
            DeductionInputs(),
            CreditInputs(),
            as_of=date(2026, 12, 31),
        )
        assert [p.is_past for p in result.quarterly_schedule] == [True, True, True, False]

    def test_safe_harbor_uses_estimated_payments(self) -> None:
        income = IncomeInputs(
            self_employment_income=80_000,
            estimated_payments_made=4_000,
            prior_year_tax=3_000,
            prior_year_agi=60_000,
        )
        result = calculate(FilingProfile(), income, DeductionInputs(), CreditInputs())
        assert result.safe_harbor.payments == 4_000
        assert result.safe_harbor.prior_year_target == pytest.approx(3_000)
        assert result.safe_harbor.is_covered

    def test_credits_reduce_liability(self) -> None:
        income = IncomeInputs(wages=80_000)
        profile = FilingProfile(filing_status="hoh")
        base = calculate(profile, income, DeductionInputs(), CreditInputs())
        with_kids = calculate(
            profile,
            income,
            DeductionInputs(),
            CreditInputs(children_under_17=1),
        )
        assert with_kids.total_credits == 2_000
        assert with_kids.total_tax_liability == pytest.approx(base.total_tax_liability - 2_000)

    def test_retirement_uses_age_band(self) -> None:
        income = IncomeInputs(self_employment_income=150_000)
        result = calculate(FilingProfile(age=61), income, DeductionInputs(), CreditInputs())
        assert result.retirement.age_band == "60_to_63"
        assert result.retirement.solo_401k.employee_contribution == 35_250

    def test_hash_changes_with_inputs(self) -> None:
        a = calculate(FilingProfile(), IncomeInputs(wages=1), DeductionInputs(), CreditInputs())
        b = calculate(FilingProfile(), IncomeInputs(wages=2), DeductionInputs(), CreditInputs())
        assert a.scenario_hash != b.scenario_hash

    @pytest.mark.parametrize(
        "scenario", [default_scenario, freelancer_scenario, dual_income_scenario]
    )
    def test_templates_run(self, scenario: object) -> None:
        profile, income, deductions, credits, pay_stub = scenario()  # type: ignore[operator]
        result = calculate(profile, income, deductions, credits, pay_stub)
        assert result.total_tax_liability >= 0
        assert result.agi >= 0


class TestProjectedHouseholdWithholding:
    def test_stub_wins_over_annual_figure(self) -> None:
        income = IncomeInputs(annual_federal_withholding=99_999)
        stub = PayStubSnapshot(
            federal_withholding=100, pay_frequency="monthly", periods_remaining=12
        )
        assert projected_household_withholding(income, stub) == pytest.approx(1_200)

    def test_no_stub(self) -> None:
        income = IncomeInputs(annual_federal_withholding=7_000, spouse_federal_withholding=2_000)
        assert projected_household_withholding(income) == 9_000
