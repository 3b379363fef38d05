"""Tests for self-employment tax."""

from __future__ import annotations

import pytest

from taxplan.config.schema import DeductionInputs, FilingProfile, IncomeInputs
from taxplan.core.income import self_employment_tax_for
from taxplan.taxes.rules import TaxRuleTable
from taxplan.taxes.self_employment import calculate_self_employment_tax


class TestSelfEmploymentTax:
    def test_freelancer_25k(self, rules_2026: TaxRuleTable) -> None:
        """$25k of 1099 income, no W-2 job."""
        result = calculate_self_employment_tax(25_000, "single", rules_2026)
        assert result.base == pytest.approx(23_087.50)
        assert result.social_security == pytest.approx(2_862.85)
        assert result.medicare == pytest.approx(669.54, abs=0.01)
        assert result.additional_medicare == 0.0
        assert result.total == pytest.approx(3_532.39, abs=0.01)

    def test_w2_at_2025_wage_base(self, rules_2025: TaxRuleTable) -> None:
        """W-2 wages at the wage base leave no Social Security on SE income."""
        result = calculate_self_employment_tax(10_000, "single", rules_2025, w2_wages=176_100)
        assert result.social_security == 0.0
        assert result.wage_base_remaining == 0.0
        assert result.medicare == pytest.approx(9_235 * 0.029)
        assert result.total == pytest.approx(9_235 * 0.029)

    def test_w2_at_2026_wage_base(self, rules_2026: TaxRuleTable) -> None:
        result = calculate_self_employment_tax(10_000, "single", rules_2026, w2_wages=184_500)
        assert result.social_security == 0.0
        assert result.medicare == pytest.approx(267.815)

    def test_w2_above_wage_base(self, rules_2026: TaxRuleTable) -> None:
        result = calculate_self_employment_tax(50_000, "mfj", rules_2026, w2_wages=300_000)
        assert result.social_security == 0.0

    def test_partial_wage_base(self, rules_2026: TaxRuleTable) -> None:
        # 4,500 of wage base left after 180,000 of W-2 wages
        result = calculate_self_employment_tax(20_000, "single", rules_2026, w2_wages=180_000)
        assert result.wage_base_remaining == pytest.approx(4_500)
        assert result.social_security == pytest.approx(4_500 * 0.124)

    def test_additional_medicare(self, rules_2026: TaxRuleTable) -> None:
        result = calculate_self_employment_tax(250_000, "single", rules_2026)
        assert result.social_security == pytest.approx(184_500 * 0.124)
        assert result.additional_medicare == pytest.approx(50_000 * 0.009)

    def test_deductible_excludes_additional_medicare(self, rules_2026: TaxRuleTable) -> None:
        result = calculate_self_employment_tax(400_000, "mfs", rules_2026, w2_wages=50_000)
        assert result.additional_medicare > 0
        assert result.deductible_portion == pytest.approx(
            (result.social_security + result.medicare) / 2
        )
        assert result.total == pytest.approx(
            result.social_security + result.medicare + result.additional_medicare
        )

    def test_zero_income(self, rules_2026: TaxRuleTable) -> None:
        result = calculate_self_employment_tax(0, "single", rules_2026)
        assert result.total == 0.0
        assert result.deductible_portion == 0.0

    def test_ss_withheld_carried_through(self, rules_2026: TaxRuleTable) -> None:
        result = calculate_self_employment_tax(
            10_000, "single", rules_2026, w2_wages=50_000, w2_social_security_withheld=3_100
        )
        assert result.w2_social_security_withheld == 3_100


class TestHouseholdSelfEmploymentTax:
    def test_joint_threshold_counts_spouse_wages(self, rules_2026: TaxRuleTable) -> None:
        profile = FilingProfile(filing_status="mfj")
        income = IncomeInputs(self_employment_income=100_000, spouse_wages=200_000)
        result = self_employment_tax_for(profile, income, DeductionInputs(), rules_2026)
        # 300k combined against the 250k joint threshold
        assert result.additional_medicare == pytest.approx(50_000 * 0.009)
        # Spouse wages never use the taxpayer's wage base
        assert result.wage_base_remaining == 184_500

    def test_bonus_uses_wage_base(self, rules_2026: TaxRuleTable) -> None:
        profile = FilingProfile()
        income = IncomeInputs(
            wages=170_000, expected_bonus=20_000, self_employment_income=10_000
        )
        result = self_employment_tax_for(profile, income, DeductionInputs(), rules_2026)
        assert result.social_security == 0.0

    def test_business_expenses_reduce_base(self, rules_2026: TaxRuleTable) -> None:
        income = IncomeInputs(self_employment_income=30_000)
        deductions = DeductionInputs(equipment=3_000, business_miles=1_000)
        result = self_employment_tax_for(FilingProfile(), income, deductions, rules_2026)
        # 30,000 - 3,000 - 1,000 * 0.70
        assert result.base == pytest.approx(26_300 * 0.9235)
