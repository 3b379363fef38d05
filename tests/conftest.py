"""Shared test fixtures."""

from __future__ import annotations

import pytest

from taxplan.taxes.rules import TaxRuleTable, load_rule_table


@pytest.fixture
def rules_2026() -> TaxRuleTable:
    return load_rule_table(2026)


@pytest.fixture
def rules_2025() -> TaxRuleTable:
    return load_rule_table(2025)
