"""taxplan: tax-year liability and withholding planner."""

__version__ = "0.1.0"

from taxplan.analytics.tax_curve import TaxCurve as TaxCurve
from taxplan.analytics.tax_curve import tax_curve as tax_curve
from taxplan.config.defaults import default_credits as default_credits
from taxplan.config.defaults import default_deductions as default_deductions
from taxplan.config.defaults import default_income as default_income
from taxplan.config.defaults import default_pay_stub as default_pay_stub
from taxplan.config.defaults import default_profile as default_profile
from taxplan.config.defaults import default_scenario as default_scenario
from taxplan.config.schema import CreditInputs as CreditInputs
from taxplan.config.schema import DeductionInputs as DeductionInputs
from taxplan.config.schema import FilingProfile as FilingProfile
from taxplan.config.schema import IncomeInputs as IncomeInputs
from taxplan.config.schema import PayStubSnapshot as PayStubSnapshot
from taxplan.core.engine import CalculationResult as CalculationResult
from taxplan.core.engine import calculate as calculate
from taxplan.taxes.rules import TaxRuleTable as TaxRuleTable
from taxplan.taxes.rules import available_tax_years as available_tax_years
from taxplan.taxes.rules import load_rule_table as load_rule_table
from taxplan.utils.exceptions import ConfigError as ConfigError
from taxplan.utils.exceptions import ScenarioError as ScenarioError
from taxplan.utils.exceptions import TaxplanError as TaxplanError
