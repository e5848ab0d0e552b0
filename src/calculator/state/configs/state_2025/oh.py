"""Ohio IT 1040."""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from calculator.decimal_math import apply_rate, cents
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import SCALE_TAX, StateTaxConfig, bracket_floors, bracket_table
from models.state import StateReturnConfig
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

# Same table for every filing status; the first $26,050 is untaxed
BRACKETS = bracket_floors((0, 26050, 100000), (0.0, 0.0275, 0.03125))

OH_2025 = StateTaxConfig(
    state_code="OH",
    state_name="Ohio",
    tax_year=2025,
    form_label="OH IT 1040",
    node_prefix="it1040",
    is_flat_tax=False,
    brackets=bracket_table(BRACKETS, BRACKETS),
    apportionment_method=SCALE_TAX,
    scale_after_credits=True,
)

# (Ohio AGI ceiling, exemption per person)
EXEMPTION_TIERS = ((cents(40000), cents(2400)), (cents(80000), cents(2150)), (cents(750000), cents(1900)))
EXEMPTION_CREDIT = cents(20)
EXEMPTION_CREDIT_INCOME_LIMIT = cents(30000)
# (Ohio taxable income ceiling, joint filing credit rate)
JOINT_CREDIT_TIERS = ((cents(25000), 0.20), (cents(50000), 0.15), (cents(75000), 0.10))
JOINT_CREDIT_MIN_RATE = 0.05
JOINT_CREDIT_MAX = cents(650)


class OhioModule(ConfiguredStateModule):

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return 0

    def exemptions(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        filers, dependents = self.exemption_count(model)
        for ceiling, amount in EXEMPTION_TIERS:
            if result.state_agi <= ceiling:
                return (filers + dependents) * amount
        return 0

    def credits(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        items = super().credits(model, federal, result, state_config)
        taxable = result.state_taxable_income
        if taxable < EXEMPTION_CREDIT_INCOME_LIMIT:
            filers, dependents = self.exemption_count(model)
            items.append(StateLineItem("exemptionCredit", "Personal exemption credit",
                                       (filers + dependents) * EXEMPTION_CREDIT, (self.node("taxableIncome"),)))
        if model.filing_status == FilingStatus.MARRIED_JOINT:
            rate = JOINT_CREDIT_MIN_RATE
            for ceiling, tier_rate in JOINT_CREDIT_TIERS:
                if taxable <= ceiling:
                    rate = tier_rate
                    break
            credit = min(apply_rate(result.bracket_tax, rate), JOINT_CREDIT_MAX)
            items.append(StateLineItem("jointFilingCredit", "Joint filing credit", credit, (self.node("tax"),)))
        return items


def build(tax_year: int) -> OhioModule:
    return OhioModule(OH_2025.for_year(tax_year))
