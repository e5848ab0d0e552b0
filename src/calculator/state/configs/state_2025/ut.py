"""Utah TC-40."""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from calculator.decimal_math import apply_rate, cents
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import StateTaxConfig, status_amounts
from models.state import StateReturnConfig

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

UT_2025 = StateTaxConfig(
    state_code="UT",
    state_name="Utah",
    tax_year=2025,
    form_label="UT TC-40",
    node_prefix="tc40",
    is_flat_tax=True,
    flat_rate=0.045,
    social_security_taxable=True,
    eitc_percentage=0.20,
    eitc_refundable=False,
)

TAXPAYER_CREDIT_RATE = 0.06
DEPENDENT_EXEMPTION = cents(2111)
CREDIT_PHASEOUT_BASE = status_amounts(18626, 37252, mfs=18626, hoh=27939)
CREDIT_PHASEOUT_RATE = 0.013


class UtahModule(ConfiguredStateModule):
    """Utah taxes income with no deduction and gives back a taxpayer credit."""

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return 0

    def credits(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        items = super().credits(model, federal, result, state_config)
        base = federal.line12 + DEPENDENT_EXEMPTION * len(model.dependents)
        initial = apply_rate(base, TAXPAYER_CREDIT_RATE)
        excess = max(0, result.state_taxable_income - CREDIT_PHASEOUT_BASE[model.filing_status])
        credit = max(0, initial - apply_rate(excess, CREDIT_PHASEOUT_RATE))
        items.append(StateLineItem("taxpayerCredit", "Taxpayer tax credit", credit,
                                   ("form1040.line12", self.node("taxableIncome"))))
        return items


def build(tax_year: int) -> UtahModule:
    return UtahModule(UT_2025.for_year(tax_year))
