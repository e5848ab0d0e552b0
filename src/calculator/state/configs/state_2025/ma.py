"""Massachusetts Form 1."""

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

MA_2025 = StateTaxConfig(
    state_code="MA",
    state_name="Massachusetts",
    tax_year=2025,
    form_label="MA Form 1",
    node_prefix="form1",
    is_flat_tax=True,
    flat_rate=0.05,
    personal_exemption_amount=status_amounts(4400, 8800, hoh=6800, qw=4400),
    dependent_exemption_amount=cents(1000),
    hsa_addback=True,
)

SHORT_TERM_GAIN_RATE = 0.085
SURTAX_THRESHOLD = cents(1_083_150)
SURTAX_RATE = 0.04


class MassachusettsModule(ConfiguredStateModule):

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return 0

    def income_tax(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        """Part A short-term gains at 8.5%, the rest at 5%."""
        taxable = result.state_taxable_income
        short_term = 0
        if federal.schedule_d is not None:
            short_term = min(max(0, federal.schedule_d.line7), taxable)
        result.detail["shortTermGains"] = short_term
        return apply_rate(taxable - short_term, self.config.flat_rate) + apply_rate(short_term, SHORT_TERM_GAIN_RATE)

    def additional_taxes(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        excess = max(0, result.state_taxable_income - SURTAX_THRESHOLD)
        return [StateLineItem("surtax", "4% surtax on income over the threshold",
                              apply_rate(excess, SURTAX_RATE), (self.node("taxableIncome"),))]


def build(tax_year: int) -> MassachusettsModule:
    return MassachusettsModule(MA_2025.for_year(tax_year))
