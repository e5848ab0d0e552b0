"""Illinois Form IL-1040."""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from calculator.decimal_math import cents
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import StateTaxConfig, status_amounts
from models.state import StateReturnConfig
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

IL_2025 = StateTaxConfig(
    state_code="IL",
    state_name="Illinois",
    tax_year=2025,
    form_label="IL-1040",
    node_prefix="il1040",
    is_flat_tax=True,
    flat_rate=0.0495,
    eitc_percentage=0.20,
)

EXEMPTION_ALLOWANCE = cents(2850)
# no exemption allowance above these federal AGIs
EXEMPTION_AGI_LIMIT = status_amounts(250_000, 500_000)


class IllinoisModule(ConfiguredStateModule):

    def additions(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        exempt_interest = sum(f.box8 for f in model.form1099_ints)
        exempt_dividends = sum(f.box11 for f in model.form1099_divs)
        return [
            StateLineItem("taxExemptInterest", "Federally tax-exempt interest", exempt_interest),
            StateLineItem("taxExemptDividends", "Federally tax-exempt dividends", exempt_dividends),
        ]

    def subtractions(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        items = [
            StateLineItem("usGovInterest", "U.S. government obligation interest",
                          sum(f.box3 for f in model.form1099_ints)),
            StateLineItem("socialSecurity", "Taxable Social Security and retirement income",
                          federal.line6b, ("form1040.line6b",)),
        ]
        if model.prior_year is not None and model.prior_year.itemized_last_year:
            items.append(StateLineItem("stateRefund", "Illinois income tax refund",
                                       sum(g.box2 for g in model.form1099_gs)))
        return items

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return 0

    def exemption_count(self, model: "TaxReturn"):
        spouse = model.filing_status == FilingStatus.MARRIED_JOINT and model.spouse is not None
        return (2 if spouse else 1), len(model.dependents)

    def exemptions(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        if federal.line11 > EXEMPTION_AGI_LIMIT[model.filing_status]:
            result.detail["exemptionAllowanceRemoved"] = True
            return 0
        filers, dependents = self.exemption_count(model)
        return (filers + dependents) * EXEMPTION_ALLOWANCE


def build(tax_year: int) -> IllinoisModule:
    return IllinoisModule(IL_2025.for_year(tax_year))
