"""South Carolina SC1040."""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from calculator.decimal_math import cents
from calculator.senior_deduction import is_senior
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import FEDERAL_TAXABLE_INCOME, StateTaxConfig
from models.income import Owner
from models.state import StateReturnConfig
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

SC_2025 = StateTaxConfig(
    state_code="SC",
    state_name="South Carolina",
    tax_year=2025,
    form_label="SC1040",
    node_prefix="sc1040",
    is_flat_tax=True,
    flat_rate=0.0399,
    starts_from=FEDERAL_TAXABLE_INCOME,
    # dependents only; filers already took the federal standard deduction
    dependent_exemption_amount=cents(4700),
    eitc_percentage=0.4167,
    eitc_refundable=False,
)

RETIREMENT_DEDUCTION_LIMIT = cents(10000)
TWO_WAGE_EARNER_CREDIT_MAX = cents(350)


class SouthCarolinaModule(ConfiguredStateModule):

    def subtractions(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        items = super().subtractions(model, federal, state_config)
        retirement = max(0, federal.line4b + federal.line5b)
        if not is_senior(model.taxpayer, model.tax_year):
            retirement = min(retirement, RETIREMENT_DEDUCTION_LIMIT)
        if retirement:
            items.append(StateLineItem("retirementDeduction", "Retirement income deduction", retirement,
                                       ("form1040.line4b", "form1040.line5b")))
        return items

    def credits(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        items = super().credits(model, federal, result, state_config)
        if model.filing_status == FilingStatus.MARRIED_JOINT:
            taxpayer_wages = sum(w2.box1 for w2 in model.w2s if w2.owner == Owner.TAXPAYER)
            spouse_wages = sum(w2.box1 for w2 in model.w2s if w2.owner == Owner.SPOUSE)
            credit = min(TWO_WAGE_EARNER_CREDIT_MAX, taxpayer_wages, spouse_wages)
            if credit > 0:
                items.append(StateLineItem("twoWageEarnerCredit", "Two-wage earner credit", credit,
                                           ("form1040.line1a",)))
        return items


def build(tax_year: int) -> SouthCarolinaModule:
    return SouthCarolinaModule(SC_2025.for_year(tax_year))
