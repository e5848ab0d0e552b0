"""Wisconsin Form 1."""

from __future__ import annotations

from typing import Dict, List, Tuple, TYPE_CHECKING

from calculator.decimal_math import apply_rate, cents, prorate
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import (
    ITEMIZED_UNCAPPED_SALT,
    SCALE_TAX,
    StateTaxConfig,
    bracket_floors,
    bracket_table,
    status_amounts,
)
from models.state import StateReturnConfig
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

RATES = (0.035, 0.044, 0.053, 0.0765)
SINGLE = bracket_floors((0, 14320, 28640, 315310), RATES)
JOINT = bracket_floors((0, 19090, 38190, 420420), RATES)

WI_2025 = StateTaxConfig(
    state_code="WI",
    state_name="Wisconsin",
    tax_year=2025,
    form_label="WI Form 1",
    node_prefix="wiform1",
    is_flat_tax=False,
    brackets=bracket_table(SINGLE, JOINT, mfs=bracket_floors((0, 9545, 19090, 210210), RATES), hoh=SINGLE),
    itemized_deductions=ITEMIZED_UNCAPPED_SALT,
    personal_exemption_amount=status_amounts(700, 1400),
    dependent_exemption_amount=cents(700),
    apportionment_method=SCALE_TAX,
)

# (base deduction, phase-out start, phase-out end)
STANDARD_DEDUCTION: Dict[FilingStatus, Tuple[int, int, int]] = {
    FilingStatus.SINGLE: (cents(12760), cents(18660), cents(109560)),
    FilingStatus.HEAD_OF_HOUSEHOLD: (cents(12760), cents(18660), cents(109560)),
    FilingStatus.MARRIED_JOINT: (cents(23620), cents(25120), cents(117370)),
    FilingStatus.QUALIFYING_WIDOW: (cents(23620), cents(25120), cents(117370)),
    FilingStatus.MARRIED_SEPARATE: (cents(11330), cents(12560), cents(58685)),
}

# Share of the federal credit by number of qualifying children (3 or more)
EITC_RATES = (0.0, 0.04, 0.11, 0.34)
ITEMIZED_DEDUCTION_CREDIT_RATE = 0.05


def sliding_standard_deduction(filing_status: FilingStatus, income: int) -> int:
    """The base deduction, reduced linearly to zero across the phase-out range."""
    base, start, end = STANDARD_DEDUCTION[filing_status]
    if income <= start:
        return base
    if income >= end:
        return 0
    return base - prorate(base, income - start, end - start)


class WisconsinModule(ConfiguredStateModule):

    def standard_deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return sliding_standard_deduction(model.filing_status, result.state_agi)

    def credits(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        items = super().credits(model, federal, result, state_config)
        if result.deduction_method == "itemized":
            items.append(StateLineItem(
                "itemizedDeductionCredit", "Itemized deduction credit",
                apply_rate(result.deduction, ITEMIZED_DEDUCTION_CREDIT_RATE), (self.node("deduction"),),
            ))
        return items

    def refundable_credits(
        self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult
    ) -> List[StateLineItem]:
        items = super().refundable_credits(model, federal, result)
        children = min(federal.earned_income_credit.num_qualifying_children, len(EITC_RATES) - 1)
        federal_eitc = federal.earned_income_credit.credit_amount
        if federal_eitc > 0 and EITC_RATES[children]:
            items.append(StateLineItem("stateEITC", "Wisconsin earned income credit",
                                       apply_rate(federal_eitc, EITC_RATES[children]), ("eic.creditAmount",)))
        return items


def build(tax_year: int) -> WisconsinModule:
    return WisconsinModule(WI_2025.for_year(tax_year))
