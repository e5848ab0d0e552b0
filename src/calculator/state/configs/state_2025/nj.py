"""
New Jersey NJ-1040.

NJ starts from its own gross income built category by category; a loss in
one category does not reduce another.
"""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from calculator.decimal_math import apply_rate, cents
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import (
    GROSS_INCOME,
    StateTaxConfig,
    bracket_floors,
    bracket_table,
    status_amounts,
)
from models.state import StateReturnConfig

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

SINGLE = bracket_floors(
    (0, 20000, 35000, 40000, 75000, 500000, 1000000),
    (0.014, 0.0175, 0.035, 0.05525, 0.0637, 0.0897, 0.1075),
)
JOINT = bracket_floors(
    (0, 20000, 50000, 70000, 80000, 150000, 500000, 1000000),
    (0.014, 0.0175, 0.0245, 0.035, 0.05525, 0.0637, 0.0897, 0.1075),
)

NJ_2025 = StateTaxConfig(
    state_code="NJ",
    state_name="New Jersey",
    tax_year=2025,
    form_label="NJ-1040",
    node_prefix="nj1040",
    is_flat_tax=False,
    brackets=bracket_table(SINGLE, JOINT, hoh=JOINT),
    starts_from=GROSS_INCOME,
    personal_exemption_amount=status_amounts(1000, 2000, qw=1000),
    dependent_exemption_amount=cents(1500),
    eitc_percentage=0.40,
)

# No tax at or below these gross incomes
FILING_THRESHOLD = status_amounts(10000, 20000, mfs=10000, hoh=20000, qw=20000)
MEDICAL_FLOOR_RATE = 0.02


class NewJerseyModule(ConfiguredStateModule):

    def income_items(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        wages = 0
        for w2 in model.w2s:
            is_nj = w2.box15_state == "NJ"
            if is_nj and w2.box16_state_wages > 0:
                wages += w2.box16_state_wages
            elif is_nj or not w2.box15_state:
                wages += w2.box1

        if federal.schedule_d is not None:
            gains = federal.schedule_d.line16
        else:
            gains = sum(f.box2a for f in model.form1099_divs)
        pensions = sum(r.box2a for r in model.form1099_rs if "G" not in r.box7.upper())
        partnership = sum(k.ordinary_income for k in model.schedule_k1s)

        categories = [
            ("wages", "Wages", wages),
            ("interest", "Taxable interest", sum(f.box1 for f in model.form1099_ints)),
            ("dividends", "Dividends", sum(f.box1a for f in model.form1099_divs)),
            ("business", "Net profits from business",
             federal.schedule_c.total_net_profit if federal.schedule_c else 0),
            ("capitalGains", "Net gains from disposition of property", gains),
            ("pensions", "Pensions and annuities", pensions),
            ("partnership", "Distributive share of partnership income", partnership),
            ("rental", "Net rental income", federal.schedule_1.line5),
            ("otherIncome", "Other income", sum(f.box3 for f in model.form1099_miscs)),
        ]
        return [StateLineItem(key, label, max(0, amount)) for key, label, amount in categories]

    def subtractions(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        # Social Security and U.S. interest never enter NJ gross income
        return []

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        itemized = model.deductions.itemized
        if itemized is None or not itemized.medical_expenses:
            return 0
        return max(0, itemized.medical_expenses - apply_rate(result.state_agi, MEDICAL_FLOOR_RATE))

    def income_tax(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        if result.state_agi <= FILING_THRESHOLD[model.filing_status]:
            result.detail["belowFilingThreshold"] = True
            return 0
        return super().income_tax(model, federal, result)


def build(tax_year: int) -> NewJerseyModule:
    return NewJerseyModule(NJ_2025.for_year(tax_year))
