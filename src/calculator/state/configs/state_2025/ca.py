"""California Form 540."""

from __future__ import annotations

from decimal import Decimal
from typing import List, TYPE_CHECKING

from calculator.decimal_math import apply_rate, cents, ceil_div, prorate
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import (
    SCALE_TAX,
    StateTaxConfig,
    bracket_floors,
    bracket_table,
    status_amounts,
)
from models.deductions import DeductionMethod
from models.state import StateReturnConfig

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

RATES = (0.01, 0.02, 0.04, 0.06, 0.08, 0.093, 0.103, 0.113, 0.123)
SINGLE = bracket_floors((0, 11079, 26264, 41452, 57542, 72724, 371479, 445771, 742953), RATES)
MFJ = bracket_floors((0, 22158, 52528, 82904, 115084, 145448, 742958, 891542, 1485906), RATES)
HOH = bracket_floors((0, 22173, 52530, 67716, 83805, 98990, 505208, 606251, 1010417), RATES)

CA_2025 = StateTaxConfig(
    state_code="CA",
    state_name="California",
    tax_year=2025,
    form_label="CA Form 540",
    node_prefix="form540",
    is_flat_tax=False,
    brackets=bracket_table(SINGLE, MFJ, hoh=HOH),
    standard_deduction=status_amounts(5706, 11412, hoh=11412),
    # exemption credits, not deductions
    personal_exemption_amount=status_amounts(153, 153),
    dependent_exemption_amount=cents(475),
    exemption_is_credit=True,
    hsa_addback=True,
    renter_credit_single=cents(60),
    renter_credit_joint=cents(120),
    renter_credit_income_limit_single=cents(53994),
    renter_credit_income_limit_joint=cents(107987),
    apportionment_method=SCALE_TAX,
    withholding_includes_blank_state=True,
)

MENTAL_HEALTH_THRESHOLD = cents(1_000_000)
MENTAL_HEALTH_RATE = 0.01
EXEMPTION_PHASEOUT = status_amounts(252203, 504411, hoh=378310)
EXEMPTION_PHASEOUT_STEP = cents(2500)
EXEMPTION_PHASEOUT_RATE = Decimal("0.06")
MORTGAGE_LIMIT = status_amounts(1_000_000, 1_000_000, mfs=500_000)
MEDICAL_FLOOR_RATE = 0.075


class CaliforniaModule(ConfiguredStateModule):
    node_names = {
        "stateAGI": "caAGI",
        "deduction": "caDeduction",
        "taxableIncome": "caTaxableIncome",
        "tax": "caTax",
        "withholding": "stateWithholding",
    }
    adjustments_prefix = "scheduleCA"

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        standard = self.config.get_standard_deduction(model.filing_status)
        itemized = model.deductions.itemized
        if model.deductions.method != DeductionMethod.ITEMIZED or itemized is None:
            return standard

        medical = max(0, itemized.medical_expenses - apply_rate(result.state_agi, MEDICAL_FLOOR_RATE))
        # no state income tax, no SALT cap
        taxes = itemized.real_estate_taxes + itemized.personal_property_taxes + itemized.state_local_sales_taxes
        limit = MORTGAGE_LIMIT[model.filing_status]
        mortgage = itemized.mortgage_interest
        if itemized.mortgage_principal > limit:
            mortgage = prorate(mortgage, limit, itemized.mortgage_principal)
        a = federal.schedule_a
        total = medical + taxes + mortgage + a.line9 + a.line14 + a.line16

        result.detail["caItemized"] = total
        if total > standard:
            result.deduction_method = "itemized"
            return total
        return standard

    def additional_taxes(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        excess = max(0, result.state_taxable_income - MENTAL_HEALTH_THRESHOLD)
        return [StateLineItem(
            "mentalHealthTax", "Behavioral health services tax",
            apply_rate(excess, MENTAL_HEALTH_RATE), (self.node("taxableIncome"),),
        )]

    def credits(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        items = super().credits(model, federal, result, state_config)
        for item in items:
            if item.key == "exemptionCredits":
                item.amount = self._phase_out_exemptions(item.amount, model, result)
                item.inputs = (self.node("stateAGI"),)
        return items

    def exemption_count(self, model: "TaxReturn"):
        return (2 if model.filing_status.is_joint else 1), len(model.dependents)

    def _phase_out_exemptions(self, total: int, model: "TaxReturn", result: StateComputeResult) -> int:
        excess = result.state_agi - EXEMPTION_PHASEOUT[model.filing_status]
        if excess <= 0:
            return total
        steps = ceil_div(excess, EXEMPTION_PHASEOUT_STEP)
        reduction = apply_rate(total, EXEMPTION_PHASEOUT_RATE * steps)
        result.detail["exemptionCreditReduction"] = min(total, reduction)
        return max(0, total - reduction)


def build(tax_year: int) -> CaliforniaModule:
    return CaliforniaModule(CA_2025.for_year(tax_year))
