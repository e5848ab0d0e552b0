"""Maryland Form 502, with the county (local) income tax."""

from __future__ import annotations

import logging
from typing import List, TYPE_CHECKING

from calculator.decimal_math import apply_rate, cents
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import (
    ITEMIZED_FEDERAL,
    StateTaxConfig,
    bracket_floors,
    bracket_table,
    status_amounts,
)
from models.deductions import DeductionMethod
from models.state import StateReturnConfig
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)

RATES = (0.02, 0.03, 0.04, 0.0475, 0.05, 0.0525, 0.055, 0.0575, 0.0625, 0.065)
JOINT = bracket_floors((0, 1000, 2000, 3000, 150000, 175000, 225000, 300000, 600000, 1200000), RATES)

MD_2025 = StateTaxConfig(
    state_code="MD",
    state_name="Maryland",
    tax_year=2025,
    form_label="MD Form 502",
    node_prefix="form502",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 1000, 2000, 3000, 100000, 125000, 150000, 250000, 500000, 1000000), RATES),
        JOINT,
        hoh=JOINT,
    ),
    standard_deduction=status_amounts(3350, 6700, hoh=6700),
    itemized_deductions=ITEMIZED_FEDERAL,
    # 45% with qualifying children, the full federal credit without
    eitc_percentage=0.45,
    eitc_percentage_no_children=1.00,
    eitc_refundable=False,
)

EXEMPTION = cents(3200)
# Federal AGI ceilings for the full, half and quarter exemption
EXEMPTION_TIERS_SINGLE = (cents(100000), cents(125000), cents(150000))
EXEMPTION_TIERS_JOINT = (cents(150000), cents(175000), cents(200000))

# Local income tax rates by county or Baltimore City
COUNTY_RATES = {
    "allegany": 0.0303,
    "baltimore city": 0.032,
    "baltimore county": 0.032,
    "carroll": 0.0303,
    "charles": 0.0303,
    "garrett": 0.0265,
    "harford": 0.0306,
    "howard": 0.032,
    "montgomery": 0.032,
    "prince george's": 0.032,
    "talbot": 0.024,
    "washington": 0.0295,
    "worcester": 0.0225,
}
DEFAULT_COUNTY = "baltimore city"


def county_rate(county: str) -> float:
    """Local tax rate for a county name; unknown or missing names use Baltimore City."""
    key = (county or DEFAULT_COUNTY).strip().lower().replace(" county", "")
    if key == "baltimore":
        key = "baltimore county"
    if key not in COUNTY_RATES:
        logger.warning("Unknown Maryland county %r, using the Baltimore City rate", county)
        key = DEFAULT_COUNTY
    return COUNTY_RATES[key]


class MarylandModule(ConfiguredStateModule):

    def itemized_deduction(self, model: "TaxReturn", federal: "Form1040Result") -> int:
        """Federal itemized deductions without state and local income taxes, which Maryland disallows."""
        if model.deductions.method != DeductionMethod.ITEMIZED or model.deductions.itemized is None:
            return 0
        a = federal.schedule_a
        return a.line4 + a.line5b + a.line5c + a.line8a + a.line9 + a.line14 + a.line16

    def exemptions(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        filers, dependents = self.exemption_count(model)
        joint_like = model.filing_status in (
            FilingStatus.MARRIED_JOINT, FilingStatus.HEAD_OF_HOUSEHOLD, FilingStatus.QUALIFYING_WIDOW,
        )
        full, half, quarter = EXEMPTION_TIERS_JOINT if joint_like else EXEMPTION_TIERS_SINGLE
        agi = federal.line11
        if agi <= full:
            each = EXEMPTION
        elif agi <= half:
            each = EXEMPTION // 2
        elif agi <= quarter:
            each = EXEMPTION // 4
        else:
            each = 0
        return (filers + dependents) * each

    def additional_taxes(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        rate = county_rate(state_config.county)
        result.detail["localTaxRate"] = rate
        return [StateLineItem("localTax", "Local income tax", apply_rate(result.state_taxable_income, rate),
                              (self.node("taxableIncome"),))]


def build(tax_year: int) -> MarylandModule:
    return MarylandModule(MD_2025.for_year(tax_year))
