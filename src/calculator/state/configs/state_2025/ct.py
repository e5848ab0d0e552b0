"""Connecticut CT-1040."""

from __future__ import annotations

from typing import Dict, List, Tuple, TYPE_CHECKING

from calculator.decimal_math import apply_rate, ceil_div, cents, prorate
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import SCALE_TAX, StateTaxConfig, bracket_floors, bracket_table
from models.state import ResidencyType, StateReturnConfig
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

RATES = (0.02, 0.045, 0.055, 0.06, 0.065, 0.069, 0.0699)
SINGLE = bracket_floors((0, 10000, 50000, 100000, 200000, 250000, 500000), RATES)
JOINT = bracket_floors((0, 20000, 100000, 200000, 400000, 500000, 1000000), RATES)

CT_2025 = StateTaxConfig(
    state_code="CT",
    state_name="Connecticut",
    tax_year=2025,
    form_label="CT-1040",
    node_prefix="ct1040",
    is_flat_tax=False,
    brackets=bracket_table(
        SINGLE, JOINT,
        hoh=bracket_floors((0, 16000, 80000, 160000, 320000, 400000, 800000), RATES),
    ),
    apportionment_method=SCALE_TAX,
)

Schedule = Dict[FilingStatus, Tuple[int, int, int]]


def _row(values) -> Tuple[int, int, int]:
    return tuple(cents(v) for v in values)


def _schedule(single, joint, hoh, mfs=None) -> Schedule:
    return {
        FilingStatus.SINGLE: _row(single),
        FilingStatus.MARRIED_SEPARATE: _row(mfs or single),
        FilingStatus.MARRIED_JOINT: _row(joint),
        FilingStatus.QUALIFYING_WIDOW: _row(joint),
        FilingStatus.HEAD_OF_HOUSEHOLD: _row(hoh),
    }


# (maximum exemption, phase-out start, phase-out end)
PERSONAL_EXEMPTION = _schedule(
    (15000, 30000, 44000), (24000, 48000, 72000), (19000, 38000, 57000), mfs=(12000, 24000, 36000),
)
EXEMPTION_STEP = cents(1000)

# (phase-in start, phase-in end, maximum), whole dollars
TABLE_C = _schedule((56500, 105000, 200), (100500, 210000, 400), (80500, 160000, 320))
TABLE_D = _schedule((105000, 150000, 250), (210000, 300000, 500), (168000, 240000, 400))

EITC_RATE = 0.40
EITC_CHILD_BONUS = cents(250)


def personal_exemption(filing_status: FilingStatus, agi: int) -> int:
    """The maximum exemption less $1,000 for each $1,000 (or part) of AGI over the start."""
    maximum, start, _ = PERSONAL_EXEMPTION[filing_status]
    if agi <= start:
        return maximum
    reduction = ceil_div(agi - start, EXEMPTION_STEP) * EXEMPTION_STEP
    return max(0, maximum - reduction)


def phase_in_amount(table: Schedule, filing_status: FilingStatus, agi: int) -> int:
    """Linear phase-in between the start and end AGI, rounded to whole dollars."""
    start, end, maximum = table[filing_status]
    if agi <= start:
        return 0
    if agi >= end:
        return maximum
    return prorate(maximum // 100, agi - start, end - start) * 100


class ConnecticutModule(ConfiguredStateModule):
    """
    No standard deduction. The personal exemption phases out with AGI, and
    two recapture tables add back the benefit of the lower brackets for
    higher incomes.
    """

    def exemptions(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return personal_exemption(model.filing_status, result.state_agi)

    def additional_taxes(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        status = model.filing_status
        inputs = (self.node("stateAGI"),)
        return [
            StateLineItem("phaseOutAddBack", "Table C 2% phase-out add-back",
                          phase_in_amount(TABLE_C, status, result.state_agi), inputs),
            StateLineItem("benefitRecapture", "Table D benefit recapture",
                          phase_in_amount(TABLE_D, status, result.state_agi), inputs),
        ]

    def refundable_credits(
        self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult
    ) -> List[StateLineItem]:
        if result.residency_type != ResidencyType.FULL_YEAR:
            return []
        federal_eitc = federal.earned_income_credit.credit_amount
        if federal_eitc <= 0:
            return []
        credit = apply_rate(federal_eitc, EITC_RATE)
        if federal.earned_income_credit.num_qualifying_children:
            credit += EITC_CHILD_BONUS
        return [StateLineItem("stateEITC", "Connecticut earned income tax credit", credit, ("eic.creditAmount",))]


def build(tax_year: int) -> ConnecticutModule:
    return ConnecticutModule(CT_2025.for_year(tax_year))
