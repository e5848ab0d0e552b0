"""
Pennsylvania PA-40.

PA taxes eight classes of income at one flat rate. Each class is computed on
its own and a loss in one class never offsets income in another.
Retirement distributions and Social Security are not taxable.
"""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    StateComputeResult,
    StateLineItem,
)
from calculator.state.state_tax_config import SCALE_TAX, StateTaxConfig
from models.income import EntityType
from models.state import ResidencyType, StateReturnConfig

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

PA_2025 = StateTaxConfig(
    state_code="PA",
    state_name="Pennsylvania",
    tax_year=2025,
    form_label="PA-40",
    node_prefix="pa40",
    is_flat_tax=True,
    flat_rate=0.0307,
    social_security_taxable=False,
    apportionment_method=SCALE_TAX,
)


class PennsylvaniaModule(ConfiguredStateModule):

    def effective_ratio(self, state_config: StateReturnConfig, ratio: float) -> float:
        # Nonresident income is already limited to PA-source compensation
        if state_config.residency_type == ResidencyType.NONRESIDENT:
            return 1.0
        return ratio

    def income_items(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        nonresident = state_config.residency_type == ResidencyType.NONRESIDENT

        compensation = 0
        for w2 in model.w2s:
            is_pa = w2.box15_state == "PA"
            if nonresident and not is_pa:
                continue
            compensation += w2.box16_state_wages if is_pa and w2.box16_state_wages else w2.box1
        items = [StateLineItem("compensation", "Compensation", max(0, compensation))]
        if nonresident:
            return items

        interest = sum(f.box1 + f.box8 for f in model.form1099_ints)
        dividends = sum(f.box1a + f.box2a for f in model.form1099_divs)
        business = federal.schedule_c.total_net_profit if federal.schedule_c else 0
        gains = 0
        if federal.schedule_d is not None:
            gains = sum(t.gain_loss for t in federal.schedule_d.form8949.values())
        rents = sum(p.net_income for p in federal.schedule_e.properties) if federal.schedule_e else 0

        estate_trust = 0
        agg = federal.k1_aggregate
        if agg is not None:
            for entity in agg.entities:
                amount = (entity.ordinary_income + entity.rental_income + entity.interest_income
                          + entity.dividend_income + entity.short_term_capital_gain + entity.long_term_capital_gain)
                if entity.entity_type == EntityType.TRUST_ESTATE:
                    estate_trust += amount
                else:
                    business += entity.ordinary_income + entity.guaranteed_payments

        items.extend([
            StateLineItem("interest", "Interest", max(0, interest)),
            StateLineItem("dividends", "Dividends and capital gain distributions", max(0, dividends)),
            StateLineItem("business", "Net income from business", max(0, business)),
            StateLineItem("gains", "Net gains from property", max(0, gains)),
            StateLineItem("rents", "Rents and royalties", max(0, rents)),
            StateLineItem("estateTrust", "Estate or trust income", max(0, estate_trust)),
        ])
        return items

    def subtractions(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        # Classes never include Social Security or retirement income
        return []

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return 0

    def exemptions(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return 0


def build(tax_year: int) -> PennsylvaniaModule:
    return PennsylvaniaModule(PA_2025.for_year(tax_year))
