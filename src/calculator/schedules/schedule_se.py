"""
Schedule SE - Self-Employment Tax.

    line 2  = Schedule C net profit (incl. 1099-NEC) + K-1 SE earnings + guaranteed payments
    line 3  = line 2 x 92.35%
    line 4a = min(line 3, SS wage base - W-2 SS wages)
    line 4b = line 4a x 12.4%
    line 5  = line 3 x 2.9%
    line 6  = line 4b + line 5, half deductible on Schedule 1
"""

from __future__ import annotations

from dataclasses import dataclass

from calculator.decimal_math import apply_rate
from calculator.tax_year_config import TaxYearConfig
from calculator.traced import TraceRecorder


@dataclass
class ScheduleSEResult:
    line2: int = 0
    line3: int = 0
    line4a: int = 0
    line4b: int = 0
    line5: int = 0
    line6: int = 0
    deductible_half: int = 0

    @property
    def total_se_tax(self) -> int:
        return self.line6

    @property
    def net_se_earnings(self) -> int:
        return self.line3


def compute_schedule_se(
    schedule_c_net_profit: int,
    k1_se_income: int,
    w2_social_security_wages: int,
    config: TaxYearConfig,
    trace: TraceRecorder,
) -> ScheduleSEResult:
    result = ScheduleSEResult()

    inputs = []
    if schedule_c_net_profit:
        inputs.append("scheduleC.totalNetProfit")
    if k1_se_income:
        inputs.append("k1.seEligibleIncome")
    result.line2 = schedule_c_net_profit + k1_se_income
    trace.computed(result.line2, "scheduleSE.line2", inputs, "Schedule SE, Line 2")

    if result.line2 <= 0:
        trace.zero("scheduleSE.line6", "Schedule SE, Line 6")
        return result

    result.line3 = apply_rate(result.line2, config.se_net_earnings_factor)
    trace.computed(result.line3, "scheduleSE.line3", ["scheduleSE.line2"], "Schedule SE, Line 3")

    if result.line3 < config.se_minimum_net_earnings:
        # Under $400 of net earnings: no SE tax
        trace.zero("scheduleSE.line6", "Schedule SE, Line 6")
        return result

    wage_room = max(0, config.ss_wage_base - w2_social_security_wages)
    result.line4a = min(result.line3, wage_room)
    trace.computed(result.line4a, "scheduleSE.line4a", ["scheduleSE.line3"], "Schedule SE, Line 4a")

    result.line4b = apply_rate(result.line4a, config.ss_rate)
    trace.computed(result.line4b, "scheduleSE.line4b", ["scheduleSE.line4a"], "Schedule SE, Line 4b")

    result.line5 = apply_rate(result.line3, config.medicare_rate)
    trace.computed(result.line5, "scheduleSE.line5", ["scheduleSE.line3"], "Schedule SE, Line 5")

    result.line6 = result.line4b + result.line5
    trace.computed(result.line6, "scheduleSE.line6", ["scheduleSE.line4b", "scheduleSE.line5"], "Schedule SE, Line 6")

    result.deductible_half = apply_rate(result.line6, "0.5")
    trace.computed(result.deductible_half, "scheduleSE.deductibleHalf", ["scheduleSE.line6"],
                   "Schedule SE, deductible half")
    return result
