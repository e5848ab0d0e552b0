"""Schedule C - Profit or Loss From Business, one result per business plus totals."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from calculator.traced import TraceRecorder
from models.income import ScheduleCBusiness


@dataclass
class ScheduleCBusinessResult:
    business_id: str
    business_name: str
    line1_gross_receipts: int
    line7_gross_income: int
    line28_total_expenses: int
    line30_home_office: int
    line31_net_profit: int
    is_sstb: bool = False


@dataclass
class ScheduleCResult:
    businesses: List[ScheduleCBusinessResult] = field(default_factory=list)
    total_net_profit: int = 0

    @property
    def sstb_net_profit(self) -> int:
        return sum(b.line31_net_profit for b in self.businesses if b.is_sstb)


def compute_schedule_c(businesses: List[ScheduleCBusiness], trace: TraceRecorder) -> ScheduleCResult:
    result = ScheduleCResult()
    for b in businesses:
        prefix = f"scheduleC.{b.id}"
        name = b.business_name or "Business"
        trace.document(b.gross_receipts, "scheduleC", b.id, "grossReceipts", f"{name} gross receipts")
        trace.computed(b.gross_income, f"{prefix}.line7", [f"scheduleC:{b.id}:grossReceipts"],
                       f"Schedule C ({name}), Line 7")
        trace.computed(b.expenses, f"{prefix}.line28", [], f"Schedule C ({name}), Line 28")
        trace.computed(b.net_profit, f"{prefix}.line31", [f"{prefix}.line7", f"{prefix}.line28"],
                       f"Schedule C ({name}), Line 31")
        result.businesses.append(ScheduleCBusinessResult(
            business_id=b.id,
            business_name=b.business_name,
            line1_gross_receipts=b.gross_receipts,
            line7_gross_income=b.gross_income,
            line28_total_expenses=b.expenses,
            line30_home_office=b.home_office_deduction,
            line31_net_profit=b.net_profit,
            is_sstb=b.is_sstb,
        ))

    result.total_net_profit = sum(b.line31_net_profit for b in result.businesses)
    trace.computed(
        result.total_net_profit,
        "scheduleC.totalNetProfit",
        [f"scheduleC.{b.business_id}.line31" for b in result.businesses],
        "Schedule C, total net profit",
    )
    return result
