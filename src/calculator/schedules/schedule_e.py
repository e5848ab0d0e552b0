"""
Schedule E Part I - Rental real estate and royalties.

A net loss is limited by the special $25,000 allowance for actively managed
rentals (Form 8582). Schedule E consumes the allowance before K-1 rentals do.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from calculator.k1 import rental_loss_allowance
from calculator.tax_year_config import TaxYearConfig
from calculator.traced import TraceRecorder
from models.income import ScheduleEProperty
from models.taxpayer import FilingStatus


@dataclass
class ScheduleEPropertyResult:
    property_id: str
    address: str
    income: int
    expenses: int
    net_income: int


@dataclass
class ScheduleEResult:
    properties: List[ScheduleEPropertyResult] = field(default_factory=list)
    line23a: int = 0
    line25: int = 0
    line26: int = 0
    disallowed_loss: int = 0
    allowance: int = 0

    @property
    def allowance_used(self) -> int:
        """Part of the shared rental allowance consumed by line 25."""
        return abs(min(0, self.line25))


def compute_schedule_e(
    properties: List[ScheduleEProperty],
    filing_status: FilingStatus,
    preliminary_agi: int,
    config: TaxYearConfig,
    trace: TraceRecorder,
) -> ScheduleEResult:
    result = ScheduleEResult()

    for p in properties:
        prefix = f"scheduleE.{p.id}"
        name = p.address or "Property"
        leaf_inputs = []
        if p.rents_received:
            trace.document(p.rents_received, "scheduleE", p.id, "rentsReceived", f"{name}, rents received")
            leaf_inputs.append(f"scheduleE:{p.id}:rentsReceived")
        if p.royalties_received:
            trace.document(p.royalties_received, "scheduleE", p.id, "royaltiesReceived", f"{name}, royalties received")
            leaf_inputs.append(f"scheduleE:{p.id}:royaltiesReceived")

        trace.computed(p.income, f"{prefix}.income", leaf_inputs, f"Schedule E ({name}) income")
        trace.computed(p.total_expenses, f"{prefix}.expenses", [], f"Schedule E ({name}) expenses")
        net = p.income - p.total_expenses
        trace.computed(net, f"{prefix}.net", [f"{prefix}.income", f"{prefix}.expenses"], f"Schedule E ({name}) net")

        result.properties.append(ScheduleEPropertyResult(
            property_id=p.id,
            address=p.address,
            income=p.income,
            expenses=p.total_expenses,
            net_income=net,
        ))

    result.line23a = sum(r.net_income for r in result.properties)
    trace.computed(
        result.line23a, "scheduleE.line23a",
        [f"scheduleE.{r.property_id}.net" for r in result.properties],
        "Schedule E, Line 23a",
    )

    if result.line23a < 0:
        result.allowance = rental_loss_allowance(preliminary_agi, filing_status, config)
        allowed = min(abs(result.line23a), result.allowance)
        result.line25 = -allowed if allowed > 0 else 0
        result.disallowed_loss = result.line23a - result.line25
    trace.computed(result.line25, "scheduleE.line25", ["scheduleE.line23a"], "Schedule E, Line 25")

    result.line26 = result.line23a if result.line23a >= 0 else result.line25
    trace.computed(
        result.line26, "scheduleE.line26",
        ["scheduleE.line23a"] if result.line23a >= 0 else ["scheduleE.line25"],
        "Schedule E, Line 26",
    )
    return result
