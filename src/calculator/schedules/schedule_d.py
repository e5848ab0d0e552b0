"""
Schedule D - Capital Gains and Losses (with the Form 8949 category totals).

Reconciled capital transactions take priority; raw 1099-B rows are used
only when no transactions were entered. A 1099-B without a holding period
is treated as short-term.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from calculator.traced import TraceRecorder
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus
from calculator.tax_year_config import TaxYearConfig

logger = logging.getLogger(__name__)

CATEGORIES = ("A", "B", "D", "E")


@dataclass
class Form8949CategoryTotals:
    proceeds: int = 0
    basis: int = 0
    adjustments: int = 0
    gain_loss: int = 0
    count: int = 0


@dataclass
class ScheduleDResult:
    form8949: Dict[str, Form8949CategoryTotals] = field(default_factory=dict)
    line1a: int = 0
    line1b: int = 0
    line5_k1: int = 0
    line6: int = 0
    line7: int = 0
    line8a: int = 0
    line8b: int = 0
    line12_k1: int = 0
    line13: int = 0
    line14: int = 0
    line15: int = 0
    line16: int = 0
    line21: int = 0
    capital_loss_carryforward: int = 0
    carryforward_st: int = 0
    carryforward_lt: int = 0


def _form8949_rows(model: TaxReturn) -> List[tuple]:
    """(category, proceeds, basis, adjustment, gain_loss) per sale."""
    rows = []
    if model.capital_transactions:
        for t in model.capital_transactions:
            rows.append((t.category, t.proceeds, t.adjusted_basis, t.wash_sale_loss_disallowed, t.gain_loss))
        return rows

    for b in model.form1099_bs:
        reported = b.basis_reported_to_irs and b.cost_basis is not None
        if b.long_term:
            category = "D" if reported else "E"
        else:
            category = "A" if reported else "B"
        rows.append((category, b.proceeds, b.cost_basis or 0, b.wash_sale_loss_disallowed, b.gain_loss))
    return rows


def compute_schedule_d(
    model: TaxReturn,
    filing_status: FilingStatus,
    config: TaxYearConfig,
    trace: TraceRecorder,
    k1_short_term: int = 0,
    k1_long_term: int = 0,
) -> ScheduleDResult:
    result = ScheduleDResult()
    result.form8949 = {cat: Form8949CategoryTotals() for cat in CATEGORIES}

    for category, proceeds, basis, adjustment, gain_loss in _form8949_rows(model):
        totals = result.form8949[category]
        totals.proceeds += proceeds
        totals.basis += basis
        totals.adjustments += adjustment
        totals.gain_loss += gain_loss
        totals.count += 1

    for cat, totals in result.form8949.items():
        if totals.count:
            trace.computed(totals.proceeds, f"form8949.{cat}.proceeds", [], f"Form 8949 Box {cat}, proceeds")
            trace.computed(totals.basis, f"form8949.{cat}.basis", [], f"Form 8949 Box {cat}, basis")
            trace.computed(totals.adjustments, f"form8949.{cat}.adjustments", [], f"Form 8949 Box {cat}, adjustments")
            trace.computed(
                totals.gain_loss,
                f"form8949.{cat}.gainLoss",
                [f"form8949.{cat}.proceeds", f"form8949.{cat}.basis", f"form8949.{cat}.adjustments"],
                f"Form 8949 Box {cat}, gain or (loss)",
            )

    # Part I - short-term
    result.line1a = result.form8949["A"].gain_loss
    trace.computed(result.line1a, "scheduleD.line1a", ["form8949.A.gainLoss"], "Schedule D, Line 1a")
    result.line1b = result.form8949["B"].gain_loss
    trace.computed(result.line1b, "scheduleD.line1b", ["form8949.B.gainLoss"], "Schedule D, Line 1b")

    result.line5_k1 = k1_short_term
    if k1_short_term:
        trace.computed(k1_short_term, "scheduleD.line5", ["k1.totalSTCapitalGain"], "Schedule D, Line 5")

    prior = model.prior_year
    st_carryover = prior.capital_loss_carryforward_st if prior else 0
    result.line6 = -st_carryover if st_carryover > 0 else 0
    trace.computed(result.line6, "scheduleD.line6", [], "Schedule D, Line 6")

    result.line7 = result.line1a + result.line1b + result.line5_k1 + result.line6
    trace.computed(
        result.line7, "scheduleD.line7",
        ["scheduleD.line1a", "scheduleD.line1b", "scheduleD.line5", "scheduleD.line6"],
        "Schedule D, Line 7",
    )

    # Part II - long-term
    result.line8a = result.form8949["D"].gain_loss
    trace.computed(result.line8a, "scheduleD.line8a", ["form8949.D.gainLoss"], "Schedule D, Line 8a")
    result.line8b = result.form8949["E"].gain_loss
    trace.computed(result.line8b, "scheduleD.line8b", ["form8949.E.gainLoss"], "Schedule D, Line 8b")

    result.line12_k1 = k1_long_term
    if k1_long_term:
        trace.computed(k1_long_term, "scheduleD.line12", ["k1.totalLTCapitalGain"], "Schedule D, Line 12")

    result.line13 = sum(f.box2a for f in model.form1099_divs)
    trace.computed(
        result.line13, "scheduleD.line13",
        [f"1099div:{f.id}:box2a" for f in model.form1099_divs if f.box2a],
        "Schedule D, Line 13",
    )

    lt_carryover = prior.capital_loss_carryforward_lt if prior else 0
    result.line14 = -lt_carryover if lt_carryover > 0 else 0
    trace.computed(result.line14, "scheduleD.line14", [], "Schedule D, Line 14")

    result.line15 = result.line8a + result.line8b + result.line12_k1 + result.line13 + result.line14
    trace.computed(
        result.line15, "scheduleD.line15",
        ["scheduleD.line8a", "scheduleD.line8b", "scheduleD.line12", "scheduleD.line13", "scheduleD.line14"],
        "Schedule D, Line 15",
    )

    # Part III
    result.line16 = result.line7 + result.line15
    trace.computed(result.line16, "scheduleD.line16", ["scheduleD.line7", "scheduleD.line15"], "Schedule D, Line 16")

    loss_limit = config.capital_loss_limit[filing_status]
    if result.line16 >= 0:
        result.line21 = result.line16
    else:
        result.line21 = max(result.line16, -loss_limit)
        result.capital_loss_carryforward = abs(result.line16 - result.line21)
        _split_carryforward(result)
        logger.debug("Capital loss limited to %d, carryforward %d", result.line21, result.capital_loss_carryforward)
    trace.computed(result.line21, "scheduleD.line21", ["scheduleD.line16"], "Schedule D, Line 21")
    return result


def _split_carryforward(result: ScheduleDResult) -> None:
    """
    Capital Loss Carryover Worksheet: the allowed loss absorbs the
    short-term loss first, the remainder is long-term.
    """
    allowed = -result.line21
    st_loss = max(0, -result.line7)
    lt_loss = max(0, -result.line15)
    st_used = min(st_loss, allowed)
    lt_used = min(lt_loss, allowed - st_used)
    # Gains on one side offset losses on the other
    st_gain = max(0, result.line7)
    lt_gain = max(0, result.line15)
    result.carryforward_st = max(0, st_loss - st_used - lt_gain)
    result.carryforward_lt = max(0, lt_loss - lt_used - st_gain)
