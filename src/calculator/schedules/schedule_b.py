"""
Schedule B - Interest and Ordinary Dividends.

Required when taxable interest or ordinary dividends exceed $1,500.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from calculator.tax_year_config import TaxYearConfig
from calculator.traced import TraceRecorder, document_node_id
from models.tax_return import TaxReturn


@dataclass
class ScheduleBLineItem:
    payer_name: str
    amount: int
    source_document_id: str


@dataclass
class ScheduleBResult:
    required: bool = False
    interest_items: List[ScheduleBLineItem] = field(default_factory=list)
    line4: int = 0
    dividend_items: List[ScheduleBLineItem] = field(default_factory=list)
    line6: int = 0
    trace: TraceRecorder = field(default_factory=TraceRecorder, repr=False)


def compute_schedule_b(
    model: TaxReturn,
    config: Optional[TaxYearConfig] = None,
    trace: Optional[TraceRecorder] = None,
) -> ScheduleBResult:
    config = config or TaxYearConfig.for_year(model.tax_year)
    trace = trace if trace is not None else TraceRecorder()
    result = ScheduleBResult(trace=trace)

    # Part I - Interest
    inputs = []
    for f in model.form1099_ints:
        node_id = document_node_id("1099int", f.id, "box1")
        if node_id not in trace:
            trace.document(f.box1, "1099int", f.id, "box1", f"{f.payer_name or 'Payer'} 1099-INT box 1")
        inputs.append(node_id)
        result.interest_items.append(ScheduleBLineItem(f.payer_name, f.box1, f.id))
    result.line4 = sum(item.amount for item in result.interest_items)
    trace.computed(result.line4, "scheduleB.line4", inputs, "Schedule B, Line 4")

    # Part II - Ordinary dividends
    inputs = []
    for f in model.form1099_divs:
        node_id = document_node_id("1099div", f.id, "box1a")
        if node_id not in trace:
            trace.document(f.box1a, "1099div", f.id, "box1a", f"{f.payer_name or 'Payer'} 1099-DIV box 1a")
        inputs.append(node_id)
        result.dividend_items.append(ScheduleBLineItem(f.payer_name, f.box1a, f.id))
    result.line6 = sum(item.amount for item in result.dividend_items)
    trace.computed(result.line6, "scheduleB.line6", inputs, "Schedule B, Line 6")

    result.required = (
        result.line4 > config.schedule_b_threshold
        or result.line6 > config.schedule_b_threshold
    )
    return result
