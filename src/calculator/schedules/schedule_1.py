"""
Schedule 1 - Additional Income and Adjustments to Income.

Part I (additional income):
    line 1   taxable state/local refunds (1099-G box 2, only if itemized last year)
    line 3   business income (Schedule C net profit + 1099-NEC)
    line 5   rents, royalties, partnerships (Schedule E line 26 or 1099-MISC
             rents/royalties, plus K-1 passthrough after the PAL limit)
    line 7   unemployment compensation (1099-G box 1)
    line 8z  other income (1099-MISC box 3)
    line 10  total additional income

Part II (adjustments):
    line 11  educator expenses
    line 13  HSA deduction
    line 15  deductible part of SE tax
    line 16  SE retirement plans
    line 17  SE health insurance
    line 20  IRA deduction
    line 21  student loan interest
    line 24z other adjustments
    line 26  total adjustments
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from calculator.decimal_math import phase_out_fraction, round_cents
from calculator.k1 import K1AggregateResult
from calculator.schedules.schedule_e import ScheduleEResult
from calculator.tax_year_config import TaxYearConfig
from calculator.traced import TraceRecorder
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus


@dataclass
class Schedule1Result:
    # Part I
    line1: int = 0
    line3: int = 0
    line5: int = 0
    line7: int = 0
    line8z: int = 0
    line10: int = 0
    # Part II
    line11: int = 0
    line13: int = 0
    line15: int = 0
    line16: int = 0
    line17: int = 0
    line20: int = 0
    line21: int = 0
    line24z: int = 0
    line26: int = 0


def compute_schedule_1(
    model: TaxReturn,
    trace: TraceRecorder,
    schedule_c_net_profit: int = 0,
    nec_total: int = 0,
    schedule_e: Optional[ScheduleEResult] = None,
    k1_passthrough: Optional[K1AggregateResult] = None,
    k1_allowed_rental: int = 0,
) -> Schedule1Result:
    """Part I. ``k1_allowed_rental`` is the K-1 rental amount after the PAL limit."""
    result = Schedule1Result()

    # Line 1 - taxable refunds (tax benefit rule, IRC 111)
    itemized_last_year = bool(model.prior_year and model.prior_year.itemized_last_year)
    inputs = []
    if itemized_last_year:
        for g in model.form1099_gs:
            if g.box2 > 0:
                result.line1 += g.box2
                inputs.append(f"1099g:{g.id}:box2")
    trace.computed(result.line1, "schedule1.line1", inputs, "Schedule 1, Line 1")

    # Line 3 - business income
    result.line3 = schedule_c_net_profit + nec_total
    inputs = ["scheduleC.totalNetProfit"] + [f"1099nec:{f.id}:box1" for f in model.form1099_necs if f.box1]
    trace.computed(result.line3, "schedule1.line3", inputs, "Schedule 1, Line 3")

    # Line 5 - rents, royalties, passthrough entities
    inputs = []
    if schedule_e is not None:
        result.line5 = schedule_e.line26
        inputs.append("scheduleE.line26")
    else:
        for f in model.form1099_miscs:
            if f.box1 > 0:
                result.line5 += f.box1
                inputs.append(f"1099misc:{f.id}:box1")
            if f.box2 > 0:
                result.line5 += f.box2
                inputs.append(f"1099misc:{f.id}:box2")
    if k1_passthrough is not None:
        result.line5 += (
            k1_passthrough.total_ordinary_income
            + k1_allowed_rental
            + k1_passthrough.total_guaranteed_payments
        )
        inputs.append("k1.passthroughIncome")
    trace.computed(result.line5, "schedule1.line5", inputs, "Schedule 1, Line 5")

    # Line 7 - unemployment
    inputs = []
    for g in model.form1099_gs:
        if g.box1 > 0:
            result.line7 += g.box1
            inputs.append(f"1099g:{g.id}:box1")
    trace.computed(result.line7, "schedule1.line7", inputs, "Schedule 1, Line 7")

    # Line 8z - other income
    inputs = []
    for f in model.form1099_miscs:
        if f.box3 > 0:
            result.line8z += f.box3
            inputs.append(f"1099misc:{f.id}:box3")
    trace.computed(result.line8z, "schedule1.line8z", inputs, "Schedule 1, Line 8z")

    result.line10 = result.line1 + result.line3 + result.line5 + result.line7 + result.line8z
    trace.computed(
        result.line10, "schedule1.line10",
        ["schedule1.line1", "schedule1.line3", "schedule1.line5", "schedule1.line7", "schedule1.line8z"],
        "Schedule 1, Line 10",
    )
    return result


def student_loan_interest_deduction(
    interest_paid: int,
    magi: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
) -> int:
    """Up to $2,500, reduced linearly across the MAGI phase-out range. MFS is not eligible."""
    if filing_status == FilingStatus.MARRIED_SEPARATE or interest_paid <= 0:
        return 0
    capped = min(interest_paid, config.student_loan_interest_max)
    start, end = config.student_loan_phaseout[filing_status]
    reduction = round_cents(capped * phase_out_fraction(magi, start, end))
    return max(0, capped - reduction)


def fill_schedule_1_adjustments(
    result: Schedule1Result,
    model: TaxReturn,
    se_deductible_half: int,
    se_net_profit: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
    trace: TraceRecorder,
) -> int:
    """
    Part II lines that do not depend on total income (everything but line 21).
    Fills ``result`` in place and returns their sum.
    """
    adj = model.adjustments

    educator = min(adj.educator_expenses, config.educator_expense_max)
    if filing_status == FilingStatus.MARRIED_JOINT:
        educator += min(adj.spouse_educator_expenses, config.educator_expense_max)
    result.line11 = educator
    if educator:
        trace.computed(educator, "adjustments.educator", [], "Educator expenses (Schedule 1, Line 11)")

    result.line13 = adj.hsa_deduction
    if result.line13:
        trace.computed(result.line13, "adjustments.hsa", [], "HSA deduction (Form 8889)")

    result.line15 = se_deductible_half
    if result.line15:
        trace.computed(result.line15, "adjustments.seTax", ["scheduleSE.deductibleHalf"],
                       "Deductible part of self-employment tax (Schedule 1, Line 15)")

    result.line16 = adj.self_employed_retirement
    # SE health insurance cannot exceed the business's net profit
    result.line17 = min(adj.self_employed_health_insurance, max(0, se_net_profit - se_deductible_half))

    result.line20 = adj.ira_deduction
    if result.line20:
        trace.computed(result.line20, "adjustments.ira", [], "IRA deduction (Schedule 1, Line 20)")

    result.line24z = adj.other
    return adjustments_before_student_loan(result)


def adjustments_before_student_loan(result: Schedule1Result) -> int:
    return (
        result.line11 + result.line13 + result.line15 + result.line16
        + result.line17 + result.line20 + result.line24z
    )


def finish_schedule_1_adjustments(
    result: Schedule1Result,
    model: TaxReturn,
    total_income: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
    trace: TraceRecorder,
) -> Schedule1Result:
    """Line 21 (MAGI is total income less every other adjustment) and line 26."""
    adj = model.adjustments
    other_adjustments = adjustments_before_student_loan(result)
    magi = total_income - other_adjustments
    result.line21 = student_loan_interest_deduction(adj.student_loan_interest, magi, filing_status, config)
    if result.line21:
        trace.computed(result.line21, "adjustments.studentLoan", [],
                       "Student loan interest deduction (Schedule 1, Line 21)")

    result.line26 = other_adjustments + result.line21
    trace.computed(
        result.line26, "schedule1.line26",
        ["adjustments.educator", "adjustments.hsa", "adjustments.seTax", "adjustments.ira", "adjustments.studentLoan"],
        "Schedule 1, Line 26",
    )
    return result


def compute_schedule_1_adjustments(
    result: Schedule1Result,
    model: TaxReturn,
    total_income: int,
    se_deductible_half: int,
    se_net_profit: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
    trace: TraceRecorder,
) -> Schedule1Result:
    """Part II in one step. Fills lines 11 through 26 of ``result`` in place and returns it."""
    fill_schedule_1_adjustments(result, model, se_deductible_half, se_net_profit, filing_status, config, trace)
    return finish_schedule_1_adjustments(result, model, total_income, filing_status, config, trace)
