"""
Schedule A - Itemized Deductions.

Always computed, even when the standard deduction wins, so the comparison
is visible in the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from calculator.decimal_math import apply_rate, prorate
from calculator.tax_year_config import TaxYearConfig
from calculator.traced import TraceRecorder
from models.deductions import ItemizedDeductions
from models.taxpayer import FilingStatus


@dataclass
class ScheduleAResult:
    line1: int = 0          # medical and dental expenses
    line2: int = 0          # AGI
    line3: int = 0          # 7.5% of AGI
    line4: int = 0          # medical deduction
    line5a: int = 0         # larger of income or sales taxes
    line5b: int = 0         # real estate taxes
    line5c: int = 0         # personal property taxes
    line5e: int = 0         # SALT before cap
    salt_cap: int = 0
    line7: int = 0          # SALT after cap
    line8a: int = 0         # mortgage interest after the acquisition debt limit
    line9: int = 0          # investment interest
    investment_interest_carryforward: int = 0
    line10: int = 0
    line11: int = 0         # cash charitable
    line12: int = 0         # non-cash charitable
    line14: int = 0         # total charitable
    line16: int = 0         # other itemized deductions
    line17: int = 0         # total itemized deductions


def compute_salt_cap(filing_status: FilingStatus, magi: int, config: TaxYearConfig) -> int:
    """
    SALT cap after the MAGI phase-out: the base cap reduced by 30% of MAGI
    over the threshold, never below the floor.
    """
    base_cap = config.salt_base_cap[filing_status]
    threshold = config.salt_phaseout_threshold[filing_status]
    floor = config.salt_floor[filing_status]
    excess = max(0, magi - threshold)
    reduction = apply_rate(excess, config.salt_phaseout_rate)
    return max(floor, base_cap - reduction)


def deductible_mortgage_interest(d: ItemizedDeductions, filing_status: FilingStatus, config: TaxYearConfig) -> int:
    """Interest x limit / principal when average principal exceeds the acquisition debt limit."""
    limit = (
        config.mortgage_limit_pre_tcja[filing_status]
        if d.mortgage_pre_tcja
        else config.mortgage_limit_post_tcja[filing_status]
    )
    if d.mortgage_principal > 0 and d.mortgage_principal > limit:
        return prorate(d.mortgage_interest, limit, d.mortgage_principal)
    return d.mortgage_interest


def compute_schedule_a(
    itemized: Optional[ItemizedDeductions],
    agi: int,
    net_investment_income: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
    trace: TraceRecorder,
    mortgage_limit_override: Optional[int] = None,
) -> ScheduleAResult:
    result = ScheduleAResult()
    d = itemized or ItemizedDeductions()

    if itemized is not None:
        for node_id, amount, label in (
            ("itemized.medicalExpenses", d.medical_expenses, "Medical expenses"),
            ("itemized.stateLocalIncomeTaxes", d.state_local_income_taxes, "State/local income taxes"),
            ("itemized.stateLocalSalesTaxes", d.state_local_sales_taxes, "General sales taxes"),
            ("itemized.realEstateTaxes", d.real_estate_taxes, "Real estate taxes"),
            ("itemized.personalPropertyTaxes", d.personal_property_taxes, "Personal property taxes"),
            ("itemized.mortgageInterest", d.mortgage_interest, "Mortgage interest"),
            ("itemized.investmentInterest", d.investment_interest, "Investment interest"),
            ("itemized.charitableCash", d.charitable_cash, "Charitable contributions (cash)"),
            ("itemized.charitableNoncash", d.charitable_noncash, "Charitable contributions (non-cash)"),
            ("itemized.otherDeductions", d.other_deductions, "Other itemized deductions"),
        ):
            if amount:
                trace.computed(amount, node_id, [], label)

    # Medical
    result.line1 = d.medical_expenses
    trace.computed(result.line1, "scheduleA.line1", ["itemized.medicalExpenses"], "Schedule A, Line 1")
    result.line2 = agi
    trace.computed(agi, "scheduleA.line2", ["form1040.line11"], "Schedule A, Line 2")
    result.line3 = apply_rate(max(0, agi), config.medical_expense_floor_pct)
    trace.computed(result.line3, "scheduleA.line3", ["scheduleA.line2"], "Schedule A, Line 3")
    result.line4 = max(0, result.line1 - result.line3)
    trace.computed(result.line4, "scheduleA.line4", ["scheduleA.line1", "scheduleA.line3"], "Schedule A, Line 4")

    # Taxes
    result.line5a = max(d.state_local_income_taxes, d.state_local_sales_taxes)
    trace.computed(result.line5a, "scheduleA.line5a",
                   ["itemized.stateLocalIncomeTaxes", "itemized.stateLocalSalesTaxes"], "Schedule A, Line 5a")
    result.line5b = d.real_estate_taxes
    trace.computed(result.line5b, "scheduleA.line5b", ["itemized.realEstateTaxes"], "Schedule A, Line 5b")
    result.line5c = d.personal_property_taxes
    trace.computed(result.line5c, "scheduleA.line5c", ["itemized.personalPropertyTaxes"], "Schedule A, Line 5c")
    result.line5e = result.line5a + result.line5b + result.line5c
    trace.computed(result.line5e, "scheduleA.line5e",
                   ["scheduleA.line5a", "scheduleA.line5b", "scheduleA.line5c"], "Schedule A, Line 5e")
    result.salt_cap = compute_salt_cap(filing_status, agi, config)
    result.line7 = min(result.line5e, result.salt_cap)
    trace.computed(result.line7, "scheduleA.line7", ["scheduleA.line5e", "scheduleA.line2"], "Schedule A, Line 7")

    # Interest
    if mortgage_limit_override is not None and d.mortgage_principal > mortgage_limit_override:
        result.line8a = prorate(d.mortgage_interest, mortgage_limit_override, d.mortgage_principal)
    else:
        result.line8a = deductible_mortgage_interest(d, filing_status, config)
    trace.computed(result.line8a, "scheduleA.line8a", ["itemized.mortgageInterest"], "Schedule A, Line 8a")

    total_investment_interest = d.investment_interest + d.prior_year_investment_interest_carryforward
    result.line9 = min(total_investment_interest, max(0, net_investment_income))
    result.investment_interest_carryforward = total_investment_interest - result.line9
    trace.computed(result.line9, "scheduleA.line9", ["itemized.investmentInterest"], "Schedule A, Line 9")
    if result.investment_interest_carryforward:
        trace.computed(result.investment_interest_carryforward, "form4952.carryforward",
                       ["itemized.investmentInterest", "scheduleA.line9"],
                       "Investment interest carryforward to next year")
    result.line10 = result.line8a + result.line9
    trace.computed(result.line10, "scheduleA.line10", ["scheduleA.line8a", "scheduleA.line9"], "Schedule A, Line 10")

    # Gifts to charity
    cash_limit = apply_rate(max(0, agi), config.charitable_cash_agi_limit)
    noncash_limit = apply_rate(max(0, agi), config.charitable_noncash_agi_limit)
    result.line11 = min(d.charitable_cash, cash_limit)
    trace.computed(result.line11, "scheduleA.line11", ["itemized.charitableCash"], "Schedule A, Line 11")
    result.line12 = min(d.charitable_noncash, noncash_limit)
    trace.computed(result.line12, "scheduleA.line12", ["itemized.charitableNoncash"], "Schedule A, Line 12")
    result.line14 = min(result.line11 + result.line12, cash_limit)
    trace.computed(result.line14, "scheduleA.line14", ["scheduleA.line11", "scheduleA.line12"], "Schedule A, Line 14")

    result.line16 = d.other_deductions
    trace.computed(result.line16, "scheduleA.line16", ["itemized.otherDeductions"], "Schedule A, Line 16")

    result.line17 = result.line4 + result.line7 + result.line10 + result.line14 + result.line16
    trace.computed(
        result.line17, "scheduleA.line17",
        ["scheduleA.line4", "scheduleA.line7", "scheduleA.line10", "scheduleA.line14", "scheduleA.line16"],
        "Schedule A, Line 17",
    )
    return result
