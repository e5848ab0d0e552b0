"""
Bracket tax and the Qualified Dividends and Capital Gain Tax Worksheet.

All amounts are integer cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple, Dict, Any

from calculator.decimal_math import round_cents, apply_rate, to_decimal
from calculator.tax_year_config import TaxYearConfig
from models.taxpayer import FilingStatus


def compute_bracket_tax(
    taxable_income: int,
    brackets: List[Tuple[int, float]],
    return_breakdown: bool = False,
):
    """
    Progressive tax over ``brackets`` ([(floor, rate), ...], ascending).

    The per-bracket products are summed exactly and rounded once at the end.
    """
    if taxable_income <= 0:
        if return_breakdown:
            return 0, []
        return 0

    tax = Decimal(0)
    breakdown: List[Dict[str, Any]] = []

    for idx, (floor, rate) in enumerate(brackets):
        if taxable_income <= floor:
            break
        if idx == len(brackets) - 1:
            # Top bracket
            ceiling = None
            amount = taxable_income - floor
        else:
            ceiling = brackets[idx + 1][0]
            amount = min(taxable_income, ceiling) - floor

        bracket_tax = Decimal(amount) * to_decimal(rate)
        tax += bracket_tax
        breakdown.append({
            'rate': rate,
            'floor': floor,
            'ceiling': ceiling,
            'income_in_bracket': amount,
            'tax': round_cents(bracket_tax),
        })

    if return_breakdown:
        return round_cents(tax), breakdown
    return round_cents(tax)


def ordinary_income_tax(taxable_income: int, filing_status: FilingStatus, config: TaxYearConfig) -> int:
    return compute_bracket_tax(taxable_income, config.brackets_for(filing_status))


def marginal_rate(taxable_income: int, filing_status: FilingStatus, config: TaxYearConfig) -> float:
    rate = 0.0
    for floor, bracket_rate in config.brackets_for(filing_status):
        if taxable_income > floor or floor == 0:
            rate = bracket_rate
    return rate


@dataclass
class QDCGWorksheet:
    """Line-by-line Qualified Dividends and Capital Gain Tax Worksheet."""
    line1_taxable_income: int = 0
    line2_qualified_dividends: int = 0
    line3_net_capital_gain: int = 0
    line4_preferential: int = 0
    line5_ordinary: int = 0
    line6_zero_rate_threshold: int = 0
    line7: int = 0
    line8: int = 0
    line9_taxed_at_zero: int = 0
    line10: int = 0
    line12: int = 0
    line13_fifteen_rate_threshold: int = 0
    line14: int = 0
    line15: int = 0
    line16: int = 0
    line17_taxed_at_fifteen: int = 0
    line18_tax_at_fifteen: int = 0
    line19: int = 0
    line20_taxed_at_twenty: int = 0
    line21_tax_at_twenty: int = 0
    line22_tax_on_ordinary: int = 0
    line23: int = 0
    line24_all_ordinary_tax: int = 0
    line25_tax: int = 0


def net_cap_gain_for_qdcg(
    schedule_d_line15: int,
    schedule_d_line16: int,
    capital_gain_distributions: int,
    has_schedule_d: bool,
) -> int:
    """Worksheet line 3: the smaller of Schedule D lines 15 and 16 (not below 0)."""
    if has_schedule_d:
        return max(0, min(schedule_d_line15, schedule_d_line16))
    return max(0, capital_gain_distributions)


def compute_qdcg_tax(
    taxable_income: int,
    qualified_dividends: int,
    net_capital_gain: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
) -> QDCGWorksheet:
    """
    Tax on line 15 with the preferential slice stacked on top of ordinary
    income across the 0/15/20% thresholds. The result never exceeds the
    all-ordinary bracket tax.
    """
    ws = QDCGWorksheet()
    brackets = config.brackets_for(filing_status)

    ws.line1_taxable_income = max(0, taxable_income)
    ws.line2_qualified_dividends = max(0, qualified_dividends)
    ws.line3_net_capital_gain = max(0, net_capital_gain)
    ws.line4_preferential = ws.line2_qualified_dividends + ws.line3_net_capital_gain
    ws.line5_ordinary = max(0, ws.line1_taxable_income - ws.line4_preferential)

    ws.line6_zero_rate_threshold = config.qd_ltcg_0_rate_threshold[filing_status]
    ws.line7 = min(ws.line1_taxable_income, ws.line6_zero_rate_threshold)
    ws.line8 = min(ws.line5_ordinary, ws.line7)
    ws.line9_taxed_at_zero = ws.line7 - ws.line8

    ws.line10 = min(ws.line1_taxable_income, ws.line4_preferential)
    ws.line12 = ws.line10 - ws.line9_taxed_at_zero
    ws.line13_fifteen_rate_threshold = config.qd_ltcg_15_rate_threshold[filing_status]
    ws.line14 = min(ws.line1_taxable_income, ws.line13_fifteen_rate_threshold)
    ws.line15 = ws.line5_ordinary + ws.line9_taxed_at_zero
    ws.line16 = max(0, ws.line14 - ws.line15)
    ws.line17_taxed_at_fifteen = min(ws.line12, ws.line16)
    ws.line18_tax_at_fifteen = apply_rate(ws.line17_taxed_at_fifteen, "0.15")

    ws.line19 = ws.line9_taxed_at_zero + ws.line17_taxed_at_fifteen
    ws.line20_taxed_at_twenty = max(0, ws.line10 - ws.line19)
    ws.line21_tax_at_twenty = apply_rate(ws.line20_taxed_at_twenty, "0.20")

    ws.line22_tax_on_ordinary = compute_bracket_tax(ws.line5_ordinary, brackets)
    ws.line23 = ws.line18_tax_at_fifteen + ws.line21_tax_at_twenty + ws.line22_tax_on_ordinary
    ws.line24_all_ordinary_tax = compute_bracket_tax(ws.line1_taxable_income, brackets)
    ws.line25_tax = min(ws.line23, ws.line24_all_ordinary_tax)
    return ws
