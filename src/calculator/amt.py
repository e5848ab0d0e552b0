"""
Alternative Minimum Tax (Form 6251).

Part I   AMTI: taxable income plus the taxes (or standard deduction) added
         back, private activity bond interest and the ISO bargain element.
Part II  Exemption, reduced by a share of AMTI over the phase-out threshold.
Part III Tentative minimum tax at 26%/28%, with qualified dividends and net
         capital gain kept at their 0/15/20% rates, never above the flat
         computation. AMT is the excess over regular tax.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

from calculator.decimal_math import apply_rate, round_cents, to_decimal
from calculator.tax_year_config import TaxYearConfig
from models.taxpayer import FilingStatus


@dataclass
class AMTResult:
    line1_taxable_income: int = 0
    line2a_taxes: int = 0
    line2g_private_activity_bonds: int = 0
    line2i_iso_spread: int = 0
    line4_amti: int = 0
    line5_exemption: int = 0
    phase_out_reduction: int = 0
    line6_amti_after_exemption: int = 0
    preferential_income: int = 0
    tentative_minimum_tax: int = 0
    regular_tax: int = 0
    amt: int = 0


def flat_amt(amount: int, filing_status: FilingStatus, config: TaxYearConfig) -> int:
    """26% up to the 28% threshold, 28% above it."""
    if amount <= 0:
        return 0
    threshold = config.amt_28_percent_threshold[filing_status]
    if amount <= threshold:
        return apply_rate(amount, config.amt_low_rate)
    tax = (
        Decimal(threshold) * to_decimal(config.amt_low_rate)
        + Decimal(amount - threshold) * to_decimal(config.amt_high_rate)
    )
    return round_cents(tax)


def _tentative_minimum_tax(
    amti_after_exemption: int,
    qualified_dividends: int,
    net_capital_gain: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
) -> Tuple[int, int]:
    flat = flat_amt(amti_after_exemption, filing_status, config)
    preferential = min(max(0, qualified_dividends) + max(0, net_capital_gain), amti_after_exemption)
    if preferential <= 0:
        return flat, 0

    ordinary = amti_after_exemption - preferential
    zero_top = config.qd_ltcg_0_rate_threshold[filing_status]
    fifteen_top = config.qd_ltcg_15_rate_threshold[filing_status]

    at_zero = max(0, min(amti_after_exemption, zero_top) - ordinary)
    at_fifteen = min(preferential - at_zero, max(0, fifteen_top - ordinary - at_zero))
    at_twenty = preferential - at_zero - at_fifteen

    split = (
        flat_amt(ordinary, filing_status, config)
        + apply_rate(at_fifteen, "0.15")
        + apply_rate(at_twenty, "0.20")
    )
    return min(split, flat), preferential


def compute_amt(
    taxable_income: int,
    regular_tax: int,
    taxes_added_back: int,
    private_activity_bond_interest: int,
    iso_spread: int,
    qualified_dividends: int,
    net_capital_gain: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
) -> AMTResult:
    """
    Args:
        taxes_added_back: Schedule A line 7 when itemizing, otherwise the
            standard deduction
        regular_tax: Form 1040 line 16
    """
    result = AMTResult(
        line1_taxable_income=taxable_income,
        line2a_taxes=taxes_added_back,
        line2g_private_activity_bonds=private_activity_bond_interest,
        line2i_iso_spread=iso_spread,
        regular_tax=regular_tax,
    )
    result.line4_amti = taxable_income + taxes_added_back + private_activity_bond_interest + iso_spread

    excess = max(0, result.line4_amti - config.amt_phaseout_threshold[filing_status])
    result.phase_out_reduction = apply_rate(excess, config.amt_phaseout_rate)
    result.line5_exemption = max(0, config.amt_exemption[filing_status] - result.phase_out_reduction)
    result.line6_amti_after_exemption = max(0, result.line4_amti - result.line5_exemption)

    result.tentative_minimum_tax, result.preferential_income = _tentative_minimum_tax(
        result.line6_amti_after_exemption, qualified_dividends, net_capital_gain, filing_status, config
    )
    result.amt = max(0, result.tentative_minimum_tax - regular_tax)
    return result
