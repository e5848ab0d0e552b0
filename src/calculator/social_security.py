"""
Taxable Social Security benefits (Form 1040 lines 6a/6b).

Per IRS Publication 915, Worksheet 1:
- Combined income = AGI without benefits + tax-exempt interest + 50% of benefits
- Tier 0: combined income <= base amount, nothing taxable
- Tier 1: up to 50% of the excess over the base amount
- Tier 2: 85% of the excess over the additional amount plus the tier 1
  maximum, capped at 85% of benefits
"""

from __future__ import annotations

from dataclasses import dataclass

from calculator.decimal_math import apply_rate
from calculator.tax_year_config import TaxYearConfig
from models.taxpayer import FilingStatus


@dataclass
class SocialSecurityResult:
    gross_benefits: int = 0
    half_benefits: int = 0
    modified_agi: int = 0
    combined_income: int = 0
    base_amount: int = 0
    additional_amount: int = 0
    taxable_benefits: int = 0
    tier: int = 0
    federal_withheld: int = 0


def compute_taxable_social_security(
    gross_benefits: int,
    other_income: int,
    tax_exempt_interest: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
    federal_withheld: int = 0,
) -> SocialSecurityResult:
    """
    Args:
        gross_benefits: Sum of SSA-1099 box 5
        other_income: AGI computed without Social Security benefits
        tax_exempt_interest: 1099-INT box 8 total
    """
    base_amount, additional_amount = config.ss_base_amounts[filing_status]
    result = SocialSecurityResult(
        gross_benefits=max(0, gross_benefits),
        base_amount=base_amount,
        additional_amount=additional_amount,
        federal_withheld=federal_withheld,
    )
    if gross_benefits <= 0:
        return result

    result.half_benefits = apply_rate(gross_benefits, "0.5")
    result.modified_agi = other_income + tax_exempt_interest
    result.combined_income = result.modified_agi + result.half_benefits

    if result.combined_income <= base_amount:
        return result

    half_of_benefits = apply_rate(gross_benefits, "0.5")
    if result.combined_income <= additional_amount:
        result.tier = 1
        result.taxable_benefits = min(
            apply_rate(result.combined_income - base_amount, "0.5"),
            half_of_benefits,
        )
        return result

    result.tier = 2
    tier1_max = min(apply_rate(additional_amount - base_amount, "0.5"), half_of_benefits)
    result.taxable_benefits = min(
        apply_rate(result.combined_income - additional_amount, "0.85") + tier1_max,
        apply_rate(gross_benefits, "0.85"),
    )
    return result
