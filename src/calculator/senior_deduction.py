"""
Age and blindness deductions.

- Additional standard deduction: a fixed amount per condition (65 or older,
  blind) for the filer and, on a married return, the spouse. Added to the
  standard deduction only.
- Senior deduction (Schedule 1-A, tax years 2025 through 2028): $6,000 per
  filer 65 or older, each reduced by 6% of modified AGI over the threshold.
  Taken whether or not the return itemizes. Separate filers get none.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from calculator.decimal_math import apply_rate
from calculator.tax_year_config import TaxYearConfig
from models.taxpayer import FilingStatus, Taxpayer

SENIOR_AGE = 65


@dataclass
class SeniorDeductionResult:
    senior_count: int = 0
    blind_count: int = 0
    additional_per_condition: int = 0
    additional_standard_deduction: int = 0
    modified_agi: int = 0
    reduction_per_senior: int = 0
    senior_deduction: int = 0


def is_senior(person: Optional[Taxpayer], tax_year: int) -> bool:
    if person is None:
        return False
    age = person.age_at_year_end(tax_year)
    return age is not None and age >= SENIOR_AGE


def compute_senior_deduction(
    taxpayer: Taxpayer,
    spouse: Optional[Taxpayer],
    filing_status: FilingStatus,
    modified_agi: int,
    tax_year: int,
    config: TaxYearConfig,
) -> SeniorDeductionResult:
    married = filing_status in (FilingStatus.MARRIED_JOINT, FilingStatus.MARRIED_SEPARATE)
    people = [taxpayer, spouse] if married and spouse is not None else [taxpayer]

    result = SeniorDeductionResult(modified_agi=modified_agi)
    result.senior_count = sum(1 for p in people if is_senior(p, tax_year))
    result.blind_count = sum(1 for p in people if p.is_blind)
    result.additional_per_condition = config.additional_standard_deduction.get(filing_status, 0)
    result.additional_standard_deduction = (
        (result.senior_count + result.blind_count) * result.additional_per_condition
    )

    if not config.senior_deduction_amount or filing_status == FilingStatus.MARRIED_SEPARATE:
        return result
    threshold = config.senior_deduction_phaseout_threshold[filing_status]
    result.reduction_per_senior = apply_rate(max(0, modified_agi - threshold), config.senior_deduction_phaseout_rate)
    per_senior = max(0, config.senior_deduction_amount - result.reduction_per_senior)
    result.senior_deduction = per_senior * result.senior_count
    return result
