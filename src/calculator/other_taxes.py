"""
Schedule 2 Part II taxes that feed Form 1040 line 23 besides SE tax:

- Additional Medicare Tax (Form 8959): 0.9% of Medicare wages and SE
  earnings above the filing-status threshold. The SE threshold is reduced
  by Medicare wages. Employers withhold 0.9% on wages over $200,000, and
  anything withheld beyond the regular 1.45% is credited on line 25.
- Net Investment Income Tax (Form 8960): 3.8% of the smaller of net
  investment income and MAGI over the threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from calculator.decimal_math import apply_rate
from calculator.tax_year_config import TaxYearConfig
from models.income import W2
from models.taxpayer import FilingStatus


@dataclass
class AdditionalMedicareResult:
    medicare_wages: int = 0
    se_earnings: int = 0
    threshold: int = 0
    wage_tax: int = 0
    se_tax: int = 0
    medicare_withheld: int = 0
    regular_medicare_on_wages: int = 0
    withholding_credit: int = 0

    @property
    def total_tax(self) -> int:
        return self.wage_tax + self.se_tax


@dataclass
class NIITResult:
    net_investment_income: int = 0
    modified_agi: int = 0
    threshold: int = 0
    excess_magi: int = 0
    tax: int = 0


def compute_additional_medicare_tax(
    w2s: List[W2],
    se_net_earnings: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
) -> AdditionalMedicareResult:
    result = AdditionalMedicareResult(
        medicare_wages=sum(w.box5 for w in w2s),
        se_earnings=max(0, se_net_earnings),
        threshold=config.additional_medicare_threshold[filing_status],
    )
    rate = config.additional_medicare_tax_rate

    result.wage_tax = apply_rate(max(0, result.medicare_wages - result.threshold), rate)
    se_threshold = max(0, result.threshold - result.medicare_wages)
    result.se_tax = apply_rate(max(0, result.se_earnings - se_threshold), rate)

    result.medicare_withheld = sum(w.box6 for w in w2s)
    result.regular_medicare_on_wages = apply_rate(result.medicare_wages, config.employee_medicare_rate)
    result.withholding_credit = max(0, result.medicare_withheld - result.regular_medicare_on_wages)
    return result


def compute_niit(
    net_investment_income: int,
    modified_agi: int,
    filing_status: FilingStatus,
    config: TaxYearConfig,
) -> NIITResult:
    result = NIITResult(
        net_investment_income=max(0, net_investment_income),
        modified_agi=modified_agi,
        threshold=config.niit_threshold[filing_status],
    )
    result.excess_magi = max(0, modified_agi - result.threshold)
    result.tax = apply_rate(min(result.net_investment_income, result.excess_magi), config.niit_rate)
    return result
