"""State tax configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Tuple, Optional

from calculator.decimal_math import cents
from models.taxpayer import FilingStatus


# Type alias for bracket tables: filing_status -> [(floor_cents, rate), ...]
StateBracketTable = Dict[FilingStatus, List[Tuple[int, float]]]
StatusAmounts = Dict[FilingStatus, int]

# Where state taxable income starts
FEDERAL_AGI = "federal_agi"
FEDERAL_TAXABLE_INCOME = "federal_taxable_income"
GROSS_INCOME = "gross_income"

# How a part-year return is prorated
SCALE_TAX = "scale_tax"
APPORTION_INCOME = "apportion_income"

# Itemized deductions allowed in place of the standard deduction
ITEMIZED_FEDERAL = "federal"
ITEMIZED_UNCAPPED_SALT = "uncapped_salt"


def status_amounts(single, mfj, mfs=None, hoh=None, qw=None) -> StatusAmounts:
    """Dollar amounts per filing status, converted to cents. MFS defaults to single, QW to MFJ."""
    return {
        FilingStatus.SINGLE: cents(single),
        FilingStatus.MARRIED_JOINT: cents(mfj),
        FilingStatus.MARRIED_SEPARATE: cents(single if mfs is None else mfs),
        FilingStatus.HEAD_OF_HOUSEHOLD: cents(single if hoh is None else hoh),
        FilingStatus.QUALIFYING_WIDOW: cents(mfj if qw is None else qw),
    }


def bracket_floors(floors, rates) -> List[Tuple[int, float]]:
    return [(cents(floor), rate) for floor, rate in zip(floors, rates)]


def bracket_table(single, mfj, mfs=None, hoh=None, qw=None) -> StateBracketTable:
    return {
        FilingStatus.SINGLE: single,
        FilingStatus.MARRIED_JOINT: mfj,
        FilingStatus.MARRIED_SEPARATE: single if mfs is None else mfs,
        FilingStatus.HEAD_OF_HOUSEHOLD: single if hoh is None else hoh,
        FilingStatus.QUALIFYING_WIDOW: mfj if qw is None else qw,
    }


@dataclass(frozen=True)
class StateTaxConfig:
    """
    Configuration for a specific state and tax year. Money in cents.

    This dataclass holds all the static data needed to calculate state income tax,
    including brackets, deductions, exemptions, and state-specific rules.
    """

    # Basic identification
    state_code: str
    state_name: str
    tax_year: int
    form_label: str
    node_prefix: str

    # Tax structure
    is_flat_tax: bool
    flat_rate: Optional[float] = None  # If is_flat_tax is True
    brackets: Optional[StateBracketTable] = None  # If progressive

    # "federal_agi" - most common
    # "federal_taxable_income" - CO
    # "gross_income" - NJ, PA
    starts_from: str = FEDERAL_AGI

    standard_deduction: StatusAmounts = field(default_factory=dict)
    # Standard deduction as a share of state AGI, capped at standard_deduction
    standard_deduction_rate: Optional[float] = None
    # None, ITEMIZED_FEDERAL (Schedule A line 17) or ITEMIZED_UNCAPPED_SALT
    # (line 17 with the state and local tax cap removed); the larger of the
    # itemized and standard amounts is used when the return itemizes
    itemized_deductions: Optional[str] = None

    # Personal exemptions reduce income unless exemption_is_credit is set,
    # in which case they are a per-exemption credit against tax
    personal_exemption_amount: StatusAmounts = field(default_factory=dict)
    dependent_exemption_amount: int = 0
    exemption_is_credit: bool = False

    # State-specific income rules
    social_security_taxable: bool = False
    us_interest_taxable: bool = False
    hsa_addback: bool = False
    pension_exclusion_limit: Optional[int] = None
    # Social Security subtraction only at or below this federal AGI, and capped
    social_security_agi_limit: StatusAmounts = field(default_factory=dict)
    social_security_exclusion_cap: StatusAmounts = field(default_factory=dict)
    # Pension and IRA distributions (Form 1040 lines 4b and 5b) fully exempt
    retirement_income_exempt: bool = False
    # Interest and exempt-interest dividends tax-free federally are added back
    tax_exempt_interest_addback: bool = False
    # Federal income tax (Form 1040 line 24) subtracted, capped when set
    federal_tax_deduction: bool = False
    federal_tax_deduction_cap: StatusAmounts = field(default_factory=dict)

    # State EITC (as percentage of federal EITC, e.g., 0.30 = 30%)
    eitc_percentage: Optional[float] = None
    eitc_refundable: bool = True
    # Rate for filers with no qualifying children, when it differs
    eitc_percentage_no_children: Optional[float] = None

    # Exemption credits disallowed above this federal AGI
    exemption_credit_agi_limit: StatusAmounts = field(default_factory=dict)
    # Nonrefundable share of the federal child and dependent care credit
    dependent_care_credit_rate: Optional[float] = None
    # Credit per federal qualifying child
    child_credit_per_child: int = 0
    child_credit_refundable: bool = False
    # Food or grocery sales tax credit per exemption, optionally limited by AGI
    food_credit_per_exemption: int = 0
    food_credit_senior_amount: int = 0
    food_credit_agi_limit: StatusAmounts = field(default_factory=dict)
    food_credit_refundable: bool = True

    renter_credit_single: int = 0
    renter_credit_joint: int = 0
    renter_credit_income_limit_single: Optional[int] = None
    renter_credit_income_limit_joint: Optional[int] = None

    apportionment_method: str = APPORTION_INCOME
    # SCALE_TAX states scale the full-year tax before credits unless this is set
    scale_after_credits: bool = False
    # W-2s with no box 15 state count toward withholding
    withholding_includes_blank_state: bool = False

    def get_standard_deduction(self, filing_status: FilingStatus) -> int:
        """Get standard deduction for a filing status."""
        return self.standard_deduction.get(filing_status, 0)

    def get_personal_exemption(self, filing_status: FilingStatus) -> int:
        """Get personal exemption amount for a filing status."""
        return self.personal_exemption_amount.get(filing_status, 0)

    def get_brackets(self, filing_status: FilingStatus) -> List[Tuple[int, float]]:
        """Get tax brackets for a filing status."""
        if self.is_flat_tax:
            return [(0, self.flat_rate or 0.0)]
        if self.brackets:
            return self.brackets.get(filing_status, self.brackets.get(FilingStatus.SINGLE, []))
        return []

    def for_year(self, tax_year: int) -> "StateTaxConfig":
        """Same rules carried to another tax year."""
        return replace(self, tax_year=tax_year)
