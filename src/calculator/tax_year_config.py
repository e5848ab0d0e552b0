from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional

from calculator.decimal_math import cents
from calculator.exceptions import UnsupportedTaxYearError
from models.taxpayer import FilingStatus


S = FilingStatus.SINGLE
MFJ = FilingStatus.MARRIED_JOINT
MFS = FilingStatus.MARRIED_SEPARATE
HOH = FilingStatus.HEAD_OF_HOUSEHOLD
QW = FilingStatus.QUALIFYING_WIDOW

# filing_status -> [(floor_cents, rate), ...] in ascending floor order
BracketTable = Dict[FilingStatus, List[Tuple[int, float]]]
StatusAmounts = Dict[FilingStatus, int]


def _by_status(single, mfj, mfs, hoh, qw=None) -> StatusAmounts:
    """Dollar amounts per filing status, converted to cents."""
    return {
        S: cents(single),
        MFJ: cents(mfj),
        MFS: cents(mfs),
        HOH: cents(hoh),
        QW: cents(mfj if qw is None else qw),
    }


def _brackets(floors, rates=(0.10, 0.12, 0.22, 0.24, 0.32, 0.35, 0.37)) -> List[Tuple[int, float]]:
    return [(cents(floor), rate) for floor, rate in zip(floors, rates)]


@dataclass(frozen=True)
class EICSchedule:
    """One column of the EIC table (0, 1, 2 or 3+ qualifying children)."""
    max_credit: int
    earned_income_amount: int
    phase_in_rate: float
    phase_out_rate: float
    phase_out_start_single: int
    phase_out_start_mfj: int


@dataclass(frozen=True)
class TaxYearConfig:
    """
    Centralized constants for a given tax year. Money in cents.

    NOTE: Values here should be reviewed annually against IRS published figures.
    Adding a year means adding a ``for_<year>()`` constructor and registering it
    in the year registry.
    """

    tax_year: int
    ordinary_income_brackets: BracketTable
    standard_deduction: StatusAmounts

    # Preferential rate thresholds for Qualified Dividends / Long-Term Capital Gains.
    qd_ltcg_0_rate_threshold: StatusAmounts
    qd_ltcg_15_rate_threshold: StatusAmounts

    # Self-employment (Schedule SE) configuration
    ss_wage_base: int
    se_net_earnings_factor: float = 0.9235  # 92.35%
    ss_rate: float = 0.124  # 12.4% Social Security (up to wage base)
    medicare_rate: float = 0.029  # 2.9% Medicare (no wage base limit)
    se_minimum_net_earnings: int = cents(400)
    employee_medicare_rate: float = 0.0145

    # Additional Medicare Tax (0.9% on wages/SE income over threshold)
    additional_medicare_tax_rate: float = 0.009
    additional_medicare_threshold: StatusAmounts = field(
        default_factory=lambda: _by_status(200000, 250000, 125000, 200000, 200000)
    )

    # Net Investment Income Tax (3.8% on lesser of NII or MAGI over threshold)
    niit_rate: float = 0.038
    niit_threshold: StatusAmounts = field(
        default_factory=lambda: _by_status(200000, 250000, 125000, 200000, 250000)
    )

    schedule_b_threshold: int = cents(1500)

    # Schedule A
    medical_expense_floor_pct: float = 0.075
    salt_base_cap: StatusAmounts = field(default_factory=dict)
    salt_phaseout_threshold: StatusAmounts = field(default_factory=dict)
    salt_phaseout_rate: float = 0.30
    salt_floor: StatusAmounts = field(
        default_factory=lambda: _by_status(10000, 10000, 5000, 10000, 10000)
    )
    mortgage_limit_post_tcja: StatusAmounts = field(
        default_factory=lambda: _by_status(750000, 750000, 375000, 750000, 750000)
    )
    mortgage_limit_pre_tcja: StatusAmounts = field(
        default_factory=lambda: _by_status(1000000, 1000000, 500000, 1000000, 1000000)
    )
    charitable_cash_agi_limit: float = 0.60
    charitable_noncash_agi_limit: float = 0.30

    # Additional standard deduction per condition (age 65 or older, blind)
    additional_standard_deduction: StatusAmounts = field(default_factory=dict)

    # Senior deduction (Schedule 1-A): per filer 65 or older, reduced by a
    # share of MAGI over the threshold. Not available to separate filers.
    senior_deduction_amount: int = 0
    senior_deduction_phaseout_threshold: StatusAmounts = field(default_factory=dict)
    senior_deduction_phaseout_rate: float = 0.06

    # Alternative Minimum Tax (Form 6251)
    amt_exemption: StatusAmounts = field(default_factory=dict)
    amt_phaseout_threshold: StatusAmounts = field(default_factory=dict)
    amt_phaseout_rate: float = 0.25
    amt_28_percent_threshold: StatusAmounts = field(default_factory=dict)
    amt_low_rate: float = 0.26
    amt_high_rate: float = 0.28

    # Capital Loss Deduction Limits (IRC Section 1211(b))
    capital_loss_limit: StatusAmounts = field(
        default_factory=lambda: _by_status(3000, 3000, 1500, 3000, 3000)
    )

    # Social Security Taxation Thresholds (IRS Pub. 915): (base1, base2)
    ss_base_amounts: Dict[FilingStatus, Tuple[int, int]] = field(
        default_factory=lambda: {
            S: (cents(25000), cents(34000)),
            MFJ: (cents(32000), cents(44000)),
            MFS: (0, 0),
            HOH: (cents(25000), cents(34000)),
            QW: (cents(25000), cents(34000)),
        }
    )

    # Child Tax Credit / Additional CTC (Schedule 8812)
    ctc_per_child: int = cents(2200)
    ctc_per_other_dependent: int = cents(500)
    ctc_refundable_max_per_child: int = cents(1700)
    ctc_earned_income_threshold: int = cents(2500)
    ctc_refundable_rate: float = 0.15
    ctc_phaseout_start: StatusAmounts = field(
        default_factory=lambda: _by_status(200000, 400000, 200000, 200000, 200000)
    )
    ctc_phaseout_per_1000: int = cents(50)
    ctc_max_child_age: int = 17

    # EITC parameters by number of qualifying children (0, 1, 2, 3+)
    eitc_schedules: Tuple[EICSchedule, ...] = ()
    eitc_investment_income_limit: int = cents(11950)
    eitc_min_age_no_children: int = 25
    eitc_max_age_no_children: int = 64
    eitc_max_child_age: int = 19

    # Education credits (Form 8863)
    aotc_first_tier: int = cents(2000)
    aotc_second_tier: int = cents(2000)
    aotc_max_credit: int = cents(2500)
    aotc_refundable_rate: float = 0.40
    aotc_max_years: int = 4
    llc_expense_limit: int = cents(10000)
    llc_credit_rate: float = 0.20
    llc_max_credit: int = cents(2000)
    education_phaseout: Dict[FilingStatus, Tuple[int, int]] = field(
        default_factory=lambda: {
            S: (cents(80000), cents(90000)),
            MFJ: (cents(160000), cents(180000)),
            MFS: (0, 0),
            HOH: (cents(80000), cents(90000)),
            QW: (cents(80000), cents(90000)),
        }
    )

    # Child and Dependent Care Credit (Form 2441)
    dependent_care_max_one: int = cents(3000)
    dependent_care_max_two: int = cents(6000)
    dependent_care_base_rate: float = 0.35
    dependent_care_min_rate: float = 0.20
    dependent_care_agi_floor: int = cents(15000)
    dependent_care_agi_step: int = cents(2000)
    dependent_care_max_child_age: int = 13

    # Saver's Credit (Form 8880): upper AGI bound of the 50%, 20% and 10% tiers
    savers_credit_thresholds: Dict[FilingStatus, Tuple[int, int, int]] = field(default_factory=dict)
    savers_credit_max_contribution: int = cents(2000)

    # QBI (Section 199A)
    qbi_deduction_rate: float = 0.20
    qbi_threshold: StatusAmounts = field(default_factory=dict)
    qbi_phase_in_range: StatusAmounts = field(
        default_factory=lambda: _by_status(50000, 100000, 50000, 50000, 50000)
    )

    # Schedule 1 adjustments
    student_loan_interest_max: int = cents(2500)
    student_loan_phaseout: Dict[FilingStatus, Tuple[int, int]] = field(
        default_factory=lambda: {
            S: (cents(85000), cents(100000)),
            MFJ: (cents(170000), cents(200000)),
            MFS: (0, 0),
            HOH: (cents(85000), cents(100000)),
            QW: (cents(85000), cents(100000)),
        }
    )
    educator_expense_max: int = cents(300)

    # Passive Activity Loss (PAL) - Form 8582 / IRC Section 469
    pal_rental_loss_allowance: int = cents(25000)
    pal_phaseout_start: StatusAmounts = field(
        default_factory=lambda: _by_status(100000, 100000, 0, 100000, 100000)
    )
    pal_phaseout_range: int = cents(50000)

    def brackets_for(self, filing_status: FilingStatus) -> List[Tuple[int, float]]:
        return self.ordinary_income_brackets[filing_status]

    def eic_schedule(self, qualifying_children: int) -> EICSchedule:
        return self.eitc_schedules[min(qualifying_children, len(self.eitc_schedules) - 1)]

    @staticmethod
    def for_2025() -> "TaxYearConfig":
        # Ordinary income brackets (marginal rates) for tax year 2025 (filing in 2026).
        brackets = {
            S: _brackets((0, 11925, 48475, 103350, 197300, 250525, 626350)),
            MFJ: _brackets((0, 23850, 96950, 206700, 394600, 501050, 751600)),
            MFS: _brackets((0, 11925, 48475, 103350, 197300, 250525, 375800)),
            HOH: _brackets((0, 17000, 64850, 103350, 197300, 250500, 626350)),
            QW: _brackets((0, 23850, 96950, 206700, 394600, 501050, 751600)),
        }

        eitc = (
            EICSchedule(cents(649), cents(8490), 0.0765, 0.0765, cents(10620), cents(17730)),
            EICSchedule(cents(4328), cents(12730), 0.34, 0.1598, cents(23350), cents(30470)),
            EICSchedule(cents(7152), cents(17880), 0.40, 0.2106, cents(23350), cents(30470)),
            EICSchedule(cents(8046), cents(17880), 0.45, 0.2106, cents(23350), cents(30470)),
        )

        return TaxYearConfig(
            tax_year=2025,
            ordinary_income_brackets=brackets,
            standard_deduction=_by_status(15000, 30000, 15000, 22500, 30000),
            qd_ltcg_0_rate_threshold=_by_status(48350, 96700, 48350, 64750, 96700),
            qd_ltcg_15_rate_threshold=_by_status(533400, 600050, 300025, 566700, 600050),
            ss_wage_base=cents(176100),
            salt_base_cap=_by_status(40000, 40000, 20000, 40000, 40000),
            salt_phaseout_threshold=_by_status(500000, 500000, 250000, 500000, 500000),
            eitc_schedules=eitc,
            eitc_investment_income_limit=cents(11950),
            additional_standard_deduction=_by_status(2000, 1600, 1600, 2000),
            senior_deduction_amount=cents(6000),
            senior_deduction_phaseout_threshold=_by_status(75000, 150000, 75000, 75000),
            amt_exemption=_by_status(88100, 137000, 68500, 88100),
            amt_phaseout_threshold=_by_status(626350, 1252700, 626350, 626350),
            amt_28_percent_threshold=_by_status(239100, 239100, 119550, 239100),
            savers_credit_thresholds={
                S: (cents(23750), cents(25500), cents(39500)),
                MFJ: (cents(47500), cents(51000), cents(79000)),
                MFS: (cents(23750), cents(25500), cents(39500)),
                HOH: (cents(35625), cents(38250), cents(59250)),
                QW: (cents(23750), cents(25500), cents(39500)),
            },
            qbi_threshold=_by_status(197300, 394600, 197300, 197300, 197300),
        )

    @staticmethod
    def for_2026() -> "TaxYearConfig":
        """
        2026 constants (IRS Rev. Proc. 2025-32 inflation adjustments).
        """
        brackets = {
            S: _brackets((0, 12400, 50400, 105700, 201775, 256225, 640600)),
            MFJ: _brackets((0, 24800, 100800, 211400, 403550, 512450, 768700)),
            MFS: _brackets((0, 12400, 50400, 105700, 201775, 256225, 384350)),
            HOH: _brackets((0, 17700, 67450, 105700, 201750, 256200, 640600)),
            QW: _brackets((0, 24800, 100800, 211400, 403550, 512450, 768700)),
        }

        eitc = (
            EICSchedule(cents(664), cents(8680), 0.0765, 0.0765, cents(10860), cents(18140)),
            EICSchedule(cents(4427), cents(13020), 0.34, 0.1598, cents(23890), cents(31160)),
            EICSchedule(cents(7316), cents(18290), 0.40, 0.2106, cents(23890), cents(31160)),
            EICSchedule(cents(8231), cents(18290), 0.45, 0.2106, cents(23890), cents(31160)),
        )

        return TaxYearConfig(
            tax_year=2026,
            ordinary_income_brackets=brackets,
            standard_deduction=_by_status(16100, 32200, 16100, 24150, 32200),
            qd_ltcg_0_rate_threshold=_by_status(49450, 98900, 49450, 66200, 98900),
            qd_ltcg_15_rate_threshold=_by_status(545500, 613700, 306850, 579600, 613700),
            ss_wage_base=cents(184500),
            salt_base_cap=_by_status(40400, 40400, 20200, 40400, 40400),
            salt_phaseout_threshold=_by_status(505000, 505000, 252500, 505000, 505000),
            eitc_schedules=eitc,
            eitc_investment_income_limit=cents(12200),
            additional_standard_deduction=_by_status(2050, 1650, 1650, 2050),
            senior_deduction_amount=cents(6000),
            senior_deduction_phaseout_threshold=_by_status(75000, 150000, 75000, 75000),
            amt_exemption=_by_status(90100, 140200, 70100, 90100),
            amt_phaseout_threshold=_by_status(500000, 1000000, 500000, 500000),
            amt_phaseout_rate=0.50,
            amt_28_percent_threshold=_by_status(244500, 244500, 122250, 244500),
            savers_credit_thresholds={
                S: (cents(24250), cents(26250), cents(40250)),
                MFJ: (cents(48500), cents(52500), cents(80500)),
                MFS: (cents(24250), cents(26250), cents(40250)),
                HOH: (cents(36375), cents(39375), cents(60375)),
                QW: (cents(24250), cents(26250), cents(40250)),
            },
            qbi_threshold=_by_status(201775, 403550, 201775, 201775, 201775),
            qbi_phase_in_range=_by_status(75000, 150000, 75000, 75000, 75000),
        )

    @staticmethod
    def for_year(tax_year: int) -> "TaxYearConfig":
        """
        Constants for any compiled-in year.

        Raises:
            UnsupportedTaxYearError: If no constants exist for the year
        """
        factory = _YEAR_FACTORIES.get(tax_year)
        if factory is None:
            raise UnsupportedTaxYearError(tax_year, _YEAR_FACTORIES.keys())
        return factory()


_YEAR_FACTORIES = {
    2025: TaxYearConfig.for_2025,
    2026: TaxYearConfig.for_2026,
}


def supported_config_years() -> List[int]:
    return sorted(_YEAR_FACTORIES)
