"""
Federal credits: Child Tax Credit / ACTC (Schedule 8812), Earned Income
Credit, education credits (Form 8863), Child and Dependent Care Credit
(Form 2441) and the Saver's Credit (Form 8880).

All amounts are integer cents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from calculator.decimal_math import apply_rate, ceil_div, phase_out_fraction, round_cents
from calculator.tax_year_config import TaxYearConfig, EICSchedule
from models.credits import (
    DependentCareExpenses,
    EducationCreditType,
    EducationExpenses,
    RetirementContributions,
)
from models.income import Owner, W2
from models.taxpayer import Dependent, FilingStatus

logger = logging.getLogger(__name__)

QUALIFYING_CHILD_RELATIONSHIPS = frozenset({
    "son", "daughter", "stepchild", "foster child", "sibling", "grandchild",
})

ELECTIVE_DEFERRAL_CODES = frozenset({"D", "E", "AA", "BB", "G", "H"})


def _child_age(dep: Dependent, tax_year: int) -> Optional[int]:
    age = dep.age_at_year_end(tax_year)
    if age is None or age < 0:
        return None
    return age


def is_qualifying_child(dep: Dependent, tax_year: int, max_age: int) -> bool:
    """Relationship, residency (7+ months), SSN and age tests. Age is strictly below ``max_age``."""
    if not dep.has_valid_ssn:
        return False
    if dep.relationship not in QUALIFYING_CHILD_RELATIONSHIPS:
        return False
    if dep.months_lived < 7:
        return False
    age = _child_age(dep, tax_year)
    return age is not None and age < max_age


def is_other_dependent(dep: Dependent, tax_year: int, config: TaxYearConfig) -> bool:
    if not dep.has_valid_ssn or dep.date_of_birth is None:
        return False
    return not is_qualifying_child(dep, tax_year, config.ctc_max_child_age)


# =========================================================================
# Child Tax Credit
# =========================================================================

@dataclass
class ChildTaxCreditResult:
    num_qualifying_children: int = 0
    num_other_dependents: int = 0
    initial_credit: int = 0
    phase_out_reduction: int = 0
    credit_after_phase_out: int = 0
    non_refundable_credit: int = 0
    additional_ctc: int = 0


def compute_child_tax_credit(
    dependents: List[Dependent],
    filing_status: FilingStatus,
    agi: int,
    tax_liability: int,
    earned_income: int,
    tax_year: int,
    config: TaxYearConfig,
) -> ChildTaxCreditResult:
    """
    Phase-out is $50 for each $1,000 (or part of $1,000) of AGI over the
    threshold. The refundable ACTC is the smaller of $1,700 per child,
    15% of earned income over $2,500 and the credit left after line 19.
    """
    result = ChildTaxCreditResult()
    result.num_qualifying_children = sum(
        1 for d in dependents if is_qualifying_child(d, tax_year, config.ctc_max_child_age)
    )
    result.num_other_dependents = sum(1 for d in dependents if is_other_dependent(d, tax_year, config))
    result.initial_credit = (
        result.num_qualifying_children * config.ctc_per_child
        + result.num_other_dependents * config.ctc_per_other_dependent
    )
    if result.initial_credit == 0:
        return result

    excess = max(0, agi - config.ctc_phaseout_start[filing_status])
    thousands_over = ceil_div(excess, 100000) if excess > 0 else 0
    result.phase_out_reduction = min(thousands_over * config.ctc_phaseout_per_1000, result.initial_credit)
    result.credit_after_phase_out = max(0, result.initial_credit - result.phase_out_reduction)
    result.non_refundable_credit = min(result.credit_after_phase_out, max(0, tax_liability))

    if result.num_qualifying_children > 0 and result.credit_after_phase_out > result.non_refundable_credit:
        max_refundable = result.num_qualifying_children * config.ctc_refundable_max_per_child
        earned_above_floor = max(0, earned_income - config.ctc_earned_income_threshold)
        earned_based = apply_rate(earned_above_floor, config.ctc_refundable_rate)
        result.additional_ctc = min(
            max_refundable,
            earned_based,
            result.credit_after_phase_out - result.non_refundable_credit,
        )
    return result


# =========================================================================
# Earned Income Credit
# =========================================================================

@dataclass
class EarnedIncomeCreditResult:
    num_qualifying_children: int = 0
    schedule_index: int = 0
    eligible: bool = False
    ineligible_reason: Optional[str] = None
    credit_at_earned_income: int = 0
    credit_at_agi: int = 0
    credit_amount: int = 0


def eic_at_income(income: int, schedule: EICSchedule, phase_out_start: int) -> int:
    """Piecewise credit: phase-in, plateau, phase-out."""
    if income <= 0:
        return 0
    if income <= schedule.earned_income_amount:
        return min(schedule.max_credit, apply_rate(income, schedule.phase_in_rate))
    if income <= phase_out_start:
        return schedule.max_credit
    reduction = apply_rate(income - phase_out_start, schedule.phase_out_rate)
    return max(0, schedule.max_credit - reduction)


def compute_earned_income_credit(
    dependents: List[Dependent],
    filing_status: FilingStatus,
    earned_income: int,
    agi: int,
    investment_income: int,
    filer_age: Optional[int],
    tax_year: int,
    config: TaxYearConfig,
) -> EarnedIncomeCreditResult:
    """
    The credit is figured on earned income; when AGI is at or past the
    phase-out start the smaller of that and the credit figured on AGI is used.
    """
    children = sum(1 for d in dependents if is_qualifying_child(d, tax_year, config.eitc_max_child_age))
    result = EarnedIncomeCreditResult(
        num_qualifying_children=children,
        schedule_index=min(children, len(config.eitc_schedules) - 1),
    )

    if filing_status == FilingStatus.MARRIED_SEPARATE:
        result.ineligible_reason = "mfs"
        return result
    if investment_income > config.eitc_investment_income_limit:
        result.ineligible_reason = "investment_income"
        return result
    if earned_income <= 0:
        result.ineligible_reason = "no_income"
        return result
    if children == 0 and filer_age is not None:
        if filer_age < config.eitc_min_age_no_children or filer_age > config.eitc_max_age_no_children:
            result.ineligible_reason = "age"
            return result

    schedule = config.eic_schedule(children)
    phase_out_start = (
        schedule.phase_out_start_mfj
        if filing_status == FilingStatus.MARRIED_JOINT
        else schedule.phase_out_start_single
    )
    result.eligible = True
    result.credit_at_earned_income = eic_at_income(earned_income, schedule, phase_out_start)
    result.credit_at_agi = eic_at_income(agi, schedule, phase_out_start)
    if agi >= phase_out_start:
        result.credit_amount = min(result.credit_at_earned_income, result.credit_at_agi)
    else:
        result.credit_amount = result.credit_at_earned_income
    return result


# =========================================================================
# Education credits
# =========================================================================

@dataclass
class StudentAOTCResult:
    student_name: str
    qualified_expenses: int
    raw_credit: int
    credit_after_phase_out: int
    non_refundable: int
    refundable: int


@dataclass
class EducationCreditResult:
    aotc_students: List[StudentAOTCResult] = field(default_factory=list)
    aotc_total_credit: int = 0
    aotc_non_refundable: int = 0
    aotc_refundable: int = 0
    llc_qualified_expenses: int = 0
    llc_raw_credit: int = 0
    llc_credit_after_phase_out: int = 0
    phase_out_applies: bool = False
    mfs_ineligible: bool = False

    @property
    def total_non_refundable(self) -> int:
        return self.aotc_non_refundable + self.llc_credit_after_phase_out

    @property
    def total_refundable(self) -> int:
        return self.aotc_refundable


def _aotc_raw(qualified_expenses: int, config: TaxYearConfig) -> int:
    first = min(qualified_expenses, config.aotc_first_tier)
    second = min(max(qualified_expenses - config.aotc_first_tier, 0), config.aotc_second_tier)
    return min(first + apply_rate(second, "0.25"), config.aotc_max_credit)


def compute_education_credit(
    expenses: Optional[EducationExpenses],
    filing_status: FilingStatus,
    magi: int,
    config: TaxYearConfig,
) -> EducationCreditResult:
    result = EducationCreditResult()
    if expenses is None or not expenses.students:
        return result
    if filing_status == FilingStatus.MARRIED_SEPARATE:
        result.mfs_ineligible = True
        return result

    start, end = config.education_phaseout[filing_status]
    ratio = phase_out_fraction(magi, start, end)
    remaining = Decimal(1) - ratio
    result.phase_out_applies = ratio > 0

    for student in expenses.students:
        if not student.is_aotc_eligible(config.aotc_max_years):
            continue
        raw = _aotc_raw(student.qualified_expenses, config)
        after = round_cents(raw * remaining)
        refundable = apply_rate(after, config.aotc_refundable_rate)
        result.aotc_students.append(StudentAOTCResult(
            student_name=student.name,
            qualified_expenses=student.qualified_expenses,
            raw_credit=raw,
            credit_after_phase_out=after,
            non_refundable=after - refundable,
            refundable=refundable,
        ))

    result.aotc_total_credit = sum(s.credit_after_phase_out for s in result.aotc_students)
    result.aotc_non_refundable = sum(s.non_refundable for s in result.aotc_students)
    result.aotc_refundable = sum(s.refundable for s in result.aotc_students)

    llc_expenses = sum(
        s.qualified_expenses for s in expenses.students if s.credit_type == EducationCreditType.LLC
    )
    result.llc_qualified_expenses = min(llc_expenses, config.llc_expense_limit)
    result.llc_raw_credit = min(
        apply_rate(result.llc_qualified_expenses, config.llc_credit_rate), config.llc_max_credit
    )
    result.llc_credit_after_phase_out = round_cents(result.llc_raw_credit * remaining)
    return result


# =========================================================================
# Child and Dependent Care Credit
# =========================================================================

@dataclass
class DependentCareCreditResult:
    num_qualifying_persons: int = 0
    expense_limit: int = 0
    allowable_expenses: int = 0
    credit_rate: Decimal = Decimal(0)
    credit_amount: int = 0


def dependent_care_rate(agi: int, config: TaxYearConfig) -> Decimal:
    """35%, less one point for each $2,000 (or part) of AGI over $15,000, never below 20%."""
    excess = max(0, agi - config.dependent_care_agi_floor)
    steps = ceil_div(excess, config.dependent_care_agi_step) if excess > 0 else 0
    rate = Decimal(str(config.dependent_care_base_rate)) - Decimal("0.01") * steps
    return max(Decimal(str(config.dependent_care_min_rate)), rate)


def compute_dependent_care_credit(
    care: Optional[DependentCareExpenses],
    dependents: List[Dependent],
    agi: int,
    earned_income: int,
    tax_year: int,
    config: TaxYearConfig,
) -> DependentCareCreditResult:
    result = DependentCareCreditResult()
    if care is None:
        return result

    if care.num_qualifying_persons > 0:
        result.num_qualifying_persons = care.num_qualifying_persons
    else:
        result.num_qualifying_persons = sum(
            1 for d in dependents
            if (age := _child_age(d, tax_year)) is not None and age < config.dependent_care_max_child_age
        )
    if result.num_qualifying_persons == 0 or care.total_expenses <= 0:
        return result

    result.expense_limit = (
        config.dependent_care_max_two if result.num_qualifying_persons >= 2 else config.dependent_care_max_one
    )
    result.allowable_expenses = max(0, min(care.total_expenses, result.expense_limit, earned_income))
    if result.allowable_expenses == 0:
        return result

    result.credit_rate = dependent_care_rate(agi, config)
    result.credit_amount = apply_rate(result.allowable_expenses, result.credit_rate)
    return result


# =========================================================================
# Saver's Credit
# =========================================================================

@dataclass
class SaversCreditResult:
    elective_deferrals: int = 0
    ira_contributions: int = 0
    total_contributions: int = 0
    taxpayer_contributions: int = 0
    spouse_contributions: int = 0
    eligible_contributions: int = 0
    credit_rate: Decimal = Decimal(0)
    credit_amount: int = 0


def savers_credit_rate(agi: int, filing_status: FilingStatus, config: TaxYearConfig) -> Decimal:
    rate50, rate20, rate10 = config.savers_credit_thresholds[filing_status]
    if agi <= rate50:
        return Decimal("0.50")
    if agi <= rate20:
        return Decimal("0.20")
    if agi <= rate10:
        return Decimal("0.10")
    return Decimal(0)


def compute_savers_credit(
    contributions: Optional[RetirementContributions],
    w2s: List[W2],
    filing_status: FilingStatus,
    agi: int,
    config: TaxYearConfig,
    can_be_claimed_as_dependent: bool = False,
) -> SaversCreditResult:
    """
    Form 8880. Each person's contributions are capped separately, so a
    joint return claims at most the cap for each spouse, never a pooled
    double cap.
    """
    result = SaversCreditResult()
    c = contributions or RetirementContributions()
    taxpayer_deferrals = sum(
        w2.box12_total(ELECTIVE_DEFERRAL_CODES) for w2 in w2s if w2.owner != Owner.SPOUSE
    )
    spouse_deferrals = sum(
        w2.box12_total(ELECTIVE_DEFERRAL_CODES) for w2 in w2s if w2.owner == Owner.SPOUSE
    )
    result.elective_deferrals = taxpayer_deferrals + spouse_deferrals
    result.ira_contributions = c.traditional_ira + c.roth_ira + c.spouse_traditional_ira + c.spouse_roth_ira
    result.taxpayer_contributions = taxpayer_deferrals + c.traditional_ira + c.roth_ira
    result.spouse_contributions = spouse_deferrals + c.spouse_traditional_ira + c.spouse_roth_ira
    result.total_contributions = result.elective_deferrals + result.ira_contributions
    if result.total_contributions <= 0 or can_be_claimed_as_dependent:
        return result

    cap = config.savers_credit_max_contribution
    result.eligible_contributions = min(result.taxpayer_contributions, cap)
    if filing_status.is_joint:
        result.eligible_contributions += min(result.spouse_contributions, cap)
    result.credit_rate = savers_credit_rate(agi, filing_status, config)
    result.credit_amount = apply_rate(result.eligible_contributions, result.credit_rate)
    return result
