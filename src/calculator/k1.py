"""
Schedule K-1 passthrough aggregation and the rental passive-loss limiter.

Routing of K-1 boxes onto the return:
    Box 1  ordinary income       -> Schedule 1 line 5
    Box 2  rental income (loss)  -> Schedule 1 line 5, after the PAL limit
    Box 4  guaranteed payments   -> Schedule 1 line 5 and Schedule SE
    Box 5  interest              -> Form 1040 line 2b
    Box 6a dividends             -> Form 1040 line 3b (6b qualified -> line 3a)
    Box 8  short-term gain       -> Schedule D line 5
    Box 9a long-term gain        -> Schedule D line 12
    Box 14 SE earnings           -> Schedule SE
    Box 20 section 199A          -> QBI deduction

The $25,000 rental loss allowance (IRC 469(i)) is shared by Schedule E
properties and K-1 rentals. Schedule E consumes it first and passes the
amount it used to ``compute_k1_rental_pal``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from calculator.decimal_math import round_cents
from calculator.tax_year_config import TaxYearConfig
from models.income import ScheduleK1, EntityType
from models.taxpayer import FilingStatus, coerce_filing_status

logger = logging.getLogger(__name__)


@dataclass
class K1EntityResult:
    id: str
    entity_name: str
    entity_type: EntityType
    ordinary_income: int
    rental_income: int
    guaranteed_payments: int
    interest_income: int
    dividend_income: int
    qualified_dividends: int
    short_term_capital_gain: int
    long_term_capital_gain: int
    section199a_qbi: int
    self_employment_earnings: int
    section199a_w2_wages: int = 0
    section199a_ubia: int = 0
    is_sstb: bool = False


@dataclass
class K1AggregateResult:
    total_ordinary_income: int = 0
    total_rental_income: int = 0
    total_guaranteed_payments: int = 0
    total_interest: int = 0
    total_dividends: int = 0
    total_qualified_dividends: int = 0
    total_st_capital_gain: int = 0
    total_lt_capital_gain: int = 0
    total_qbi: int = 0
    total_qbi_w2_wages: int = 0
    total_qbi_ubia: int = 0
    total_se_earnings: int = 0
    total_withholding: int = 0
    has_sstb: bool = False
    entities: List[K1EntityResult] = field(default_factory=list)

    @property
    def k1_count(self) -> int:
        return len(self.entities)

    @property
    def total_passthrough_income(self) -> int:
        """Schedule 1 line 5 contribution: ordinary + rental + guaranteed payments."""
        return self.total_ordinary_income + self.total_rental_income + self.total_guaranteed_payments

    @property
    def se_eligible_income(self) -> int:
        """Box 14 SE earnings plus guaranteed payments (IRC 1402(a))."""
        return self.total_se_earnings + self.total_guaranteed_payments


@dataclass
class PALResult:
    gross_rental_income: int
    allowed_rental_income: int
    disallowed_loss: int
    pal_applied: bool
    allowance: int = 0
    allowance_used: int = 0


def compute_k1_aggregate(k1s: List[ScheduleK1]) -> K1AggregateResult:
    """Sum every K-1 box across entities, keeping the per-entity breakdown."""
    result = K1AggregateResult()

    for k in k1s:
        result.total_ordinary_income += k.ordinary_income
        result.total_rental_income += k.rental_income
        result.total_guaranteed_payments += k.guaranteed_payments
        result.total_interest += k.interest_income
        result.total_dividends += k.dividend_income
        result.total_qualified_dividends += k.qualified_dividends
        result.total_st_capital_gain += k.short_term_capital_gain
        result.total_lt_capital_gain += k.long_term_capital_gain
        result.total_qbi += k.section199a_qbi
        result.total_qbi_w2_wages += k.section199a_w2_wages
        result.total_qbi_ubia += k.section199a_ubia
        result.total_se_earnings += k.self_employment_earnings
        result.total_withholding += k.federal_tax_withheld
        result.has_sstb = result.has_sstb or (k.is_sstb and k.section199a_qbi != 0)

        result.entities.append(K1EntityResult(
            id=k.id,
            entity_name=k.entity_name,
            entity_type=k.entity_type,
            ordinary_income=k.ordinary_income,
            rental_income=k.rental_income,
            guaranteed_payments=k.guaranteed_payments,
            interest_income=k.interest_income,
            dividend_income=k.dividend_income,
            qualified_dividends=k.qualified_dividends,
            short_term_capital_gain=k.short_term_capital_gain,
            long_term_capital_gain=k.long_term_capital_gain,
            section199a_qbi=k.section199a_qbi,
            self_employment_earnings=k.self_employment_earnings,
            section199a_w2_wages=k.section199a_w2_wages,
            section199a_ubia=k.section199a_ubia,
            is_sstb=k.is_sstb,
        ))

    logger.debug("Aggregated %d K-1s: passthrough=%d", result.k1_count, result.total_passthrough_income)
    return result


def rental_loss_allowance(
    preliminary_agi: int,
    filing_status: FilingStatus,
    config: Optional[TaxYearConfig] = None,
) -> int:
    """
    Special allowance for actively managed rentals after the AGI phase-out.

    $25,000 reduced by 50% of AGI over $100,000, zero at $150,000 and for MFS.
    """
    filing_status = coerce_filing_status(filing_status)
    config = config or TaxYearConfig.for_2025()
    phaseout_start = config.pal_phaseout_start[filing_status]
    if phaseout_start == 0:
        return 0
    allowance = config.pal_rental_loss_allowance
    excess = max(0, preliminary_agi - phaseout_start)
    reduction = round_cents(
        Decimal(allowance) * min(excess, config.pal_phaseout_range) / config.pal_phaseout_range
    )
    return max(0, allowance - reduction)


def compute_k1_rental_pal(
    rental_income: int,
    preliminary_agi: int,
    filing_status: FilingStatus,
    already_used_allowance: int = 0,
    config: Optional[TaxYearConfig] = None,
) -> PALResult:
    """
    Limit a rental loss to what remains of the shared special allowance.

    Args:
        rental_income: Total rental income or loss (cents, negative for a loss)
        preliminary_agi: AGI proxy computed without the rental loss
        filing_status: MFS always gets a zero allowance
        already_used_allowance: Allowance already consumed by Schedule E

    Returns:
        PALResult where ``disallowed_loss`` is the suspended part of the loss
        (negative or zero) and ``allowed_rental_income + disallowed_loss``
        always equals ``rental_income``.
    """
    filing_status = coerce_filing_status(filing_status)
    if rental_income >= 0:
        return PALResult(
            gross_rental_income=rental_income,
            allowed_rental_income=rental_income,
            disallowed_loss=0,
            pal_applied=False,
        )

    allowance = rental_loss_allowance(preliminary_agi, filing_status, config)
    remaining = max(0, allowance - max(0, already_used_allowance))
    allowed_loss = min(abs(rental_income), remaining)
    allowed = -allowed_loss if allowed_loss > 0 else 0

    result = PALResult(
        gross_rental_income=rental_income,
        allowed_rental_income=allowed,
        disallowed_loss=rental_income - allowed,
        pal_applied=True,
        allowance=allowance,
        allowance_used=allowed_loss,
    )
    if result.disallowed_loss:
        logger.info(
            "Rental loss limited: allowed=%d suspended=%d (agi=%d, status=%s)",
            result.allowed_rental_income, result.disallowed_loss, preliminary_agi, filing_status.value,
        )
    return result
