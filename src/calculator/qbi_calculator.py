"""
QBI (Qualified Business Income) Deduction Calculator - Section 199A

Implements the 20% pass-through deduction for qualified business income
from sole proprietorships (Schedule C, 1099-NEC) and K-1 entities.

Form 8995 (simplified) applies at or below the taxable income threshold.
Above it, Form 8995-A limits each business by the greater of 50% of W-2
wages or 25% of W-2 wages plus 2.5% of UBIA, phased in across the range
above the threshold. SSTB income is reduced by the same phase-in and is
excluded entirely once taxable income clears the range.

All amounts are integer cents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from calculator.decimal_math import apply_rate, phase_out_fraction, round_cents
from calculator.k1 import K1AggregateResult
from calculator.schedules.schedule_c import ScheduleCResult
from calculator.tax_year_config import TaxYearConfig
from models.taxpayer import FilingStatus

logger = logging.getLogger(__name__)


@dataclass
class QBIBusiness:
    """One qualified trade or business feeding the deduction."""
    id: str
    name: str
    qbi: int
    w2_wages: int = 0
    ubia: int = 0
    is_sstb: bool = False
    source: str = "schedule_c"  # schedule_c | nec | k1


@dataclass
class QBIBusinessResult:
    id: str
    name: str
    qbi: int
    twenty_percent_qbi: int = 0
    wage_limitation: int = 0
    deductible_qbi: int = 0
    sstb_excluded: bool = False
    sstb_phase_in_applied: bool = False


@dataclass
class QBIBreakdown:
    """Detailed breakdown of QBI deduction calculation."""

    # QBI components
    total_qbi: int = 0
    qbi_from_self_employment: int = 0
    qbi_from_k1: int = 0
    has_sstb: bool = False

    # Threshold analysis
    taxable_income_before_qbi: int = 0
    threshold_start: int = 0
    threshold_end: int = 0
    is_below_threshold: bool = True
    is_above_threshold: bool = False
    phase_in_ratio: Decimal = Decimal(0)  # 0 at the threshold, 1 at the end of the range

    # Deduction calculation
    qbi_component: int = 0          # 20% of QBI (before limits)
    taxable_income_limit: int = 0   # 20% of (taxable income - net capital gain)
    business_results: List[QBIBusinessResult] = field(default_factory=list)
    final_qbi_deduction: int = 0

    @property
    def simplified_path(self) -> bool:
        return self.is_below_threshold


def wage_limitation(w2_wages: int, ubia: int) -> int:
    """max(50% x W-2 wages, 25% x W-2 wages + 2.5% x UBIA)"""
    return max(apply_rate(w2_wages, "0.50"), apply_rate(w2_wages, "0.25") + apply_rate(ubia, "0.025"))


def collect_qbi_businesses(
    schedule_c: Optional[ScheduleCResult],
    nec_total: int,
    k1_aggregate: Optional[K1AggregateResult],
    se_deductible_half: int = 0,
    se_base: int = 0,
) -> List[QBIBusiness]:
    """
    One entry per Schedule C business and per K-1 entity reporting QBI;
    1099-NEC income is treated as a single sole proprietorship.

    The deductible half of SE tax reduces sole-proprietor QBI in proportion
    to each business's share of ``se_base``.
    """
    businesses: List[QBIBusiness] = []
    if schedule_c is not None:
        for b in schedule_c.businesses:
            businesses.append(QBIBusiness(
                id=b.business_id, name=b.business_name or b.business_id,
                qbi=b.line31_net_profit, is_sstb=b.is_sstb,
            ))
    if nec_total:
        businesses.append(QBIBusiness(id="1099nec", name="Nonemployee compensation", qbi=nec_total, source="nec"))

    if se_deductible_half and se_base > 0:
        for biz in businesses:
            if biz.qbi > 0:
                share = round_cents(Decimal(se_deductible_half) * Decimal(biz.qbi) / Decimal(se_base))
                biz.qbi -= min(share, biz.qbi)

    if k1_aggregate is not None:
        for entity in k1_aggregate.entities:
            if entity.section199a_qbi:
                businesses.append(QBIBusiness(
                    id=entity.id, name=entity.entity_name or entity.id,
                    qbi=entity.section199a_qbi,
                    w2_wages=entity.section199a_w2_wages,
                    ubia=entity.section199a_ubia,
                    is_sstb=entity.is_sstb,
                    source="k1",
                ))
    return businesses


class QBICalculator:
    """
    Calculator for Section 199A Qualified Business Income deduction.

    The QBI deduction allows eligible taxpayers to deduct up to 20% of their
    qualified business income from pass-through entities, subject to limitations
    based on taxable income, W-2 wages, and UBIA of qualified property.
    """

    def calculate(
        self,
        businesses: List[QBIBusiness],
        taxable_income_before_qbi: int,
        net_capital_gain: int,
        filing_status: FilingStatus,
        config: TaxYearConfig,
    ) -> QBIBreakdown:
        """
        Args:
            businesses: Output of ``collect_qbi_businesses``
            taxable_income_before_qbi: Form 1040 line 11 minus line 12
            net_capital_gain: Qualified dividends plus net capital gain
        """
        breakdown = QBIBreakdown(taxable_income_before_qbi=taxable_income_before_qbi)
        breakdown.qbi_from_k1 = sum(b.qbi for b in businesses if b.source == "k1")
        breakdown.total_qbi = sum(b.qbi for b in businesses)
        breakdown.qbi_from_self_employment = breakdown.total_qbi - breakdown.qbi_from_k1
        breakdown.has_sstb = any(b.is_sstb for b in businesses)

        breakdown.threshold_start = config.qbi_threshold[filing_status]
        breakdown.threshold_end = breakdown.threshold_start + config.qbi_phase_in_range[filing_status]
        breakdown.is_below_threshold = taxable_income_before_qbi <= breakdown.threshold_start
        breakdown.is_above_threshold = taxable_income_before_qbi >= breakdown.threshold_end

        if breakdown.total_qbi <= 0 or taxable_income_before_qbi <= 0:
            return breakdown

        rate = config.qbi_deduction_rate
        breakdown.qbi_component = apply_rate(breakdown.total_qbi, rate)
        breakdown.taxable_income_limit = apply_rate(
            max(0, taxable_income_before_qbi - max(0, net_capital_gain)), rate
        )

        if breakdown.is_below_threshold:
            breakdown.final_qbi_deduction = max(0, min(breakdown.qbi_component, breakdown.taxable_income_limit))
            logger.debug("QBI simplified path: deduction=%d", breakdown.final_qbi_deduction)
            return breakdown

        breakdown.phase_in_ratio = phase_out_fraction(
            taxable_income_before_qbi, breakdown.threshold_start, breakdown.threshold_end
        )
        breakdown.business_results = [
            self._business_deduction(b, breakdown.phase_in_ratio, breakdown.is_above_threshold, rate)
            for b in businesses
        ]

        positive = sum(r.deductible_qbi for r in breakdown.business_results if r.deductible_qbi > 0)
        losses = sum(r.qbi for r in breakdown.business_results if r.qbi < 0)
        combined = max(0, positive + apply_rate(losses, rate))
        breakdown.final_qbi_deduction = min(combined, breakdown.taxable_income_limit)
        logger.debug(
            "QBI limited path: phase_in=%s deduction=%d", breakdown.phase_in_ratio, breakdown.final_qbi_deduction
        )
        return breakdown

    def _business_deduction(
        self,
        biz: QBIBusiness,
        phase_in_ratio: Decimal,
        fully_above: bool,
        rate: float,
    ) -> QBIBusinessResult:
        result = QBIBusinessResult(id=biz.id, name=biz.name, qbi=biz.qbi)
        if biz.qbi <= 0:
            # Losses net against the positive amounts
            return result

        if biz.is_sstb and fully_above:
            result.twenty_percent_qbi = apply_rate(biz.qbi, rate)
            result.sstb_excluded = True
            return result

        qbi, wages, ubia = biz.qbi, biz.w2_wages, biz.ubia
        if biz.is_sstb and phase_in_ratio > 0:
            applicable = Decimal(1) - phase_in_ratio
            qbi = round_cents(qbi * applicable)
            wages = round_cents(wages * applicable)
            ubia = round_cents(ubia * applicable)
            result.sstb_phase_in_applied = True

        result.twenty_percent_qbi = apply_rate(qbi, rate)
        result.wage_limitation = wage_limitation(wages, ubia)

        if fully_above or result.sstb_phase_in_applied:
            deductible = min(result.twenty_percent_qbi, result.wage_limitation)
        else:
            excess = max(0, result.twenty_percent_qbi - result.wage_limitation)
            deductible = result.twenty_percent_qbi - round_cents(excess * phase_in_ratio)
        result.deductible_qbi = max(0, deductible)
        return result
