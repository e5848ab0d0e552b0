from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from calculator.amt import AMTResult, compute_amt
from calculator.brackets import QDCGWorksheet, compute_bracket_tax, compute_qdcg_tax, net_cap_gain_for_qdcg
from calculator.credits import (
    ChildTaxCreditResult,
    DependentCareCreditResult,
    EarnedIncomeCreditResult,
    EducationCreditResult,
    SaversCreditResult,
    compute_child_tax_credit,
    compute_dependent_care_credit,
    compute_earned_income_credit,
    compute_education_credit,
    compute_savers_credit,
)
from calculator.k1 import K1AggregateResult, PALResult, compute_k1_aggregate, compute_k1_rental_pal
from calculator.other_taxes import (
    AdditionalMedicareResult,
    NIITResult,
    compute_additional_medicare_tax,
    compute_niit,
)
from calculator.qbi_calculator import QBIBreakdown, QBICalculator, collect_qbi_businesses
from calculator.schedules.schedule_1 import (
    Schedule1Result,
    adjustments_before_student_loan,
    compute_schedule_1,
    fill_schedule_1_adjustments,
    finish_schedule_1_adjustments,
)
from calculator.schedules.schedule_a import ScheduleAResult, compute_schedule_a
from calculator.schedules.schedule_c import ScheduleCResult, compute_schedule_c
from calculator.schedules.schedule_d import ScheduleDResult, compute_schedule_d
from calculator.schedules.schedule_e import ScheduleEResult, compute_schedule_e
from calculator.schedules.schedule_se import ScheduleSEResult, compute_schedule_se
from calculator.senior_deduction import SeniorDeductionResult, compute_senior_deduction
from calculator.social_security import SocialSecurityResult, compute_taxable_social_security
from calculator.tax_year_config import TaxYearConfig
from calculator.traced import TraceMap, TraceRecorder
from models.deductions import DeductionMethod
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus

logger = logging.getLogger(__name__)

FORM_1040_LINES = (
    "line1a", "line1z", "line2a", "line2b", "line3a", "line3b", "line4a", "line4b",
    "line5a", "line5b", "line6a", "line6b", "line7", "line8", "line9", "line10",
    "line11", "line12", "line13", "line14", "line15", "line16", "line17", "line18",
    "line19", "line20", "line21", "line22", "line23", "line24", "line25", "line26",
    "line27", "line28", "line29", "line31", "line32", "line33", "line34", "line37",
)


@dataclass
class SuspendedLoss:
    """Passive rental loss disallowed this year and carried forward (Form 8582)."""
    source: str          # "scheduleE" or "k1"
    amount: int          # negative
    description: str = ""


@dataclass
class Form1040Result:
    """
    Every Form 1040 line in cents plus the schedule and credit results that
    produced them. ``trace`` holds the computation graph for this return.
    """
    tax_year: int
    filing_status: FilingStatus

    line1a: int = 0
    line1z: int = 0
    line2a: int = 0
    line2b: int = 0
    line3a: int = 0
    line3b: int = 0
    line4a: int = 0
    line4b: int = 0
    line5a: int = 0
    line5b: int = 0
    line6a: int = 0
    line6b: int = 0
    line7: int = 0
    line8: int = 0
    line9: int = 0
    line10: int = 0
    line11: int = 0
    line12: int = 0
    line13: int = 0
    line14: int = 0
    line15: int = 0
    line16: int = 0
    line17: int = 0
    line18: int = 0
    line19: int = 0
    line20: int = 0
    line21: int = 0
    line22: int = 0
    line23: int = 0
    line24: int = 0
    line25: int = 0
    line26: int = 0
    line27: int = 0
    line28: int = 0
    line29: int = 0
    line31: int = 0
    line32: int = 0
    line33: int = 0
    line34: int = 0
    line37: int = 0

    deduction_method: DeductionMethod = DeductionMethod.STANDARD
    standard_deduction: int = 0
    earned_income: int = 0

    k1_aggregate: Optional[K1AggregateResult] = None
    k1_pal: Optional[PALResult] = None
    schedule_1: Schedule1Result = field(default_factory=Schedule1Result)
    schedule_a: ScheduleAResult = field(default_factory=ScheduleAResult)
    schedule_c: Optional[ScheduleCResult] = None
    schedule_d: Optional[ScheduleDResult] = None
    schedule_e: Optional[ScheduleEResult] = None
    schedule_se: Optional[ScheduleSEResult] = None
    social_security: Optional[SocialSecurityResult] = None
    qbi: Optional[QBIBreakdown] = None
    qdcg: Optional[QDCGWorksheet] = None
    senior_deduction: SeniorDeductionResult = field(default_factory=SeniorDeductionResult)
    amt: AMTResult = field(default_factory=AMTResult)
    child_tax_credit: ChildTaxCreditResult = field(default_factory=ChildTaxCreditResult)
    earned_income_credit: EarnedIncomeCreditResult = field(default_factory=EarnedIncomeCreditResult)
    education_credit: EducationCreditResult = field(default_factory=EducationCreditResult)
    dependent_care_credit: DependentCareCreditResult = field(default_factory=DependentCareCreditResult)
    savers_credit: SaversCreditResult = field(default_factory=SaversCreditResult)
    additional_medicare: AdditionalMedicareResult = field(default_factory=AdditionalMedicareResult)
    niit: NIITResult = field(default_factory=NIITResult)
    suspended_losses: List[SuspendedLoss] = field(default_factory=list)

    trace: TraceRecorder = field(default_factory=TraceRecorder, repr=False)

    @property
    def values(self) -> TraceMap:
        return self.trace.values

    @property
    def agi(self) -> int:
        return self.line11

    @property
    def taxable_income(self) -> int:
        return self.line15

    @property
    def total_tax(self) -> int:
        return self.line24

    @property
    def total_suspended_loss(self) -> int:
        return sum(s.amount for s in self.suspended_losses)

    def lines(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in FORM_1040_LINES}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "taxYear": self.tax_year,
            "filingStatus": self.filing_status.value,
            "deductionMethod": self.deduction_method.value,
        }
        data.update(self.lines())
        data["suspendedLosses"] = [
            {"source": s.source, "amount": s.amount, "description": s.description}
            for s in self.suspended_losses
        ]
        return data


class FederalTaxEngine:
    """
    Federal Form 1040 engine for one tax year.

    Stages run in line order and each one only reads the return and the
    results of earlier stages:
    - Source documents recorded as trace leaves
    - K-1 aggregation, Schedules D, C and SE
    - Schedule E and the shared rental loss allowance for K-1 rentals
    - Schedule 1, Social Security worksheet, AGI
    - Standard deduction with the age and blindness amounts vs. Schedule A
    - Senior deduction and QBI, tax (QDCG worksheet or brackets), AMT
    - Credits, other taxes, payments, refund or amount owed
    """

    def __init__(self, config: Optional[TaxYearConfig] = None):
        self.config = config or TaxYearConfig.for_2025()

    def calculate(self, tax_return: TaxReturn) -> Form1040Result:
        """Execute full federal tax calculation."""
        config = self.config
        fs = tax_return.filing_status
        trace = TraceRecorder()
        result = Form1040Result(tax_year=config.tax_year, filing_status=fs, trace=trace)

        self._record_documents(tax_return, trace)

        # K-1 passthrough
        k1 = None
        if tax_return.schedule_k1s:
            k1 = compute_k1_aggregate(tax_return.schedule_k1s)
            self._record_k1(k1, tax_return, trace)
        result.k1_aggregate = k1

        self._calculate_income_lines(tax_return, result, k1, trace)

        # Schedule D
        k1_st = k1.total_st_capital_gain if k1 else 0
        k1_lt = k1.total_lt_capital_gain if k1 else 0
        if self._has_capital_activity(tax_return, k1_st, k1_lt):
            result.schedule_d = compute_schedule_d(tax_return, fs, config, trace, k1_st, k1_lt)
            result.line7 = result.schedule_d.line21
            trace.computed(result.line7, "form1040.line7", ["scheduleD.line21"], "Form 1040, Line 7")
            logger.debug("Schedule D: line21=%d carryforward=%d",
                         result.schedule_d.line21, result.schedule_d.capital_loss_carryforward)
        else:
            trace.zero("form1040.line7", "Form 1040, Line 7")

        # Schedule C, 1099-NEC, Schedule SE
        if tax_return.schedule_c_businesses:
            result.schedule_c = compute_schedule_c(tax_return.schedule_c_businesses, trace)
        schedule_c_net = result.schedule_c.total_net_profit if result.schedule_c else 0
        nec_total = sum(f.box1 for f in tax_return.form1099_necs)
        k1_se = k1.se_eligible_income if k1 else 0

        if schedule_c_net + nec_total > 0 or k1_se > 0:
            w2_ss_wages = sum(w.box3 + w.box7 for w in tax_return.w2s)
            se_inputs = schedule_c_net + nec_total
            result.schedule_se = compute_schedule_se(se_inputs, k1_se, w2_ss_wages, config, trace)
            logger.debug("Schedule SE: tax=%d", result.schedule_se.total_se_tax)
        se = result.schedule_se
        se_deductible_half = se.deductible_half if se else 0

        # Schedule E and K-1 rentals share the passive loss allowance
        preliminary_agi = (
            result.line1a + result.line2b + result.line3b + result.line7
            + schedule_c_net + nec_total + (k1.total_passthrough_income if k1 else 0)
        )
        if tax_return.schedule_e_properties:
            result.schedule_e = compute_schedule_e(
                tax_return.schedule_e_properties, fs, preliminary_agi, config, trace
            )
            if result.schedule_e.disallowed_loss:
                result.suspended_losses.append(SuspendedLoss(
                    source="scheduleE",
                    amount=result.schedule_e.disallowed_loss,
                    description="Schedule E rental real estate",
                ))

        k1_allowed_rental = 0
        if k1 is not None:
            already_used = result.schedule_e.allowance_used if result.schedule_e else 0
            result.k1_pal = compute_k1_rental_pal(
                k1.total_rental_income, preliminary_agi, fs, already_used, config
            )
            k1_allowed_rental = result.k1_pal.allowed_rental_income
            if result.k1_pal.disallowed_loss:
                result.suspended_losses.append(SuspendedLoss(
                    source="k1", amount=result.k1_pal.disallowed_loss, description="K-1 rental activities",
                ))
                trace.computed(result.k1_pal.disallowed_loss, "form8582.suspendedLoss",
                               ["k1.passthroughIncome"], "Form 8582, suspended passive loss")

        # Schedule 1
        schedule_1 = compute_schedule_1(
            tax_return, trace,
            schedule_c_net_profit=schedule_c_net,
            nec_total=nec_total,
            schedule_e=result.schedule_e,
            k1_passthrough=k1,
            k1_allowed_rental=k1_allowed_rental,
        )
        result.schedule_1 = schedule_1
        result.line8 = schedule_1.line10
        trace.computed(result.line8, "form1040.line8", ["schedule1.line10"], "Form 1040, Line 8")

        fill_schedule_1_adjustments(
            schedule_1, tax_return, se_deductible_half, schedule_c_net + nec_total, fs, config, trace
        )

        self._calculate_social_security(tax_return, result, trace)

        result.line9 = (
            result.line1z + result.line2b + result.line3b + result.line4b + result.line5b
            + result.line6b + result.line7 + result.line8
        )
        trace.computed(
            result.line9, "form1040.line9",
            ["form1040.line1z", "form1040.line2b", "form1040.line3b", "form1040.line4b",
             "form1040.line5b", "form1040.line6b", "form1040.line7", "form1040.line8"],
            "Form 1040, Line 9",
        )

        finish_schedule_1_adjustments(schedule_1, tax_return, result.line9, fs, config, trace)
        result.line10 = schedule_1.line26
        trace.computed(result.line10, "form1040.line10", ["schedule1.line26"], "Form 1040, Line 10")

        result.line11 = result.line9 - result.line10
        trace.computed(result.line11, "form1040.line11", ["form1040.line9", "form1040.line10"], "Form 1040, Line 11")

        self._calculate_deduction(tax_return, result, trace)

        # QBI
        businesses = collect_qbi_businesses(
            result.schedule_c, nec_total, k1,
            se_deductible_half=se_deductible_half, se_base=se.line2 if se else 0,
        )
        net_capital_gain = self._net_capital_gain(tax_return, result)
        senior_deduction = result.senior_deduction.senior_deduction
        if senior_deduction:
            trace.computed(senior_deduction, "schedule1A.seniorDeduction", ["form1040.line11"],
                           "Senior deduction (Schedule 1-A)")
        if businesses:
            result.qbi = QBICalculator().calculate(
                businesses,
                taxable_income_before_qbi=max(0, result.line11 - result.line12 - senior_deduction),
                net_capital_gain=result.line3a + net_capital_gain,
                filing_status=fs,
                config=config,
            )
            result.line13 = result.qbi.final_qbi_deduction
            if result.line13:
                trace.computed(result.line13, "qbi.deduction", ["form1040.line11", "form1040.line12"],
                               "Qualified business income deduction (Form 8995)")
        result.line13 += senior_deduction
        trace.computed(result.line13, "form1040.line13", ["qbi.deduction", "schedule1A.seniorDeduction"],
                       "Form 1040, Line 13")

        result.line14 = result.line12 + result.line13
        trace.computed(result.line14, "form1040.line14", ["form1040.line12", "form1040.line13"], "Form 1040, Line 14")
        result.line15 = max(0, result.line11 - result.line14)
        trace.computed(result.line15, "form1040.line15", ["form1040.line11", "form1040.line14"], "Form 1040, Line 15")

        # Tax
        if result.line3a > 0 or net_capital_gain > 0:
            result.qdcg = compute_qdcg_tax(result.line15, result.line3a, net_capital_gain, fs, config)
            result.line16 = result.qdcg.line25_tax
        else:
            result.line16 = compute_bracket_tax(result.line15, config.brackets_for(fs))
        trace.computed(result.line16, "form1040.line16",
                       ["form1040.line15", "form1040.line3a", "scheduleD.line21"], "Form 1040, Line 16")

        self._calculate_amt(tax_return, result, net_capital_gain, trace)
        result.line18 = result.line16 + result.line17
        trace.computed(result.line18, "form1040.line18", ["form1040.line16", "form1040.line17"], "Form 1040, Line 18")

        self._calculate_credits(tax_return, result, trace)
        self._calculate_other_taxes(tax_return, result, trace)
        self._calculate_payments(tax_return, result, k1, trace)

        logger.info(
            "Form 1040 computed for %d (%s): AGI=%d taxable=%d tax=%d refund=%d owed=%d",
            config.tax_year, fs.value, result.line11, result.line15, result.line24, result.line34, result.line37,
        )
        return result

    # ------------------------------------------------------------------
    # Source documents
    # ------------------------------------------------------------------

    def _record_documents(self, tax_return: TaxReturn, trace: TraceRecorder) -> None:
        for w in tax_return.w2s:
            name = w.employer_name or "Employer"
            if w.box1:
                trace.document(w.box1, "w2", w.id, "box1", f"{name} W-2 box 1")
            if w.box2:
                trace.document(w.box2, "w2", w.id, "box2", f"{name} W-2 box 2")
            if w.box6:
                trace.document(w.box6, "w2", w.id, "box6", f"{name} W-2 box 6")
        for f in tax_return.form1099_ints:
            name = f.payer_name or "Payer"
            for box, amount in (("box1", f.box1), ("box4", f.box4), ("box8", f.box8)):
                if amount:
                    trace.document(amount, "1099int", f.id, box, f"{name} 1099-INT {box}")
        for f in tax_return.form1099_divs:
            name = f.payer_name or "Payer"
            for box, amount in (("box1a", f.box1a), ("box1b", f.box1b), ("box2a", f.box2a),
                                ("box4", f.box4), ("box11", f.box11)):
                if amount:
                    trace.document(amount, "1099div", f.id, box, f"{name} 1099-DIV {box}")
        for f in tax_return.form1099_miscs:
            name = f.payer_name or "Payer"
            for box, amount in (("box1", f.box1), ("box2", f.box2), ("box3", f.box3), ("box4", f.box4)):
                if amount:
                    trace.document(amount, "1099misc", f.id, box, f"{name} 1099-MISC {box}")
        for f in tax_return.form1099_necs:
            name = f.payer_name or "Payer"
            for box, amount in (("box1", f.box1), ("box4", f.box4)):
                if amount:
                    trace.document(amount, "1099nec", f.id, box, f"{name} 1099-NEC {box}")
        for f in tax_return.form1099_gs:
            name = f.payer_name or "Payer"
            for box, amount in (("box1", f.box1), ("box2", f.box2), ("box4", f.box4)):
                if amount:
                    trace.document(amount, "1099g", f.id, box, f"{name} 1099-G {box}")
        for f in tax_return.form1099_rs:
            name = f.payer_name or "Payer"
            for box, amount in (("box1", f.box1), ("box2a", f.box2a), ("box4", f.box4)):
                if amount:
                    trace.document(amount, "1099r", f.id, box, f"{name} 1099-R {box}")
        for f in tax_return.ssa1099s:
            for box, amount in (("box5", f.box5), ("box6", f.box6)):
                if amount:
                    trace.document(amount, "ssa1099", f.id, box, f"SSA-1099 {box}")
        for b in tax_return.form1099_bs:
            if b.federal_tax_withheld:
                trace.document(b.federal_tax_withheld, "1099b", b.id, "box4",
                               f"{b.broker_name or 'Broker'} 1099-B box 4")
        for k in tax_return.schedule_k1s:
            if k.federal_tax_withheld:
                trace.document(k.federal_tax_withheld, "k1", k.id, "federalTaxWithheld",
                               f"{k.entity_name or 'Entity'} K-1 federal tax withheld")

    def _record_k1(self, k1: K1AggregateResult, tax_return: TaxReturn, trace: TraceRecorder) -> None:
        entity_inputs = []
        for k in tax_return.schedule_k1s:
            trace.document(k.ordinary_income + k.rental_income + k.guaranteed_payments,
                           "k1", k.id, "passthrough", f"{k.entity_name or 'Entity'} K-1")
            entity_inputs.append(f"k1:{k.id}:passthrough")

        for node_id, amount, label in (
            ("k1.totalInterest", k1.total_interest, "K-1 interest income"),
            ("k1.totalDividends", k1.total_dividends, "K-1 ordinary dividends"),
            ("k1.totalQualifiedDividends", k1.total_qualified_dividends, "K-1 qualified dividends"),
            ("k1.totalSTCapitalGain", k1.total_st_capital_gain, "K-1 net short-term capital gain"),
            ("k1.totalLTCapitalGain", k1.total_lt_capital_gain, "K-1 net long-term capital gain"),
            ("k1.seEligibleIncome", k1.se_eligible_income, "K-1 self-employment earnings"),
        ):
            if amount:
                trace.computed(amount, node_id, entity_inputs, label)
        trace.computed(k1.total_passthrough_income, "k1.passthroughIncome", entity_inputs,
                       "K-1 passthrough income (ordinary, rental, guaranteed payments)")

    # ------------------------------------------------------------------
    # Income
    # ------------------------------------------------------------------

    def _calculate_income_lines(
        self,
        tax_return: TaxReturn,
        result: Form1040Result,
        k1: Optional[K1AggregateResult],
        trace: TraceRecorder,
    ) -> None:
        result.line1a = sum(w.box1 for w in tax_return.w2s)
        trace.computed(result.line1a, "form1040.line1a",
                       [f"w2:{w.id}:box1" for w in tax_return.w2s], "Form 1040, Line 1a")
        result.line1z = result.line1a
        trace.computed(result.line1z, "form1040.line1z", ["form1040.line1a"], "Form 1040, Line 1z")

        result.line2a = (
            sum(f.box8 for f in tax_return.form1099_ints)
            + sum(f.box11 for f in tax_return.form1099_divs)
        )
        trace.computed(
            result.line2a, "form1040.line2a",
            [f"1099int:{f.id}:box8" for f in tax_return.form1099_ints]
            + [f"1099div:{f.id}:box11" for f in tax_return.form1099_divs],
            "Form 1040, Line 2a",
        )
        result.line2b = sum(f.box1 for f in tax_return.form1099_ints) + (k1.total_interest if k1 else 0)
        trace.computed(
            result.line2b, "form1040.line2b",
            [f"1099int:{f.id}:box1" for f in tax_return.form1099_ints] + ["k1.totalInterest"],
            "Form 1040, Line 2b",
        )

        result.line3a = sum(f.box1b for f in tax_return.form1099_divs) + (k1.total_qualified_dividends if k1 else 0)
        trace.computed(
            result.line3a, "form1040.line3a",
            [f"1099div:{f.id}:box1b" for f in tax_return.form1099_divs] + ["k1.totalQualifiedDividends"],
            "Form 1040, Line 3a",
        )
        result.line3b = sum(f.box1a for f in tax_return.form1099_divs) + (k1.total_dividends if k1 else 0)
        trace.computed(
            result.line3b, "form1040.line3b",
            [f"1099div:{f.id}:box1a" for f in tax_return.form1099_divs] + ["k1.totalDividends"],
            "Form 1040, Line 3b",
        )

        iras = [r for r in tax_return.form1099_rs if r.is_ira]
        pensions = [r for r in tax_return.form1099_rs if not r.is_ira]
        result.line4a = sum(r.box1 for r in iras)
        result.line4b = sum(r.box2a for r in iras)
        result.line5a = sum(r.box1 for r in pensions)
        result.line5b = sum(r.box2a for r in pensions)
        for line, docs, box in (("line4a", iras, "box1"), ("line4b", iras, "box2a"),
                                ("line5a", pensions, "box1"), ("line5b", pensions, "box2a")):
            trace.computed(getattr(result, line), f"form1040.{line}",
                           [f"1099r:{r.id}:{box}" for r in docs], f"Form 1040, Line {line[4:]}")

    @staticmethod
    def _has_capital_activity(tax_return: TaxReturn, k1_st: int, k1_lt: int) -> bool:
        prior = tax_return.prior_year
        return bool(
            tax_return.capital_transactions
            or tax_return.form1099_bs
            or any(f.box2a for f in tax_return.form1099_divs)
            or k1_st or k1_lt
            or (prior and (prior.capital_loss_carryforward_st or prior.capital_loss_carryforward_lt))
        )

    def _calculate_social_security(
        self, tax_return: TaxReturn, result: Form1040Result, trace: TraceRecorder
    ) -> None:
        gross = sum(f.box5 for f in tax_return.ssa1099s)
        result.line6a = gross
        trace.computed(gross, "form1040.line6a",
                       [f"ssa1099:{f.id}:box5" for f in tax_return.ssa1099s], "Form 1040, Line 6a")
        if gross <= 0:
            trace.zero("form1040.line6b", "Form 1040, Line 6b")
            return

        other_income = (
            result.line1z + result.line2b + result.line3b + result.line4b + result.line5b
            + result.line7 + result.line8 - adjustments_before_student_loan(result.schedule_1)
        )
        result.social_security = compute_taxable_social_security(
            gross, other_income, result.line2a, result.filing_status, self.config,
            federal_withheld=sum(f.box6 for f in tax_return.ssa1099s),
        )
        result.line6b = result.social_security.taxable_benefits
        trace.computed(result.line6b, "form1040.line6b",
                       ["form1040.line6a", "form1040.line2a", "form1040.line8"], "Form 1040, Line 6b")

    # ------------------------------------------------------------------
    # Deductions
    # ------------------------------------------------------------------

    def _calculate_deduction(self, tax_return: TaxReturn, result: Form1040Result, trace: TraceRecorder) -> None:
        fs = result.filing_status
        senior = compute_senior_deduction(
            tax_return.taxpayer, tax_return.spouse, fs, result.line11, self.config.tax_year, self.config
        )
        result.senior_deduction = senior
        standard_inputs = []
        if senior.additional_standard_deduction:
            trace.computed(senior.additional_standard_deduction, "standardDeduction.additional", [],
                           "Additional standard deduction (age 65 or older, blind)")
            standard_inputs.append("standardDeduction.additional")
        result.standard_deduction = self.config.standard_deduction[fs] + senior.additional_standard_deduction
        trace.computed(result.standard_deduction, "standardDeduction", standard_inputs, "Standard deduction")

        # Form 4952: investment income excludes qualified dividends taxed at capital gain rates
        net_investment_income = result.line2b + max(0, result.line3b - result.line3a)
        result.schedule_a = compute_schedule_a(
            tax_return.deductions.itemized, result.line11, net_investment_income, fs, self.config, trace
        )
        itemized = result.schedule_a.line17

        forced = tax_return.deductions.method == DeductionMethod.ITEMIZED
        if forced or itemized > result.standard_deduction:
            result.deduction_method = DeductionMethod.ITEMIZED
            result.line12 = itemized
            trace.computed(result.line12, "form1040.line12", ["scheduleA.line17"], "Form 1040, Line 12")
        else:
            result.deduction_method = DeductionMethod.STANDARD
            result.line12 = result.standard_deduction
            trace.computed(result.line12, "form1040.line12", ["standardDeduction"], "Form 1040, Line 12")
        logger.debug("Deduction: %s %d (standard %d, itemized %d)",
                     result.deduction_method.value, result.line12, result.standard_deduction, itemized)

    @staticmethod
    def _net_capital_gain(tax_return: TaxReturn, result: Form1040Result) -> int:
        d = result.schedule_d
        return net_cap_gain_for_qdcg(
            d.line15 if d else 0,
            d.line16 if d else 0,
            sum(f.box2a for f in tax_return.form1099_divs),
            has_schedule_d=d is not None,
        )

    def _calculate_amt(
        self, tax_return: TaxReturn, result: Form1040Result, net_capital_gain: int, trace: TraceRecorder
    ) -> None:
        if result.deduction_method == DeductionMethod.ITEMIZED:
            added_back, added_back_node = result.schedule_a.line7, "scheduleA.line7"
        else:
            added_back, added_back_node = result.line12, "form1040.line12"
        bond_interest = (
            sum(f.box9 for f in tax_return.form1099_ints) + sum(f.box13 for f in tax_return.form1099_divs)
        )
        amt = compute_amt(
            result.line15, result.line16, added_back, bond_interest,
            sum(e.spread for e in tax_return.iso_exercises),
            result.line3a, net_capital_gain, result.filing_status, self.config,
        )
        result.amt = amt
        if amt.line6_amti_after_exemption:
            trace.computed(amt.line4_amti, "form6251.amti", ["form1040.line15", added_back_node],
                           "Alternative minimum taxable income (Form 6251, line 4)")
            trace.computed(amt.line5_exemption, "form6251.exemption", ["form6251.amti"], "AMT exemption")
            trace.computed(amt.tentative_minimum_tax, "form6251.tentativeMinimumTax",
                           ["form6251.amti", "form6251.exemption", "form1040.line3a"], "Tentative minimum tax")
            trace.computed(amt.amt, "form6251.amt", ["form6251.tentativeMinimumTax", "form1040.line16"],
                           "Alternative minimum tax (Form 6251)")
            logger.debug("AMT: amti=%d tmt=%d regular=%d amt=%d",
                         amt.line4_amti, amt.tentative_minimum_tax, amt.regular_tax, amt.amt)
        result.line17 = amt.amt
        trace.computed(result.line17, "form1040.line17", ["form6251.amt"], "Form 1040, Line 17")

    # ------------------------------------------------------------------
    # Credits
    # ------------------------------------------------------------------

    def _earned_income(self, result: Form1040Result) -> int:
        se = result.schedule_se
        se_earnings = (se.line2 - se.deductible_half) if se else 0
        return max(0, result.line1a + se_earnings)

    def _eic_filer_age(self, tax_return: TaxReturn, tax_year: int) -> Optional[int]:
        """Taxpayer's age, or the spouse's on a joint return when only the spouse is in range."""
        low, high = self.config.eitc_min_age_no_children, self.config.eitc_max_age_no_children
        age = tax_return.taxpayer.age_at_year_end(tax_year)
        spouse = tax_return.spouse
        if spouse is not None and tax_return.filing_status == FilingStatus.MARRIED_JOINT:
            spouse_age = spouse.age_at_year_end(tax_year)
            if spouse_age is not None and (age is None or not low <= age <= high) and low <= spouse_age <= high:
                return spouse_age
        return age

    def _calculate_credits(self, tax_return: TaxReturn, result: Form1040Result, trace: TraceRecorder) -> None:
        config = self.config
        fs = result.filing_status
        year = config.tax_year
        result.earned_income = self._earned_income(result)

        # Line 19 - Child Tax Credit / Credit for Other Dependents
        ctc = compute_child_tax_credit(
            tax_return.dependents, fs, result.line11, result.line18, result.earned_income, year, config
        )
        result.child_tax_credit = ctc
        if ctc.initial_credit:
            trace.computed(ctc.initial_credit, "ctc.initialCredit", [], "Child tax credit before phase-out")
            trace.computed(ctc.phase_out_reduction, "ctc.phaseOutReduction", ["form1040.line11"],
                           "Child tax credit phase-out reduction")
            trace.computed(ctc.credit_after_phase_out, "ctc.creditAfterPhaseOut",
                           ["ctc.initialCredit", "ctc.phaseOutReduction"], "Child tax credit after phase-out")
        result.line19 = ctc.non_refundable_credit
        trace.computed(result.line19, "form1040.line19", ["ctc.creditAfterPhaseOut", "form1040.line18"],
                       "Form 1040, Line 19")

        # Line 20 - Schedule 3 non-refundable credits, each limited to the tax left
        remaining = max(0, result.line18 - result.line19)

        result.dependent_care_credit = compute_dependent_care_credit(
            tax_return.dependent_care, tax_return.dependents, result.line11, result.earned_income, year, config
        )
        dependent_care = min(result.dependent_care_credit.credit_amount, remaining)
        remaining -= dependent_care
        if dependent_care:
            trace.computed(dependent_care, "credits.dependentCare", ["form1040.line11"],
                           "Child and dependent care credit (Form 2441)")

        result.education_credit = compute_education_credit(
            tax_return.education_expenses, fs, result.line11, config
        )
        education = min(result.education_credit.total_non_refundable, remaining)
        remaining -= education
        if education:
            trace.computed(education, "credits.education", ["form1040.line11"],
                           "Education credits, non-refundable (Form 8863)")

        result.savers_credit = compute_savers_credit(
            tax_return.retirement_contributions, tax_return.w2s, fs, result.line11, config,
            can_be_claimed_as_dependent=tax_return.can_be_claimed_as_dependent,
        )
        savers = min(result.savers_credit.credit_amount, remaining)
        if savers:
            trace.computed(savers, "credits.savers", ["form1040.line11"],
                           "Retirement savings contributions credit (Form 8880)")

        result.line20 = dependent_care + education + savers
        trace.computed(result.line20, "form1040.line20",
                       ["credits.dependentCare", "credits.education", "credits.savers"], "Form 1040, Line 20")
        result.line21 = result.line19 + result.line20
        trace.computed(result.line21, "form1040.line21", ["form1040.line19", "form1040.line20"], "Form 1040, Line 21")
        result.line22 = max(0, result.line18 - result.line21)
        trace.computed(result.line22, "form1040.line22", ["form1040.line18", "form1040.line21"], "Form 1040, Line 22")

        # Refundable credits
        investment_income = (
            result.line2a + result.line2b + result.line3b + max(0, result.line7)
            + max(0, result.schedule_e.line26 if result.schedule_e else 0)
        )
        result.earned_income_credit = compute_earned_income_credit(
            tax_return.dependents, fs, result.earned_income, result.line11, investment_income,
            self._eic_filer_age(tax_return, year), year, config,
        )
        eic = result.earned_income_credit
        if eic.eligible:
            trace.computed(eic.credit_at_earned_income, "eic.creditAtEarnedIncome", ["form1040.line1a"],
                           "EIC computed on earned income")
            trace.computed(eic.credit_at_agi, "eic.creditAtAGI", ["form1040.line11"], "EIC computed on AGI")
            trace.computed(eic.credit_amount, "eic.creditAmount",
                           ["eic.creditAtEarnedIncome", "eic.creditAtAGI"], "Earned income credit")
        result.line27 = eic.credit_amount
        trace.computed(result.line27, "form1040.line27", ["eic.creditAmount"], "Form 1040, Line 27")

        result.line28 = ctc.additional_ctc
        trace.computed(result.line28, "form1040.line28", ["ctc.creditAfterPhaseOut", "form1040.line19"],
                       "Form 1040, Line 28")

        result.line29 = result.education_credit.total_refundable
        if result.line29:
            trace.computed(result.line29, "credits.aotcRefundable", ["form1040.line11"],
                           "American opportunity credit, refundable part")
        trace.computed(result.line29, "form1040.line29", ["credits.aotcRefundable"], "Form 1040, Line 29")

    # ------------------------------------------------------------------
    # Other taxes and payments
    # ------------------------------------------------------------------

    def _calculate_other_taxes(self, tax_return: TaxReturn, result: Form1040Result, trace: TraceRecorder) -> None:
        fs = result.filing_status
        se = result.schedule_se

        result.additional_medicare = compute_additional_medicare_tax(
            tax_return.w2s, se.net_se_earnings if se else 0, fs, self.config
        )
        if result.additional_medicare.total_tax:
            trace.computed(result.additional_medicare.total_tax, "form8959.additionalMedicareTax",
                           ["scheduleSE.line3"], "Additional Medicare Tax (Form 8959)")

        net_investment_income = (
            result.line2b + result.line3b + result.line7
            + (result.schedule_e.line26 if result.schedule_e else 0)
            + (result.k1_pal.allowed_rental_income if result.k1_pal else 0)
        )
        result.niit = compute_niit(net_investment_income, result.line11, fs, self.config)
        if result.niit.tax:
            trace.computed(result.niit.tax, "form8960.niit",
                           ["form1040.line2b", "form1040.line3b", "form1040.line7", "form1040.line11"],
                           "Net investment income tax (Form 8960)")

        result.line23 = (se.total_se_tax if se else 0) + result.additional_medicare.total_tax + result.niit.tax
        trace.computed(result.line23, "form1040.line23",
                       ["scheduleSE.line6", "form8959.additionalMedicareTax", "form8960.niit"],
                       "Form 1040, Line 23")
        result.line24 = result.line22 + result.line23
        trace.computed(result.line24, "form1040.line24", ["form1040.line22", "form1040.line23"], "Form 1040, Line 24")

    def _calculate_payments(
        self,
        tax_return: TaxReturn,
        result: Form1040Result,
        k1: Optional[K1AggregateResult],
        trace: TraceRecorder,
    ) -> None:
        withholding = (
            sum(w.box2 for w in tax_return.w2s)
            + sum(f.box4 for f in tax_return.form1099_ints)
            + sum(f.box4 for f in tax_return.form1099_divs)
            + sum(f.box4 for f in tax_return.form1099_miscs)
            + sum(f.box4 for f in tax_return.form1099_necs)
            + sum(f.box4 for f in tax_return.form1099_gs)
            + sum(f.box4 for f in tax_return.form1099_rs)
            + sum(f.box6 for f in tax_return.ssa1099s)
            + sum(b.federal_tax_withheld for b in tax_return.form1099_bs)
            + (k1.total_withholding if k1 else 0)
        )
        result.line25 = withholding + result.additional_medicare.withholding_credit
        inputs = [f"w2:{w.id}:box2" for w in tax_return.w2s]
        for prefix, docs in (("1099int", tax_return.form1099_ints), ("1099div", tax_return.form1099_divs),
                             ("1099misc", tax_return.form1099_miscs), ("1099nec", tax_return.form1099_necs),
                             ("1099g", tax_return.form1099_gs), ("1099r", tax_return.form1099_rs)):
            inputs.extend(f"{prefix}:{f.id}:box4" for f in docs)
        inputs.extend(f"ssa1099:{f.id}:box6" for f in tax_return.ssa1099s)
        inputs.extend(f"1099b:{b.id}:box4" for b in tax_return.form1099_bs)
        inputs.extend(f"k1:{k.id}:federalTaxWithheld" for k in tax_return.schedule_k1s)
        if result.additional_medicare.withholding_credit:
            trace.computed(result.additional_medicare.withholding_credit, "form8959.withholdingCredit",
                           [f"w2:{w.id}:box6" for w in tax_return.w2s],
                           "Additional Medicare Tax withholding (Form 8959)")
            inputs.append("form8959.withholdingCredit")
        trace.computed(result.line25, "form1040.line25", inputs, "Form 1040, Line 25")

        result.line26 = sum(p.amount for p in tax_return.estimated_tax_payments)
        trace.computed(result.line26, "form1040.line26", [], "Form 1040, Line 26")

        result.line31 = 0
        result.line32 = result.line27 + result.line28 + result.line29 + result.line31
        trace.computed(result.line32, "form1040.line32",
                       ["form1040.line27", "form1040.line28", "form1040.line29"], "Form 1040, Line 32")
        result.line33 = result.line25 + result.line26 + result.line32
        trace.computed(result.line33, "form1040.line33",
                       ["form1040.line25", "form1040.line26", "form1040.line32"], "Form 1040, Line 33")

        result.line34 = max(0, result.line33 - result.line24)
        trace.computed(result.line34, "form1040.line34", ["form1040.line33", "form1040.line24"], "Form 1040, Line 34")
        result.line37 = max(0, result.line24 - result.line33)
        trace.computed(result.line37, "form1040.line37", ["form1040.line24", "form1040.line33"], "Form 1040, Line 37")


def compute_form1040(tax_return: TaxReturn, config: Optional[TaxYearConfig] = None) -> Form1040Result:
    """Compute Form 1040 for ``tax_return`` with the constants of its tax year."""
    config = config or TaxYearConfig.for_year(tax_return.tax_year)
    return FederalTaxEngine(config).calculate(tax_return)
