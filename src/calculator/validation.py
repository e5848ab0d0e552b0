from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from calculator.decimal_math import format_dollars
from calculator.tax_year_config import TaxYearConfig
from models.income import EntityType
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass
class ValidationFinding:
    code: str
    message: str
    severity: Severity = Severity.WARNING
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


class FederalValidator:
    """
    Data-shape checks that never stop a computation. Every problem becomes a
    finding attached to the result; the engine degrades missing or odd
    values to zero on its own.
    """

    def __init__(self, config: Optional[TaxYearConfig] = None):
        self.config = config

    def validate(
        self,
        tax_return: TaxReturn,
        form1040: Optional["Form1040Result"] = None,
    ) -> List[ValidationFinding]:
        findings: List[ValidationFinding] = []
        config = self.config or TaxYearConfig.for_year(tax_return.tax_year)

        if tax_return.filing_status == FilingStatus.MARRIED_JOINT and tax_return.spouse is None:
            findings.append(ValidationFinding(
                "SPOUSE_MISSING_MFJ",
                "Filing status is married filing jointly but no spouse is entered.",
                field="spouse",
            ))

        for i, f in enumerate(tax_return.form1099_divs):
            if f.box1b > f.box1a:
                findings.append(ValidationFinding(
                    "QUALIFIED_DIVIDENDS_EXCEED_ORDINARY",
                    f"1099-DIV from {f.payer_name or f.id}: qualified dividends (box 1b) exceed "
                    f"ordinary dividends (box 1a).",
                    field=f"form1099_divs[{i}].box1b",
                ))

        for i, w in enumerate(tax_return.w2s):
            ss_wages = w.box3 + w.box7
            if ss_wages > config.ss_wage_base:
                findings.append(ValidationFinding(
                    "W2_SS_WAGES_OVER_BASE",
                    f"W-2 from {w.employer_name or w.id}: Social Security wages {format_dollars(ss_wages)} "
                    f"exceed the {format_dollars(config.ss_wage_base)} wage base.",
                    field=f"w2s[{i}].box3",
                ))

        if not tax_return.capital_transactions:
            for i, b in enumerate(tax_return.form1099_bs):
                if b.long_term is None:
                    findings.append(ValidationFinding(
                        "UNKNOWN_HOLDING_PERIOD",
                        f"1099-B {b.description or b.id} has no holding period; treated as short-term.",
                        severity=Severity.INFO,
                        field=f"form1099_bs[{i}].long_term",
                    ))

        findings.extend(self._validate_k1s(tax_return))
        if form1040 is not None:
            findings.extend(self._result_findings(form1040))
        return findings

    def _validate_k1s(self, tax_return: TaxReturn) -> List[ValidationFinding]:
        findings = []
        for i, k in enumerate(tax_return.schedule_k1s):
            name = k.entity_name or k.id
            if k.qualified_dividends > k.dividend_income:
                findings.append(ValidationFinding(
                    "K1_QUALIFIED_EXCEEDS_DIVIDENDS",
                    f"K-1 from {name}: qualified dividends exceed ordinary dividends.",
                    field=f"schedule_k1s[{i}].qualified_dividends",
                ))
            if k.entity_type == EntityType.PARTNERSHIP:
                continue
            if k.guaranteed_payments:
                findings.append(ValidationFinding(
                    "K1_GUARANTEED_PAYMENTS_NON_PARTNERSHIP",
                    f"K-1 from {name} ({k.entity_type.value}) reports guaranteed payments, which only "
                    f"partnerships issue. The amount is still treated as self-employment income.",
                    field=f"schedule_k1s[{i}].guaranteed_payments",
                ))
            if k.self_employment_earnings:
                findings.append(ValidationFinding(
                    "K1_SE_EARNINGS_NON_PARTNERSHIP",
                    f"K-1 from {name} ({k.entity_type.value}) reports self-employment earnings, which "
                    f"only partnerships issue. The amount is still included on Schedule SE.",
                    field=f"schedule_k1s[{i}].self_employment_earnings",
                ))
        return findings

    def _result_findings(self, form1040: "Form1040Result") -> List[ValidationFinding]:
        findings = []
        for loss in form1040.suspended_losses:
            findings.append(ValidationFinding(
                "PAL_LOSS_SUSPENDED",
                f"{format_dollars(abs(loss.amount))} of passive rental loss ({loss.description}) is "
                f"suspended and carries forward (Form 8582).",
                severity=Severity.INFO,
            ))
        d = form1040.schedule_d
        if d is not None and d.capital_loss_carryforward:
            findings.append(ValidationFinding(
                "CAPITAL_LOSS_CARRYOVER",
                f"Capital loss of {format_dollars(d.capital_loss_carryforward)} exceeds the annual limit "
                f"and carries forward ({format_dollars(d.carryforward_st)} short-term, "
                f"{format_dollars(d.carryforward_lt)} long-term).",
                severity=Severity.INFO,
            ))
        return findings
