"""
Top-level computation: federal Form 1040, Schedule B, state returns, and the
combined trace graph for one tax return.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, field
from typing import Any, Dict, List, Optional

from calculator.engine import Form1040Result
from calculator.schedules.schedule_b import ScheduleBResult
from calculator.state import StateComputeResult, StateTaxEngine
from calculator.traced import TraceMap, serialize_values
from calculator.validation import FederalValidator, Severity, ValidationFinding
from calculator.year_registry import YearRegistry, default_registry
from config.logging_config import get_logger
from config.settings import EngineSettings, get_settings
from models.deductions import DeductionMethod
from models.tax_return import TaxReturn


@dataclass
class ComputeResult:
    """Everything computed for one tax return. Built fresh on every call."""
    tax_year: int
    form1040: Form1040Result
    schedule_b: ScheduleBResult
    values: TraceMap = field(default_factory=dict)
    executed_schedules: List[str] = field(default_factory=list)
    state_results: List[StateComputeResult] = field(default_factory=list)
    findings: List[ValidationFinding] = field(default_factory=list)

    def state_result(self, state_code: str) -> Optional[StateComputeResult]:
        code = state_code.upper()
        return next((s for s in self.state_results if s.state_code == code), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taxYear": self.tax_year,
            "form1040": self.form1040.to_dict(),
            "scheduleB": {
                "required": self.schedule_b.required,
                "line4": self.schedule_b.line4,
                "line6": self.schedule_b.line6,
            },
            "stateResults": [s.to_dict() for s in self.state_results],
            "executedSchedules": list(self.executed_schedules),
            "findings": [f.to_dict() for f in self.findings],
            "values": serialize_values(self.values),
        }


def _executed_schedules(form1040: Form1040Result, state_results: List[StateComputeResult]) -> List[str]:
    schedules = ["B"]
    if any(astuple(form1040.schedule_1)):
        schedules.append("1")
    if form1040.deduction_method == DeductionMethod.ITEMIZED:
        schedules.append("A")
    if form1040.schedule_c is not None:
        schedules.append("C")
    if form1040.schedule_d is not None:
        schedules.append("D")
    if form1040.schedule_e is not None:
        schedules.append("E")
    if form1040.schedule_se is not None:
        schedules.append("SE")
    schedules.extend(s.form_label for s in state_results)
    return schedules


def collect_all_values(result: ComputeResult) -> TraceMap:
    """
    Merge the federal trace (Form 1040 and Schedule B) with every state's
    nodes into one insertion-ordered map. Federal nodes come first, so every
    state input refers to a node already present.
    """
    values: TraceMap = dict(result.form1040.values)
    for state in result.state_results:
        for node_id, value in state.values.items():
            values.setdefault(node_id, value)
    return values


def compute_all(
    model: TaxReturn,
    registry: Optional[YearRegistry] = None,
    settings: Optional[EngineSettings] = None,
) -> ComputeResult:
    """
    Compute the full return for ``model.tax_year``.

    Raises:
        UnsupportedTaxYearError: If the registry has no module for the tax year
        StateModuleNotFoundError: If a requested state has no module and
            ``settings.strict_state_modules`` is on
    """
    registry = registry or default_registry()
    settings = settings or get_settings()
    year = registry.get_year_module(model.tax_year)

    form1040 = year.compute_form1040(model)
    schedule_b = year.compute_schedule_b(model, form1040.trace)

    findings = FederalValidator(year.config).validate(model, form1040)
    state_engine = StateTaxEngine(year.state_registry, strict=settings.strict_state_modules)
    state_results, state_findings = state_engine.calculate_all(model, form1040)
    findings.extend(state_findings)

    result = ComputeResult(
        tax_year=year.tax_year,
        form1040=form1040,
        schedule_b=schedule_b,
        executed_schedules=_executed_schedules(form1040, state_results),
        state_results=state_results,
        findings=findings,
    )
    result.values = collect_all_values(result)

    log = get_logger(__name__, tax_year=year.tax_year, filing_status=model.filing_status.value)
    for finding in findings:
        if finding.severity == Severity.WARNING:
            log.warning(finding.message, extra={"extra_data": {"code": finding.code}})
    log.info(
        "Return computed",
        extra={"extra_data": {
            "schedules": ",".join(result.executed_schedules),
            "states": len(state_results),
            "findings": len(findings),
            "nodes": len(result.values),
            "total_tax": form1040.line24,
        }},
    )
    return result
