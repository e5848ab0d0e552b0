"""
Tax-year rules registry.

A ``YearRulesModule`` bundles everything that changes from one tax year to
the next: the federal constants, the Form 1040 engine configured with them,
and the state modules for that year. ``YearRegistry`` maps years to modules
and is built once by ``default_registry()`` and passed explicitly to
``compute_all``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from calculator.engine import FORM_1040_LINES, FederalTaxEngine, Form1040Result
from calculator.exceptions import UnsupportedTaxYearError
from calculator.schedules.schedule_b import ScheduleBResult, compute_schedule_b
from calculator.state import StateRegistry, StateRulesModule
from calculator.state.configs.state_2025 import STATE_FACTORIES
from calculator.tax_year_config import TaxYearConfig, supported_config_years
from calculator.traced import TraceRecorder
from models.tax_return import TaxReturn
from models.taxpayer import coerce_filing_status

logger = logging.getLogger(__name__)

FEDERAL_NODE_LABELS = {
    "standardDeduction": "Standard deduction",
    "adjustments.educator": "Educator expenses",
    "adjustments.hsa": "HSA deduction",
    "adjustments.seTax": "Deductible part of self-employment tax",
    "adjustments.ira": "IRA deduction",
    "adjustments.studentLoan": "Student loan interest deduction",
    "ctc.initialCredit": "Child tax credit before phase-out",
    "ctc.phaseOutReduction": "Child tax credit phase-out",
    "ctc.creditAfterPhaseOut": "Child tax credit after phase-out",
    "eic.creditAtEarnedIncome": "EIC at earned income",
    "eic.creditAtAGI": "EIC at AGI",
    "eic.creditAmount": "Earned income credit",
    "credits.dependentCare": "Child and dependent care credit",
    "credits.education": "Education credits (nonrefundable)",
    "credits.aotcRefundable": "American opportunity credit (refundable)",
    "credits.savers": "Retirement savings contributions credit",
    "k1.passthroughIncome": "K-1 pass-through income",
    "form8582.suspendedLoss": "Suspended passive loss",
    "form8959.additionalMedicareTax": "Additional Medicare Tax",
    "form8959.withholdingCredit": "Additional Medicare Tax withholding",
    "form8960.niit": "Net investment income tax",
    "qbi.deduction": "Qualified business income deduction",
    "standardDeduction.additional": "Additional standard deduction (65 or older, blind)",
    "schedule1A.seniorDeduction": "Senior deduction",
    "form6251.amti": "Alternative minimum taxable income",
    "form6251.exemption": "AMT exemption",
    "form6251.tentativeMinimumTax": "Tentative minimum tax",
    "form6251.amt": "Alternative minimum tax",
}


class YearRulesModule:
    """Federal and state rules for a single tax year."""

    def __init__(self, config: TaxYearConfig, state_registry: StateRegistry):
        if state_registry.tax_year != config.tax_year:
            raise ValueError(
                f"State registry is for {state_registry.tax_year}, federal config for {config.tax_year}"
            )
        self.config = config
        self.state_registry = state_registry
        self._engine = FederalTaxEngine(config)

    @property
    def tax_year(self) -> int:
        return self.config.tax_year

    def compute_form1040(self, model: TaxReturn) -> Form1040Result:
        return self._engine.calculate(model)

    def compute_schedule_b(self, model: TaxReturn, trace: Optional[TraceRecorder] = None) -> ScheduleBResult:
        return compute_schedule_b(model, self.config, trace)

    def standard_deduction(self, filing_status) -> int:
        return self.config.standard_deduction[coerce_filing_status(filing_status)]

    def get_state_module(self, state_code: str) -> Optional[StateRulesModule]:
        return self.state_registry.get(state_code)

    def supported_states(self) -> List[str]:
        return self.state_registry.supported_states()

    def node_labels(self) -> Dict[str, str]:
        """Human-readable labels for every federal and state node id this year can emit."""
        labels = {f"form1040.{line}": f"Form 1040, Line {line[4:]}" for line in FORM_1040_LINES}
        labels.update(FEDERAL_NODE_LABELS)
        for code in self.supported_states():
            labels.update(self.state_registry.get(code).node_labels())
        return labels

    @classmethod
    def for_year(cls, tax_year: int) -> "YearRulesModule":
        """
        Build the module for a compiled-in year.

        Raises:
            UnsupportedTaxYearError: If no federal constants exist for the year
        """
        config = TaxYearConfig.for_year(tax_year)
        return cls(config, StateRegistry.build(tax_year, STATE_FACTORIES))


class YearRegistry:
    """Tax year -> ``YearRulesModule``."""

    def __init__(self, modules: Iterable[YearRulesModule] = ()):
        self._modules: Dict[int, YearRulesModule] = {}
        for module in modules:
            self.register(module)

    def register(self, module: YearRulesModule) -> None:
        self._modules[module.tax_year] = module

    def get_year_module(self, tax_year: int) -> YearRulesModule:
        """
        Raises:
            UnsupportedTaxYearError: If no module is registered for the year
        """
        module = self._modules.get(tax_year)
        if module is None:
            raise UnsupportedTaxYearError(tax_year, self._modules.keys())
        return module

    def supported_years(self) -> List[int]:
        return sorted(self._modules)

    def __contains__(self, tax_year: int) -> bool:
        return tax_year in self._modules


@lru_cache()
def default_registry() -> YearRegistry:
    """Registry with every compiled-in tax year. Built once, then shared read-only."""
    registry = YearRegistry(YearRulesModule.for_year(year) for year in supported_config_years())
    logger.info("Year registry ready: %s", ", ".join(str(y) for y in registry.supported_years()))
    return registry
