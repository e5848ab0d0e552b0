from .exceptions import (
    StateModuleNotFoundError,
    TaxEngineError,
    TraceGraphError,
    UnsupportedTaxYearError,
)
from .engine import FederalTaxEngine, Form1040Result, compute_form1040
from .tax_year_config import TaxYearConfig
from .validation import FederalValidator, Severity, ValidationFinding
from .qbi_calculator import QBICalculator, QBIBreakdown
from .traced import TracedValue, TraceRecorder, assert_acyclic, deserialize_values, serialize_values
from .year_registry import YearRegistry, YearRulesModule, default_registry
from .tax_calculator import ComputeResult, collect_all_values, compute_all
from .state import (
    StateTaxEngine,
    StateTaxConfig,
    StateRegistry,
    StateRulesModule,
    StateComputeResult,
    NO_INCOME_TAX_STATES,
)

__all__ = [
    "TaxEngineError",
    "UnsupportedTaxYearError",
    "StateModuleNotFoundError",
    "TraceGraphError",
    "FederalTaxEngine",
    "Form1040Result",
    "compute_form1040",
    "TaxYearConfig",
    "FederalValidator",
    "Severity",
    "ValidationFinding",
    "QBICalculator",
    "QBIBreakdown",
    "TracedValue",
    "TraceRecorder",
    "assert_acyclic",
    "serialize_values",
    "deserialize_values",
    "YearRegistry",
    "YearRulesModule",
    "default_registry",
    "ComputeResult",
    "collect_all_values",
    "compute_all",
    "StateTaxEngine",
    "StateTaxConfig",
    "StateRegistry",
    "StateRulesModule",
    "StateComputeResult",
    "NO_INCOME_TAX_STATES",
]
