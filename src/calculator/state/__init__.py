"""State tax calculation module."""

from calculator.state.state_tax_config import StateTaxConfig
from calculator.state.apportionment import apportion_income, compute_apportionment_ratio, scale_full_year_tax
from calculator.state.base_state_calculator import (
    ConfiguredStateModule,
    NoIncomeTaxStateModule,
    StateComputeResult,
    StateLineItem,
    StateRulesModule,
)
from calculator.state.state_registry import NO_INCOME_TAX_STATES, StateRegistry
from calculator.state.state_tax_engine import StateTaxEngine

__all__ = [
    "StateTaxConfig",
    "apportion_income",
    "compute_apportionment_ratio",
    "scale_full_year_tax",
    "ConfiguredStateModule",
    "NoIncomeTaxStateModule",
    "StateComputeResult",
    "StateLineItem",
    "StateRulesModule",
    "NO_INCOME_TAX_STATES",
    "StateRegistry",
    "StateTaxEngine",
]
