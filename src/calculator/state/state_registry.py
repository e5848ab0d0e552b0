"""State rules registry for one tax year."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional

from calculator.state.base_state_calculator import NoIncomeTaxStateModule, StateRulesModule
from calculator.state.state_tax_config import StateTaxConfig

logger = logging.getLogger(__name__)


# States without income tax
NO_INCOME_TAX_STATES = {
    "AK": "Alaska",
    "FL": "Florida",
    "NV": "Nevada",
    "NH": "New Hampshire",  # interest and dividends tax repealed for 2025
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "WA": "Washington",  # capital gains excise is out of scope
    "WY": "Wyoming",
}


def no_income_tax_module(state_code: str, tax_year: int) -> NoIncomeTaxStateModule:
    config = StateTaxConfig(
        state_code=state_code,
        state_name=NO_INCOME_TAX_STATES[state_code],
        tax_year=tax_year,
        form_label=f"{state_code} (no income tax)",
        node_prefix=state_code.lower(),
        is_flat_tax=True,
        flat_rate=0.0,
    )
    return NoIncomeTaxStateModule(config)


class StateRegistry:
    """
    Registry of state modules for a single tax year.

    Built once per year module and passed around explicitly; there is no
    global registration.
    """

    def __init__(self, tax_year: int, modules: Iterable[StateRulesModule] = ()):
        self.tax_year = tax_year
        self._modules: Dict[str, StateRulesModule] = {}
        for code in NO_INCOME_TAX_STATES:
            self.register(no_income_tax_module(code, tax_year))
        for module in modules:
            self.register(module)

    def register(self, module: StateRulesModule) -> None:
        """
        Register a module for its state code, replacing any earlier one.

        Raises:
            ValueError: If the module's configuration is for another tax year
        """
        if module.tax_year != self.tax_year:
            raise ValueError(
                f"{module.state_code} module is configured for {module.tax_year}, not {self.tax_year}"
            )
        self._modules[module.state_code.upper()] = module

    def get(self, state_code: str) -> Optional[StateRulesModule]:
        """Get the module for a state, or None if not supported."""
        return self._modules.get(str(state_code).strip().upper())

    def is_supported(self, state_code: str) -> bool:
        return self.get(state_code) is not None

    def supported_states(self) -> List[str]:
        """Sorted list of supported state codes."""
        return sorted(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    @classmethod
    def build(cls, tax_year: int, factories: Iterable[Callable[[int], StateRulesModule]]) -> "StateRegistry":
        """Registry from per-state factories taking the tax year."""
        registry = cls(tax_year, (factory(tax_year) for factory in factories))
        logger.debug("State registry for %d: %d states", tax_year, len(registry))
        return registry
