"""State tax engine - orchestrates state tax calculations."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

from calculator.exceptions import StateModuleNotFoundError
from calculator.state.base_state_calculator import StateComputeResult
from calculator.state.state_registry import StateRegistry
from calculator.validation import Severity, ValidationFinding
from models.state import StateReturnConfig

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


class StateTaxEngine:
    """
    Runs every state return requested on a tax return against the completed
    federal result.

    A state without a registered module becomes a ``STATE_NOT_SUPPORTED``
    finding, or raises ``StateModuleNotFoundError`` when ``strict`` is set.
    """

    def __init__(self, registry: StateRegistry, strict: bool = False):
        self.registry = registry
        self.strict = strict

    def calculate(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        state_config: StateReturnConfig,
    ) -> Optional[StateComputeResult]:
        """
        Calculate one state return.

        Returns:
            StateComputeResult, or None if the state is not supported

        Raises:
            StateModuleNotFoundError: If the state is unsupported and strict lookup is on
        """
        code = state_config.state_code.value
        module = self.registry.get(code)
        if module is None:
            if self.strict:
                raise StateModuleNotFoundError(code, self.registry.tax_year)
            return None
        return module.compute(tax_return, federal, state_config)

    def calculate_all(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
    ) -> Tuple[List[StateComputeResult], List[ValidationFinding]]:
        results: List[StateComputeResult] = []
        findings: List[ValidationFinding] = []
        for i, state_config in enumerate(tax_return.state_returns):
            result = self.calculate(tax_return, federal, state_config)
            if result is None:
                code = state_config.state_code.value
                logger.info("No state module for %s in %d", code, self.registry.tax_year)
                findings.append(ValidationFinding(
                    "STATE_NOT_SUPPORTED",
                    f"State {code} is not supported for tax year {self.registry.tax_year}; "
                    f"no state return was computed.",
                    severity=Severity.WARNING,
                    field=f"state_returns[{i}].state_code",
                ))
                continue
            results.append(result)
        return results, findings

    def is_state_supported(self, state_code: str) -> bool:
        return self.registry.is_supported(state_code)
