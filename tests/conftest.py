"""Pytest configuration and fixtures for the test suite."""

import sys
from pathlib import Path

import pytest

# Add src and the shared test factories to path for imports
src_path = Path(__file__).parent.parent / "src"
for path in (src_path, Path(__file__).parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from calculator.state import StateRegistry
from calculator.tax_year_config import TaxYearConfig
from calculator.year_registry import YearRegistry, YearRulesModule, default_registry
from config.settings import EngineSettings


@pytest.fixture
def config_2025() -> TaxYearConfig:
    return TaxYearConfig.for_2025()


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(_env_file=None)


@pytest.fixture
def strict_settings() -> EngineSettings:
    return EngineSettings(_env_file=None, strict_state_modules=True)


@pytest.fixture
def federal_only_registry() -> YearRegistry:
    """2025 rules with only the no-income-tax states registered."""
    return YearRegistry([YearRulesModule(TaxYearConfig.for_2025(), StateRegistry(2025))])
