"""State tax configurations by year."""

from calculator.state.configs import state_2025

__all__ = ["state_2025"]
