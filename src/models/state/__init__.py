"""State tax models."""

from .state_return import StateCode, ResidencyType, StateReturnConfig

__all__ = [
    "StateCode",
    "ResidencyType",
    "StateReturnConfig",
]
