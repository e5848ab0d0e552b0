"""
Rule type definitions.

Provides enums for the return-completeness checks.
"""

from enum import Enum


class GapCategory(str, Enum):
    """Section of the return a missing item belongs to."""
    PERSONAL = "personal"
    FILING_STATUS = "filing-status"
    SPOUSE = "spouse"
    INCOME = "income"
    DEDUCTIONS = "deductions"
    WITHHOLDING = "withholding"


class GapPriority(str, Enum):
    """How much a missing item matters for filing."""
    REQUIRED = "required"        # Blocks filing
    RECOMMENDED = "recommended"  # Should review, but not blocking
    OPTIONAL = "optional"
