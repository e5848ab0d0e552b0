from enum import Enum
from typing import List
from pydantic import BaseModel, Field


class EducationCreditType(str, Enum):
    """Types of education credits."""
    AOTC = "aotc"  # American Opportunity Tax Credit
    LLC = "llc"    # Lifetime Learning Credit


class StudentInfo(BaseModel):
    """
    Student information for education credits.

    AOTC is computed per student while LLC expenses are pooled per return.
    """
    name: str = ""
    credit_type: EducationCreditType = EducationCreditType.AOTC
    qualified_expenses: int = Field(default=0, ge=0, description="Net of tax-free assistance, cents")
    is_at_least_half_time: bool = Field(
        default=True,
        description="Enrolled at least half-time for at least one academic period"
    )
    has_completed_four_years: bool = Field(
        default=False,
        description="Completed first 4 years of post-secondary education before the year"
    )
    prior_years_aotc_claimed: int = Field(
        default=0,
        ge=0,
        le=4,
        description="Number of years AOTC previously claimed for this student (max 4)"
    )

    def is_aotc_eligible(self, max_years: int = 4) -> bool:
        return (
            self.credit_type == EducationCreditType.AOTC
            and self.is_at_least_half_time
            and not self.has_completed_four_years
            and self.prior_years_aotc_claimed < max_years
        )


class EducationExpenses(BaseModel):
    students: List[StudentInfo] = Field(default_factory=list)


class DependentCareExpenses(BaseModel):
    """Form 2441 inputs."""
    total_expenses: int = Field(default=0, ge=0)
    num_qualifying_persons: int = Field(
        default=0, ge=0,
        description="0 means derive from dependents under 13"
    )


class RetirementContributions(BaseModel):
    """Form 8880 inputs. 401(k)-style deferrals come from W-2 box 12."""
    traditional_ira: int = Field(default=0, ge=0)
    roth_ira: int = Field(default=0, ge=0)
    spouse_traditional_ira: int = Field(default=0, ge=0)
    spouse_roth_ira: int = Field(default=0, ge=0)
