from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class DeductionMethod(str, Enum):
    STANDARD = "standard"
    ITEMIZED = "itemized"


class ItemizedDeductions(BaseModel):
    """Itemized deduction details (Schedule A). Amounts in cents."""
    medical_expenses: int = Field(default=0, ge=0)

    # Line 5a is the larger of income or sales taxes
    state_local_income_taxes: int = Field(default=0, ge=0)
    state_local_sales_taxes: int = Field(default=0, ge=0)
    real_estate_taxes: int = Field(default=0, ge=0)
    personal_property_taxes: int = Field(default=0, ge=0)

    # Mortgage debt tracking for the interest limitation (IRS Pub. 936)
    mortgage_interest: int = Field(default=0, ge=0, description="Form 1098 box 1")
    mortgage_principal: int = Field(
        default=0, ge=0,
        description="Outstanding mortgage principal balance (Form 1098 box 2)"
    )
    mortgage_pre_tcja: bool = Field(
        default=False,
        description="Mortgage originated on or before Dec 15, 2017 (uses $1M limit)"
    )

    investment_interest: int = Field(default=0, ge=0)
    prior_year_investment_interest_carryforward: int = Field(default=0, ge=0)

    charitable_cash: int = Field(default=0, ge=0)
    charitable_noncash: int = Field(default=0, ge=0)

    other_deductions: int = Field(default=0, ge=0)

    def total_entered(self) -> int:
        """Sum of everything the filer typed in, before any limitation."""
        return (
            self.medical_expenses
            + max(self.state_local_income_taxes, self.state_local_sales_taxes)
            + self.real_estate_taxes
            + self.personal_property_taxes
            + self.mortgage_interest
            + self.investment_interest
            + self.charitable_cash
            + self.charitable_noncash
            + self.other_deductions
        )


class Deductions(BaseModel):
    method: DeductionMethod = DeductionMethod.STANDARD
    itemized: Optional[ItemizedDeductions] = None


class Adjustments(BaseModel):
    """Schedule 1 Part II entries the filer supplies directly (cents)."""
    student_loan_interest: int = Field(default=0, ge=0, description="Form 1098-E box 1")
    educator_expenses: int = Field(default=0, ge=0)
    spouse_educator_expenses: int = Field(default=0, ge=0)
    ira_deduction: int = Field(default=0, ge=0)
    hsa_deduction: int = Field(default=0, ge=0)
    self_employed_health_insurance: int = Field(default=0, ge=0)
    self_employed_retirement: int = Field(default=0, ge=0)
    other: int = Field(default=0, ge=0)
