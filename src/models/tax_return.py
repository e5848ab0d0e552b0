from datetime import date
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from .taxpayer import Taxpayer, Dependent, FilingStatus, normalize_filing_status
from .income import (
    W2,
    Form1099INT,
    Form1099DIV,
    Form1099MISC,
    Form1099NEC,
    Form1099G,
    Form1099R,
    Form1099B,
    SSA1099,
    CapitalTransaction,
    ScheduleK1,
    ScheduleCBusiness,
    ScheduleEProperty,
    ISOExercise,
)
from .deductions import Deductions, Adjustments
from .credits import DependentCareExpenses, EducationExpenses, RetirementContributions
from .state import StateReturnConfig


class PriorYearInfo(BaseModel):
    agi: int = 0
    capital_loss_carryforward_st: int = Field(default=0, ge=0)
    capital_loss_carryforward_lt: int = Field(default=0, ge=0)
    itemized_last_year: bool = False


class EstimatedTaxPayment(BaseModel):
    date_paid: Optional[date] = None
    amount: int = Field(default=0, ge=0)


class TaxReturn(BaseModel):
    """
    Complete tax return information.

    This is the single input to every computation; the engines read it and
    never write back to it.
    """
    tax_year: int = 2025
    filing_status: FilingStatus = FilingStatus.SINGLE
    taxpayer: Taxpayer = Field(default_factory=Taxpayer)
    spouse: Optional[Taxpayer] = None
    dependents: List[Dependent] = Field(default_factory=list)
    can_be_claimed_as_dependent: bool = False

    # Source documents
    w2s: List[W2] = Field(default_factory=list)
    form1099_ints: List[Form1099INT] = Field(default_factory=list)
    form1099_divs: List[Form1099DIV] = Field(default_factory=list)
    form1099_miscs: List[Form1099MISC] = Field(default_factory=list)
    form1099_necs: List[Form1099NEC] = Field(default_factory=list)
    form1099_gs: List[Form1099G] = Field(default_factory=list)
    form1099_rs: List[Form1099R] = Field(default_factory=list)
    form1099_bs: List[Form1099B] = Field(default_factory=list)
    ssa1099s: List[SSA1099] = Field(default_factory=list)
    capital_transactions: List[CapitalTransaction] = Field(default_factory=list)
    schedule_k1s: List[ScheduleK1] = Field(default_factory=list)
    schedule_c_businesses: List[ScheduleCBusiness] = Field(default_factory=list)
    schedule_e_properties: List[ScheduleEProperty] = Field(default_factory=list)
    iso_exercises: List[ISOExercise] = Field(default_factory=list)

    prior_year: Optional[PriorYearInfo] = None

    adjustments: Adjustments = Field(default_factory=Adjustments)
    deductions: Deductions = Field(default_factory=Deductions)

    dependent_care: Optional[DependentCareExpenses] = None
    education_expenses: Optional[EducationExpenses] = None
    retirement_contributions: Optional[RetirementContributions] = None
    estimated_tax_payments: List[EstimatedTaxPayment] = Field(default_factory=list)

    state_returns: List[StateReturnConfig] = Field(default_factory=list)

    @field_validator('filing_status', mode='before')
    def validate_filing_status(cls, v):
        return normalize_filing_status(v)

    def has_income_documents(self) -> bool:
        return any((
            self.w2s,
            self.form1099_ints,
            self.form1099_divs,
            self.form1099_bs,
            self.form1099_miscs,
            self.form1099_necs,
            self.form1099_rs,
            self.ssa1099s,
            self.schedule_k1s,
            self.schedule_c_businesses,
            self.schedule_e_properties,
            self.capital_transactions,
        ))
