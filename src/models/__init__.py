from .taxpayer import Taxpayer, Dependent, Address, FilingStatus
from .income import (
    W2,
    W2Box12Entry,
    Form1099INT,
    Form1099DIV,
    Form1099MISC,
    Form1099NEC,
    Form1099G,
    Form1099R,
    Form1099B,
    SSA1099,
    CapitalTransaction,
    EntityType,
    Owner,
    ScheduleK1,
    ScheduleCBusiness,
    ScheduleEProperty,
    ISOExercise,
)
from .deductions import Deductions, DeductionMethod, ItemizedDeductions, Adjustments
from .credits import (
    DependentCareExpenses,
    EducationCreditType,
    EducationExpenses,
    RetirementContributions,
    StudentInfo,
)
from .state import StateCode, ResidencyType, StateReturnConfig
from .tax_return import TaxReturn, PriorYearInfo, EstimatedTaxPayment

__all__ = [
    'Taxpayer',
    'Dependent',
    'Address',
    'FilingStatus',
    'W2',
    'W2Box12Entry',
    'Form1099INT',
    'Form1099DIV',
    'Form1099MISC',
    'Form1099NEC',
    'Form1099G',
    'Form1099R',
    'Form1099B',
    'SSA1099',
    'CapitalTransaction',
    'EntityType',
    'Owner',
    'ScheduleK1',
    'ScheduleCBusiness',
    'ScheduleEProperty',
    'ISOExercise',
    'Deductions',
    'DeductionMethod',
    'ItemizedDeductions',
    'Adjustments',
    'DependentCareExpenses',
    'EducationCreditType',
    'EducationExpenses',
    'RetirementContributions',
    'StudentInfo',
    'StateCode',
    'ResidencyType',
    'StateReturnConfig',
    'TaxReturn',
    'PriorYearInfo',
    'EstimatedTaxPayment',
]
