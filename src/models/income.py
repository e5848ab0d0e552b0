"""
Source-document models: W-2, the 1099 family, SSA-1099, capital
transactions, Schedule K-1, Schedule C businesses and Schedule E
properties.

Every monetary field is an integer number of cents.
"""

from datetime import date
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


def _upper_state(v):
    if isinstance(v, str):
        v = v.strip().upper()
        return v or None
    return v


class Owner(str, Enum):
    """Whose document this is on a joint return."""
    TAXPAYER = "taxpayer"
    SPOUSE = "spouse"


class W2Box12Entry(BaseModel):
    """Box 12 code/amount pair (12a-12d)."""
    code: str
    amount: int = 0

    @field_validator('code', mode='before')
    def upper_code(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class W2(BaseModel):
    id: str
    employer_ein: str = ""
    employer_name: str = ""
    owner: Owner = Owner.TAXPAYER

    box1: int = Field(default=0, description="Wages, tips, other compensation")
    box2: int = Field(default=0, description="Federal income tax withheld")
    box3: int = Field(default=0, description="Social security wages")
    box4: int = Field(default=0, description="Social security tax withheld")
    box5: int = Field(default=0, description="Medicare wages and tips")
    box6: int = Field(default=0, description="Medicare tax withheld")
    box7: int = Field(default=0, description="Social security tips")
    box8: int = Field(default=0, description="Allocated tips")
    box10: int = Field(default=0, description="Dependent care benefits")
    box11: int = Field(default=0, description="Nonqualified plans")
    box12: List[W2Box12Entry] = Field(default_factory=list)
    box13_statutory_employee: bool = False
    box13_retirement_plan: bool = False

    box15_state: Optional[str] = None
    box16_state_wages: int = 0
    box17_state_income_tax: int = 0

    @field_validator('box15_state', mode='before')
    def normalize_state(cls, v):
        return _upper_state(v)

    def box12_total(self, codes) -> int:
        return sum(e.amount for e in self.box12 if e.code in codes)


class Form1099INT(BaseModel):
    id: str
    payer_name: str = ""
    box1: int = Field(default=0, description="Interest income")
    box2: int = Field(default=0, description="Early withdrawal penalty")
    box3: int = Field(default=0, description="Interest on U.S. savings bonds and Treasury obligations")
    box4: int = Field(default=0, description="Federal income tax withheld")
    box8: int = Field(default=0, description="Tax-exempt interest")
    box9: int = Field(default=0, description="Specified private activity bond interest")


class Form1099DIV(BaseModel):
    id: str
    payer_name: str = ""
    box1a: int = Field(default=0, description="Total ordinary dividends")
    box1b: int = Field(default=0, description="Qualified dividends")
    box2a: int = Field(default=0, description="Total capital gain distributions")
    box3: int = Field(default=0, description="Nondividend distributions")
    box4: int = Field(default=0, description="Federal income tax withheld")
    box5: int = Field(default=0, description="Section 199A dividends")
    box11: int = Field(default=0, description="Exempt-interest dividends")
    box13: int = Field(default=0, description="Specified private activity bond interest dividends")


class Form1099MISC(BaseModel):
    id: str
    payer_name: str = ""
    box1: int = Field(default=0, description="Rents")
    box2: int = Field(default=0, description="Royalties")
    box3: int = Field(default=0, description="Other income")
    box4: int = Field(default=0, description="Federal income tax withheld")


class Form1099NEC(BaseModel):
    id: str
    payer_name: str = ""
    box1: int = Field(default=0, description="Nonemployee compensation")
    box4: int = Field(default=0, description="Federal income tax withheld")


class Form1099G(BaseModel):
    id: str
    payer_name: str = ""
    box1: int = Field(default=0, description="Unemployment compensation")
    box2: int = Field(default=0, description="State or local income tax refunds")
    box4: int = Field(default=0, description="Federal income tax withheld")
    box10a_state: Optional[str] = None

    @field_validator('box10a_state', mode='before')
    def normalize_state(cls, v):
        return _upper_state(v)


class Form1099R(BaseModel):
    id: str
    payer_name: str = ""
    box1: int = Field(default=0, description="Gross distribution")
    box2a: int = Field(default=0, description="Taxable amount")
    box4: int = Field(default=0, description="Federal income tax withheld")
    box7: str = Field(default="7", description="Distribution code")
    is_ira: bool = Field(default=False, description="IRA/SEP/SIMPLE box checked")


class SSA1099(BaseModel):
    id: str
    recipient: str = "taxpayer"
    box5: int = Field(default=0, description="Net benefits")
    box6: int = Field(default=0, description="Voluntary federal income tax withheld")


class Form1099B(BaseModel):
    id: str
    broker_name: str = ""
    description: str = ""
    date_acquired: Optional[date] = None
    date_sold: Optional[date] = None
    proceeds: int = 0
    cost_basis: Optional[int] = None
    wash_sale_loss_disallowed: int = 0
    long_term: Optional[bool] = None
    basis_reported_to_irs: bool = True
    federal_tax_withheld: int = 0

    @property
    def gain_loss(self) -> int:
        return self.proceeds - (self.cost_basis or 0) + self.wash_sale_loss_disallowed


class CapitalTransaction(BaseModel):
    """A reconciled sale (Form 8949 row). Takes priority over the raw 1099-B it came from."""
    id: str
    description: str = ""
    date_acquired: Optional[date] = None
    date_sold: Optional[date] = None
    proceeds: int = 0
    reported_basis: int = 0
    adjusted_basis: int = 0
    wash_sale_loss_disallowed: int = 0
    long_term: bool = False
    basis_reported_to_irs: bool = True
    source_1099b_id: Optional[str] = None

    @property
    def gain_loss(self) -> int:
        return self.proceeds - self.adjusted_basis + self.wash_sale_loss_disallowed

    @property
    def category(self) -> str:
        """Form 8949 box: A/B short-term, D/E long-term (reported / not reported)."""
        if self.long_term:
            return "D" if self.basis_reported_to_irs else "E"
        return "A" if self.basis_reported_to_irs else "B"


class EntityType(str, Enum):
    """Kinds of entity that issue a Schedule K-1."""
    PARTNERSHIP = "partnership"  # Form 1065
    S_CORPORATION = "s-corp"  # Form 1120-S
    TRUST_ESTATE = "trust-estate"  # Form 1041


class ScheduleK1(BaseModel):
    """
    Schedule K-1 passthrough allocation.

    Only the boxes that flow to Form 1040 lines are modeled. Box 14
    self-employment earnings and guaranteed payments are only meaningful
    for partnerships.
    """
    id: str
    entity_type: EntityType
    entity_name: str = ""
    entity_ein: str = ""

    ordinary_income: int = Field(default=0, description="Box 1 ordinary business income (loss)")
    rental_income: int = Field(default=0, description="Box 2/3 net rental income (loss)")
    interest_income: int = Field(default=0, description="Box 5 interest")
    dividend_income: int = Field(default=0, description="Box 6a ordinary dividends")
    qualified_dividends: int = Field(default=0, description="Box 6b qualified dividends")
    short_term_capital_gain: int = Field(default=0, description="Box 8 net short-term capital gain (loss)")
    long_term_capital_gain: int = Field(default=0, description="Box 9a net long-term capital gain (loss)")
    section199a_qbi: int = Field(default=0, description="Section 199A qualified business income")
    section199a_w2_wages: int = 0
    section199a_ubia: int = 0
    is_sstb: bool = False
    guaranteed_payments: int = Field(default=0, description="Box 4 guaranteed payments")
    self_employment_earnings: int = Field(default=0, description="Box 14 code A self-employment earnings")
    federal_tax_withheld: int = 0

    @field_validator('entity_type', mode='before')
    def normalize_entity_type(cls, v):
        if isinstance(v, str):
            key = v.strip().lower().replace('_', '-')
            return {
                "s-corporation": "s-corp",
                "scorp": "s-corp",
                "trust": "trust-estate",
                "estate": "trust-estate",
            }.get(key, key)
        return v


class ScheduleCBusiness(BaseModel):
    """Sole proprietorship (Schedule C). Expenses are already summed by category."""
    id: str
    business_name: str = ""
    principal_business_code: str = ""
    gross_receipts: int = 0
    returns_and_allowances: int = 0
    cost_of_goods_sold: int = 0
    other_income: int = 0
    expenses: int = Field(default=0, description="Total of Part II expense lines")
    home_office_deduction: int = 0
    is_sstb: bool = False

    @property
    def gross_income(self) -> int:
        return self.gross_receipts - self.returns_and_allowances - self.cost_of_goods_sold + self.other_income

    @property
    def net_profit(self) -> int:
        return self.gross_income - self.expenses - self.home_office_deduction


class ScheduleEProperty(BaseModel):
    id: str
    address: str = ""
    property_type: str = "single-family"
    fair_rental_days: int = 365
    personal_use_days: int = 0
    rents_received: int = 0
    royalties_received: int = 0

    advertising: int = 0
    auto: int = 0
    cleaning: int = 0
    commissions: int = 0
    insurance: int = 0
    legal: int = 0
    management: int = 0
    mortgage_interest: int = 0
    other_interest: int = 0
    repairs: int = 0
    supplies: int = 0
    taxes: int = 0
    utilities: int = 0
    depreciation: int = 0
    other: int = 0

    @property
    def income(self) -> int:
        return self.rents_received + self.royalties_received

    @property
    def total_expenses(self) -> int:
        return (
            self.advertising + self.auto + self.cleaning + self.commissions
            + self.insurance + self.legal + self.management
            + self.mortgage_interest + self.other_interest + self.repairs
            + self.supplies + self.taxes + self.utilities
            + self.depreciation + self.other
        )


class ISOExercise(BaseModel):
    """Incentive stock option exercise; the bargain element is an AMT adjustment."""
    id: str
    grant_name: str = ""
    shares_exercised: int = Field(default=0, ge=0)
    exercise_price: int = Field(default=0, ge=0, description="Per share")
    fmv_at_exercise: int = Field(default=0, ge=0, description="Per share")

    @property
    def spread(self) -> int:
        return max(0, self.fmv_at_exercise - self.exercise_price) * self.shares_exercised
