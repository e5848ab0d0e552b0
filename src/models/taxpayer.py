from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class FilingStatus(str, Enum):
    """IRS filing status options"""
    SINGLE = "single"
    MARRIED_JOINT = "mfj"
    MARRIED_SEPARATE = "mfs"
    HEAD_OF_HOUSEHOLD = "hoh"
    QUALIFYING_WIDOW = "qw"

    @property
    def is_joint(self) -> bool:
        return self in (FilingStatus.MARRIED_JOINT, FilingStatus.QUALIFYING_WIDOW)


# Long-form spellings accepted on input
_FILING_STATUS_ALIASES = {
    "married_joint": "mfj",
    "married_filing_jointly": "mfj",
    "married_separate": "mfs",
    "married_filing_separately": "mfs",
    "head_of_household": "hoh",
    "qualifying_widow": "qw",
    "qualifying_surviving_spouse": "qw",
}


def normalize_filing_status(value):
    if isinstance(value, str):
        key = value.strip().lower().replace(' ', '_').replace('-', '_')
        return _FILING_STATUS_ALIASES.get(key, key)
    return value


def coerce_filing_status(value) -> "FilingStatus":
    if isinstance(value, FilingStatus):
        return value
    return FilingStatus(normalize_filing_status(value))


def _digits_only(value: Optional[str]) -> str:
    if value is None:
        return ""
    return "".join(ch for ch in str(value) if ch.isdigit())


class Address(BaseModel):
    """Mailing address. State is a two-letter USPS code."""
    street: str = ""
    apartment: Optional[str] = None
    city: str = ""
    state: str = ""
    zip: str = ""

    @field_validator('state', mode='before')
    def normalize_state(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class Taxpayer(BaseModel):
    """Primary filer or spouse."""
    first_name: str = ""
    middle_initial: Optional[str] = None
    last_name: str = ""
    ssn: str = Field(default="", description="9 digits, dashes stripped")
    date_of_birth: Optional[date] = None
    is_blind: bool = False
    address: Address = Field(default_factory=Address)

    @field_validator('ssn', mode='before')
    def strip_ssn(cls, v):
        return _digits_only(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_valid_ssn(self) -> bool:
        return len(self.ssn) == 9

    def age_at_year_end(self, tax_year: int) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return tax_year - self.date_of_birth.year


class Dependent(BaseModel):
    """
    Dependent claimed on the return.

    Relationship is kept as free text ("son", "daughter", "parent", ...);
    the credit computations decide which relationships qualify.
    """
    first_name: str = ""
    last_name: str = ""
    ssn: str = ""
    relationship: str = ""
    months_lived: int = Field(default=12, ge=0, le=12, description="Months lived with taxpayer in tax year")
    date_of_birth: Optional[date] = None
    is_student: bool = False
    is_permanently_disabled: bool = False

    @field_validator('ssn', mode='before')
    def strip_ssn(cls, v):
        return _digits_only(v)

    @field_validator('relationship', mode='before')
    def normalize_relationship(cls, v):
        if isinstance(v, str):
            return v.strip().lower().replace('_', ' ')
        return v

    @field_validator('date_of_birth', mode='before')
    def empty_date_is_none(cls, v):
        if v == "":
            return None
        return v

    @property
    def has_valid_ssn(self) -> bool:
        return len(self.ssn) == 9

    def age_at_year_end(self, tax_year: int) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return tax_year - self.date_of_birth.year
