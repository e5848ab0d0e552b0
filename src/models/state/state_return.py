"""Per-state filing configuration attached to a return."""

from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class StateCode(str, Enum):
    """USPS two-letter codes for the 50 states and DC."""
    AL = "AL"
    AK = "AK"
    AZ = "AZ"
    AR = "AR"
    CA = "CA"
    CO = "CO"
    CT = "CT"
    DE = "DE"
    DC = "DC"
    FL = "FL"
    GA = "GA"
    HI = "HI"
    ID = "ID"
    IL = "IL"
    IN = "IN"
    IA = "IA"
    KS = "KS"
    KY = "KY"
    LA = "LA"
    ME = "ME"
    MD = "MD"
    MA = "MA"
    MI = "MI"
    MN = "MN"
    MS = "MS"
    MO = "MO"
    MT = "MT"
    NE = "NE"
    NV = "NV"
    NH = "NH"
    NJ = "NJ"
    NM = "NM"
    NY = "NY"
    NC = "NC"
    ND = "ND"
    OH = "OH"
    OK = "OK"
    OR = "OR"
    PA = "PA"
    RI = "RI"
    SC = "SC"
    SD = "SD"
    TN = "TN"
    TX = "TX"
    UT = "UT"
    VT = "VT"
    VA = "VA"
    WA = "WA"
    WV = "WV"
    WI = "WI"
    WY = "WY"

    @classmethod
    def coerce(cls, value) -> "StateCode":
        if isinstance(value, StateCode):
            return value
        return cls(str(value).strip().upper())


class ResidencyType(str, Enum):
    FULL_YEAR = "full-year"
    PART_YEAR = "part-year"
    NONRESIDENT = "nonresident"


class StateReturnConfig(BaseModel):
    """
    Which state return to prepare and how the filer was resident there.

    Move dates only matter for part-year residents; dates outside the tax
    year are clamped by the apportionment calculation.
    """
    state_code: StateCode
    residency_type: ResidencyType = ResidencyType.FULL_YEAR
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    rent_paid: bool = Field(default=False, description="Paid rent on a principal residence in the state")
    county: Optional[str] = Field(default=None, description="County or city of residence for a local income tax")

    @field_validator('state_code', mode='before')
    def normalize_state_code(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('residency_type', mode='before')
    def normalize_residency(cls, v):
        if isinstance(v, str):
            return v.strip().lower().replace('_', '-')
        return v

    @field_validator('move_in_date', 'move_out_date', mode='before')
    def empty_date_is_none(cls, v):
        if v == "":
            return None
        return v
