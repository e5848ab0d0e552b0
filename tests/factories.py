"""Builders for test returns. Amounts are passed in dollars and stored in cents."""

from typing import List, Optional

from calculator.decimal_math import cents
from models.income import W2
from models.state import StateReturnConfig
from models.taxpayer import Address, FilingStatus, Taxpayer
from models.tax_return import TaxReturn


def make_taxpayer(first: str = "Alex", last: str = "Rivera", ssn: str = "123-45-6789", state: str = "CA") -> Taxpayer:
    return Taxpayer(
        first_name=first,
        last_name=last,
        ssn=ssn,
        address=Address(street="100 Main St", city="Springfield", state=state, zip="90001"),
    )


def make_w2(
    wages: float,
    withheld: float = 0,
    state: Optional[str] = None,
    state_wages: Optional[float] = None,
    state_withheld: float = 0,
    w2_id: str = "w2-1",
) -> W2:
    """W-2 where Social Security and Medicare wages equal box 1."""
    return W2(
        id=w2_id,
        employer_name="Acme Corp",
        box1=cents(wages),
        box2=cents(withheld),
        box3=cents(wages),
        box5=cents(wages),
        box15_state=state,
        box16_state_wages=cents(wages if state_wages is None else state_wages),
        box17_state_income_tax=cents(state_withheld),
    )


def make_return(
    wages: float = 0,
    filing_status: FilingStatus = FilingStatus.SINGLE,
    withheld: float = 0,
    state: Optional[str] = None,
    state_withheld: float = 0,
    tax_year: int = 2025,
    state_returns: Optional[List[StateReturnConfig]] = None,
    **kwargs,
) -> TaxReturn:
    """A complete return with one W-2 (when ``wages`` is set) and optional state returns."""
    w2s = [make_w2(wages, withheld, state=state, state_withheld=state_withheld)] if wages else []
    if state_returns is None and state:
        state_returns = [StateReturnConfig(state_code=state)]
    data = dict(
        tax_year=tax_year,
        filing_status=filing_status,
        taxpayer=make_taxpayer(state=state or "CA"),
        w2s=w2s,
        state_returns=state_returns or [],
    )
    if filing_status == FilingStatus.MARRIED_JOINT and "spouse" not in kwargs:
        data["spouse"] = make_taxpayer(first="Sam", ssn="987-65-4321")
    data.update(kwargs)
    return TaxReturn(**data)


def compute_state(model: TaxReturn, state_code: str, registry, settings):
    """Run the full computation and return one state's result."""
    from calculator.tax_calculator import compute_all

    return compute_all(model, registry=registry, settings=settings).state_result(state_code)
