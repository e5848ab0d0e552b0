"""Tests for New York IT-201 deductions."""

from calculator.decimal_math import cents
from models.deductions import DeductionMethod, Deductions, ItemizedDeductions

from factories import compute_state, make_return


def ny_return(wages=200000, method=DeductionMethod.ITEMIZED, **itemized):
    amounts = {key: cents(value) for key, value in itemized.items()}
    return make_return(
        wages=wages,
        state="NY",
        deductions=Deductions(method=method, itemized=ItemizedDeductions(**amounts)),
    )


class TestNewYorkItemized:

    def test_salt_over_federal_cap_added_back(self, registry, settings):
        model = ny_return(state_local_income_taxes=30000, real_estate_taxes=20000, mortgage_interest=10000)
        result = compute_state(model, "NY", registry, settings)

        # federal line 17 is $40,000 capped SALT plus $10,000 interest; $10,000 SALT added back
        assert result.detail["itemizedDeduction"] == cents(60000)
        assert result.deduction == cents(60000)
        assert result.deduction_method == "itemized"
        assert result.state_taxable_income == cents(140000)

    def test_salt_under_cap_matches_federal(self, registry, settings):
        model = ny_return(state_local_income_taxes=9000, real_estate_taxes=6000)
        result = compute_state(model, "NY", registry, settings)

        assert result.deduction == cents(15000)
        assert result.deduction_method == "itemized"

    def test_standard_wins_when_larger(self, registry, settings):
        result = compute_state(ny_return(wages=50000, charitable_cash=1000), "NY", registry, settings)

        assert result.detail["itemizedDeduction"] == cents(1000)
        assert result.deduction == cents(8000)
        assert result.deduction_method == "standard"

    def test_federal_standard_filer_takes_ny_standard(self, registry, settings):
        model = ny_return(method=DeductionMethod.STANDARD, state_local_income_taxes=30000)
        result = compute_state(model, "NY", registry, settings)

        assert result.detail["itemizedDeduction"] == 0
        assert result.deduction == cents(8000)
