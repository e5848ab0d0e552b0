"""Tests for New Jersey NJ-1040."""

from calculator.decimal_math import cents
from models.income import Form1099B, SSA1099

from factories import compute_state, make_return


class TestNewJersey:

    def test_gross_income_brackets(self, registry, settings):
        result = compute_state(make_return(wages=50000, state="NJ"), "NJ", registry, settings)

        assert result.detail["income"] == {"wages": cents(50000)}
        assert result.exemptions == cents(1000)
        assert result.state_taxable_income == cents(49000)
        assert result.state_tax == cents(1214.75)

    def test_capital_loss_does_not_reduce_wages(self, registry, settings):
        sale = Form1099B(id="b-1", proceeds=cents(5000), cost_basis=cents(10000), long_term=True)
        model = make_return(wages=50000, state="NJ", form1099_bs=[sale])
        result = compute_state(model, "NJ", registry, settings)

        assert result.state_agi == cents(50000)
        assert result.state_tax == cents(1214.75)

    def test_social_security_excluded(self, registry, settings):
        model = make_return(wages=50000, state="NJ", ssa1099s=[SSA1099(id="ssa-1", box5=cents(24000))])
        result = compute_state(model, "NJ", registry, settings)

        assert result.state_agi == cents(50000)
        assert result.subtractions == {}

    def test_at_or_below_filing_threshold(self, registry, settings):
        result = compute_state(make_return(wages=9000, state="NJ", state_withheld=200), "NJ", registry, settings)

        assert result.state_tax == 0
        assert result.detail["belowFilingThreshold"] is True
        assert result.tax_after_credits == 0
        assert result.state_withholding == cents(200)
