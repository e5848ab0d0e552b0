"""Tests for Massachusetts Form 1."""

from calculator.decimal_math import cents
from models.deductions import Adjustments
from models.income import Form1099B

from factories import compute_state, make_return


class TestMassachusetts:

    def test_short_term_gains_at_higher_rate(self, registry, settings):
        sale = Form1099B(id="b-1", proceeds=cents(20000), cost_basis=cents(10000), long_term=False)
        result = compute_state(make_return(wages=100000, state="MA", form1099_bs=[sale]), "MA", registry, settings)

        assert result.state_agi == cents(110000)
        assert result.exemptions == cents(4400)
        assert result.detail["shortTermGains"] == cents(10000)
        # 95,600 x 5% + 10,000 x 8.5%
        assert result.state_tax == cents(5630)

    def test_surtax_over_threshold(self, registry, settings):
        result = compute_state(make_return(wages=1200000, state="MA"), "MA", registry, settings)

        assert result.state_taxable_income == cents(1195600)
        assert result.additional_taxes == {"surtax": cents(4498)}
        assert result.tax_after_credits == cents(59780) + cents(4498)

    def test_no_surtax_below_threshold(self, registry, settings):
        result = compute_state(make_return(wages=90000, state="MA"), "MA", registry, settings)
        assert result.additional_taxes == {}

    def test_hsa_deduction_added_back(self, registry, settings):
        model = make_return(wages=100000, state="MA", adjustments=Adjustments(hsa_deduction=cents(3000)))
        result = compute_state(model, "MA", registry, settings)

        assert result.additions == {"hsaAddBack": cents(3000)}
        assert result.state_agi == cents(100000)
        assert result.values["form1.hsaAddBack"].inputs == ("adjustments.hsa",)
