"""Tests for Ohio IT 1040."""

from datetime import date

from calculator.decimal_math import cents
from models.state import StateReturnConfig
from models.taxpayer import FilingStatus

from factories import compute_state, make_return


class TestOhio:

    def test_income_in_zero_bracket(self, registry, settings):
        result = compute_state(make_return(wages=20000, state="OH"), "OH", registry, settings)

        assert result.exemptions == cents(2400)
        assert result.state_taxable_income == cents(17600)
        assert result.state_tax == 0
        assert result.tax_after_credits == 0

    def test_joint_filing_credit(self, registry, settings):
        model = make_return(wages=60000, state="OH", filing_status=FilingStatus.MARRIED_JOINT)
        result = compute_state(model, "OH", registry, settings)

        assert result.exemptions == cents(4300)
        assert result.state_taxable_income == cents(55700)
        # 29,650 x 2.75% = 815.375
        assert result.state_tax == cents(815.38)
        assert result.credits == {"jointFilingCredit": cents(81.54)}
        assert result.tax_after_credits == cents(733.84)

    def test_exemption_phases_out_with_income(self, registry, settings):
        result = compute_state(make_return(wages=800000, state="OH"), "OH", registry, settings)
        assert result.exemptions == 0

    def test_part_year_scales_after_credits(self, registry, settings):
        config = StateReturnConfig(state_code="OH", residency_type="part-year", move_in_date=date(2025, 7, 1))
        model = make_return(wages=60000, state="OH", filing_status=FilingStatus.MARRIED_JOINT, state_returns=[config])
        result = compute_state(model, "OH", registry, settings)

        assert result.state_tax == cents(815.38)
        assert result.credits == {"jointFilingCredit": cents(81.54)}
        # 733.84 x 184/365
        assert result.tax_after_credits == cents(369.94)
        assert "it1040.apportionedTax" not in result.values
