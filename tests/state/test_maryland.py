"""Tests for Maryland Form 502 and the county income tax."""

import logging

from calculator.decimal_math import cents
from calculator.state.configs.state_2025.md import county_rate
from models.deductions import DeductionMethod, Deductions, ItemizedDeductions
from models.state import StateReturnConfig

from factories import compute_state, make_return


def md_return(wages=50000, county=None, **kwargs):
    return make_return(wages=wages, state_returns=[StateReturnConfig(state_code="MD", county=county)], **kwargs)


class TestCountyRate:

    def test_names_normalized(self):
        assert county_rate("Montgomery County") == 0.032
        assert county_rate(" worcester ") == 0.0225
        assert county_rate("Baltimore County") == 0.032
        assert county_rate("Prince George's") == 0.032

    def test_missing_county_uses_baltimore_city(self):
        assert county_rate(None) == county_rate("Baltimore City") == 0.032

    def test_unknown_county_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="calculator.state.configs.state_2025.md"):
            assert county_rate("Atlantis") == 0.032
        assert "Atlantis" in caplog.records[-1].getMessage()


class TestMaryland:

    def test_local_tax_added_to_state_tax(self, registry, settings):
        result = compute_state(md_return(county="Worcester"), "MD", registry, settings)

        assert result.state_taxable_income == cents(43450)
        assert result.bracket_tax == cents(2011.38)
        # 2.25% of 43,450
        assert result.additional_taxes == {"localTax": cents(977.63)}
        assert result.state_tax == cents(2989.01)
        assert result.detail["localTaxRate"] == 0.0225
        assert result.values["form502.localTax"].inputs == ("form502.taxableIncome",)

    def test_exemption_halved_over_100k(self, registry, settings):
        result = compute_state(md_return(wages=110000), "MD", registry, settings)
        assert result.exemptions == cents(1600)

    def test_exemption_gone_over_150k(self, registry, settings):
        result = compute_state(md_return(wages=160000), "MD", registry, settings)
        assert result.exemptions == 0

    def test_itemized_excludes_income_taxes(self, registry, settings):
        itemized = ItemizedDeductions(
            state_local_income_taxes=cents(8000), real_estate_taxes=cents(5000), mortgage_interest=cents(10000),
        )
        model = md_return(wages=100000, deductions=Deductions(method=DeductionMethod.ITEMIZED, itemized=itemized))
        result = compute_state(model, "MD", registry, settings)

        assert result.detail["itemizedDeduction"] == cents(15000)
        assert result.deduction == cents(15000)
        assert result.deduction_method == "itemized"
