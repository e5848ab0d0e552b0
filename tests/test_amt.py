"""Tests for the alternative minimum tax (Form 6251)."""

from calculator.amt import compute_amt, flat_amt
from calculator.decimal_math import cents
from calculator.engine import compute_form1040
from calculator.tax_year_config import TaxYearConfig
from models.income import Form1099INT, ISOExercise
from models.taxpayer import FilingStatus

from factories import make_return

SINGLE = FilingStatus.SINGLE


def amt_for(config, taxable=0, regular=0, added_back=0, bonds=0, iso=0, qualified=0, gain=0, status=SINGLE):
    return compute_amt(cents(taxable), cents(regular), cents(added_back), cents(bonds), cents(iso),
                       cents(qualified), cents(gain), status, config)


class TestForm6251:

    def test_flat_rates(self, config_2025):
        assert flat_amt(cents(100000), SINGLE, config_2025) == cents(26000)
        # 26% of 239,100 plus 28% of 212,800
        assert flat_amt(cents(451900), SINGLE, config_2025) == cents(121750)
        assert flat_amt(0, SINGLE, config_2025) == 0

    def test_iso_spread_creates_amt(self, config_2025):
        result = amt_for(config_2025, taxable=300000, regular=80000, added_back=40000, iso=200000)

        assert result.line4_amti == cents(540000)
        assert result.line5_exemption == cents(88100)
        assert result.line6_amti_after_exemption == cents(451900)
        assert result.tentative_minimum_tax == cents(121750)
        assert result.amt == cents(41750)

    def test_exemption_phase_out(self, config_2025):
        result = amt_for(config_2025, taxable=700000)

        # 25% of the 73,650 over 626,350
        assert result.phase_out_reduction == cents(18412.50)
        assert result.line5_exemption == cents(69687.50)

    def test_exemption_fully_phased_out(self, config_2025):
        result = amt_for(config_2025, taxable=1000000)
        assert result.line5_exemption == 0
        assert result.line6_amti_after_exemption == cents(1000000)

    def test_2026_phase_out_rate(self):
        result = amt_for(TaxYearConfig.for_2026(), taxable=600000)

        # 50% of the 100,000 over 500,000
        assert result.line5_exemption == cents(40100)

    def test_qualified_dividends_keep_capital_gain_rate(self, config_2025):
        result = amt_for(config_2025, taxable=288100, qualified=100000)

        # 26% of 100,000 ordinary plus 15% of 100,000 dividends
        assert result.line6_amti_after_exemption == cents(200000)
        assert result.preferential_income == cents(100000)
        assert result.tentative_minimum_tax == cents(41000)
        assert result.amt == cents(41000)

    def test_no_amt_when_regular_tax_higher(self, config_2025):
        result = amt_for(config_2025, taxable=60000, regular=8114, added_back=15000)
        assert result.tentative_minimum_tax == 0
        assert result.amt == 0


class TestEngineAMT:

    def test_iso_exercise_flows_to_line17(self):
        iso = ISOExercise(id="iso-1", shares_exercised=1000, exercise_price=cents(50), fmv_at_exercise=cents(150))
        result = compute_form1040(make_return(wages=200000, iso_exercises=[iso]))

        assert result.line16 == cents(37247)
        # 185,000 taxable + 15,000 standard deduction + 100,000 spread
        assert result.amt.line4_amti == cents(300000)
        assert result.amt.tentative_minimum_tax == cents(55094)
        assert result.line17 == cents(17847)
        assert result.line18 == cents(55094)
        assert result.values["form1040.line17"].inputs == ("form6251.amt",)
        assert result.values["form6251.amti"].inputs == ("form1040.line15", "form1040.line12")

    def test_private_activity_bond_interest(self):
        bonds = Form1099INT(id="int-1", payer_name="Muni Fund", box8=cents(50000), box9=cents(50000))
        result = compute_form1040(make_return(wages=200000, form1099_ints=[bonds]))

        assert result.line2b == 0
        assert result.amt.line2g_private_activity_bonds == cents(50000)
        assert result.line17 == cents(4847)

    def test_ordinary_return_has_no_amt_nodes(self):
        result = compute_form1040(make_return(wages=75000))

        assert result.line17 == 0
        assert result.values["form1040.line17"].amount == 0
        assert "form6251.amt" not in result.values
