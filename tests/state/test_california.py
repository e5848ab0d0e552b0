"""Tests for California Form 540."""

from datetime import date

from calculator.decimal_math import cents
from calculator.state import scale_full_year_tax
from models.income import Form1099INT
from models.state import StateReturnConfig
from models.taxpayer import FilingStatus

from factories import compute_state, make_return, make_w2


def ca_return(wages=75000, **kwargs):
    kwargs.setdefault("state", "CA")
    return make_return(wages=wages, withheld=9000, state_withheld=3000, **kwargs)


class TestForm540:

    def test_single_full_year(self, registry, settings):
        result = compute_state(ca_return(), "CA", registry, settings)

        assert result.form_label == "CA Form 540"
        assert result.state_agi == cents(75000)
        assert result.deduction == cents(5706)
        assert result.state_taxable_income == cents(69294)
        assert result.state_tax == cents(2927.57)
        assert result.credits == {"exemptionCredits": cents(153)}
        assert result.tax_after_credits == cents(2774.57)
        assert result.state_withholding == cents(3000)
        assert result.overpaid == cents(225.43)
        assert result.amount_owed == 0

    def test_node_names(self, registry, settings):
        values = compute_state(ca_return(), "CA", registry, settings).values

        for node in ("form540.caAGI", "form540.caDeduction", "form540.caTaxableIncome",
                     "form540.caTax", "form540.stateWithholding", "form540.taxAfterCredits"):
            assert node in values
        assert values["form540.caTax"].amount == cents(2927.57)
        assert values["form540.startingIncome"].inputs == ("form1040.line11",)
        assert not any(node.startswith("form1040.") for node in values)

    def test_part_year_scales_full_year_tax(self, registry, settings):
        config = StateReturnConfig(state_code="CA", residency_type="part-year", move_in_date=date(2025, 7, 1))
        result = compute_state(ca_return(state_returns=[config]), "CA", registry, settings)

        assert result.apportionment_ratio == 184 / 365
        # 2,927.57 x 184/365, then the full $153 exemption credit
        assert result.bracket_tax == cents(2927.57)
        assert result.state_tax == scale_full_year_tax(cents(2927.57), 184 / 365) == cents(1475.82)
        assert result.credits == {"exemptionCredits": cents(153)}
        assert result.tax_after_credits == cents(1322.82)
        assert result.overpaid == cents(1677.18)
        assert result.values["form540.apportionedTax"].inputs == ("form540.caTax",)
        assert result.values["form540.taxAfterCredits"].inputs == (
            "form540.apportionedTax", "form540.exemptionCredits",
        )

    def test_additional_taxes_fold_into_state_tax(self, registry, settings):
        result = compute_state(ca_return(wages=1505706), "CA", registry, settings)

        assert result.state_tax == result.bracket_tax + cents(5000)
        data = result.to_dict()
        assert data["stateTax"] == result.state_tax
        assert data["stateCredits"] == result.total_credits

    def test_us_interest_subtracted(self, registry, settings):
        treasury = Form1099INT(id="t-1", payer_name="Treasury Direct", box1=cents(1000), box3=cents(1000))
        result = compute_state(ca_return(form1099_ints=[treasury]), "CA", registry, settings)

        assert result.subtractions == {"usGovInterest": cents(1000)}
        assert result.state_agi == cents(75000)
        assert "scheduleCA.usGovInterest" in result.values
        assert "scheduleCA.subtractions" in result.values

    def test_mental_health_tax(self, registry, settings):
        result = compute_state(ca_return(wages=1505706), "CA", registry, settings)

        assert result.state_taxable_income == cents(1500000)
        assert result.additional_taxes == {"mentalHealthTax": cents(5000)}
        assert result.values["form540.mentalHealthTax"].amount == cents(5000)

    def test_no_mental_health_tax_below_threshold(self, registry, settings):
        result = compute_state(ca_return(), "CA", registry, settings)
        assert result.additional_taxes == {}

    def test_exemption_credit_phase_out(self, registry, settings):
        # $7,797 over the threshold is four $2,500 steps: 24% reduction
        result = compute_state(ca_return(wages=260000), "CA", registry, settings)

        assert result.credits["exemptionCredits"] == cents(116.28)
        assert result.detail["exemptionCreditReduction"] == cents(36.72)

    def test_joint_exemption_credits(self, registry, settings):
        model = ca_return(wages=120000, filing_status=FilingStatus.MARRIED_JOINT)
        result = compute_state(model, "CA", registry, settings)

        assert result.credits["exemptionCredits"] == cents(306)

    def test_renters_credit(self, registry, settings):
        config = StateReturnConfig(state_code="CA", rent_paid=True)
        result = compute_state(ca_return(wages=40000, state_returns=[config]), "CA", registry, settings)

        assert result.credits["rentersCredit"] == cents(60)

    def test_renters_credit_income_limit(self, registry, settings):
        config = StateReturnConfig(state_code="CA", rent_paid=True)
        result = compute_state(ca_return(wages=60000, state_returns=[config]), "CA", registry, settings)

        assert "rentersCredit" not in result.credits

    def test_withholding_includes_w2_without_state(self, registry, settings):
        model = make_return(
            w2s=[make_w2(40000, state="CA", state_withheld=1000), make_w2(20000, state_withheld=500, w2_id="w2-2"),
                 make_w2(10000, state="NV", state_withheld=300, w2_id="w2-3")],
            state_returns=[StateReturnConfig(state_code="CA")],
        )
        result = compute_state(model, "CA", registry, settings)

        assert result.state_withholding == cents(1500)
        assert result.values["form540.stateWithholding"].inputs == ("w2:w2-1:box17", "w2:w2-2:box17")
