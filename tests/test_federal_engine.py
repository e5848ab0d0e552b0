"""Tests for the Form 1040 engine."""

from datetime import date

import pytest

from calculator.brackets import compute_bracket_tax
from calculator.decimal_math import cents
from calculator.engine import FederalTaxEngine, compute_form1040
from calculator.tax_year_config import TaxYearConfig
from models.deductions import DeductionMethod, Deductions, ItemizedDeductions
from models.income import EntityType, Form1099B, Form1099DIV, Form1099INT, ScheduleCBusiness, ScheduleK1
from models.taxpayer import Dependent, FilingStatus

from factories import make_return, make_w2


class TestOrdinaryIncomeTax:

    def test_single_75k_wages(self):
        """$75,000 wages: $15,000 standard deduction, $60,000 taxable."""
        result = compute_form1040(make_return(wages=75000))

        assert result.line1a == cents(75000)
        assert result.line11 == cents(75000)
        assert result.line12 == cents(15000)
        assert result.line15 == cents(60000)
        # 10% of 11,925 + 12% of 36,550 + 22% of 11,525
        assert result.line16 == cents(8114)

    def test_mfj_crosses_bracket(self):
        result = compute_form1040(make_return(wages=120000, filing_status=FilingStatus.MARRIED_JOINT))

        assert result.line12 == cents(30000)
        assert result.line15 == cents(90000)
        # 10% of 23,850 + 12% of 66,150
        assert result.line16 == cents(10323)

    def test_2026_uses_2026_constants(self):
        result = compute_form1040(make_return(wages=75000, tax_year=2026), TaxYearConfig.for_2026())

        assert result.tax_year == 2026
        assert result.line12 == cents(16100)
        # 10% of 12,400 + 12% of 38,000 + 22% of 8,500
        assert result.line16 == cents(7670)

    def test_bracket_tax_rounds_once(self, config_2025):
        brackets = config_2025.brackets_for(FilingStatus.SINGLE)
        assert compute_bracket_tax(cents(60000), brackets) == cents(8114)
        assert compute_bracket_tax(0, brackets) == 0
        assert compute_bracket_tax(-500, brackets) == 0

    def test_no_income(self):
        result = compute_form1040(make_return())

        assert result.line9 == 0
        assert result.line15 == 0
        assert result.line24 == 0
        assert result.line34 == 0
        assert result.line37 == 0


class TestPayments:

    def test_refund_when_withholding_exceeds_tax(self):
        result = compute_form1040(make_return(wages=75000, withheld=9000))

        assert result.line25 == cents(9000)
        assert result.line34 == cents(9000) - cents(8114)
        assert result.line37 == 0

    def test_amount_owed_without_withholding(self):
        result = compute_form1040(make_return(wages=75000))

        assert result.line34 == 0
        assert result.line37 == result.line24

    def test_refund_and_owed_never_both_positive(self):
        for withheld in (0, 5000, 8114, 12000):
            result = compute_form1040(make_return(wages=75000, withheld=withheld))
            assert result.line34 * result.line37 == 0

    def test_1099_withholding_counts(self):
        model = make_return(
            wages=50000,
            form1099_ints=[Form1099INT(id="int-1", payer_name="Bank", box1=cents(500), box4=cents(50))],
        )
        result = compute_form1040(model)
        assert result.line25 == cents(50)

    def test_broker_and_k1_withholding_traced(self):
        sale = Form1099B(id="b-1", broker_name="Broker", proceeds=cents(5000), cost_basis=cents(4000),
                         long_term=True, federal_tax_withheld=cents(120))
        k1 = ScheduleK1(id="k-1", entity_type=EntityType.PARTNERSHIP, ordinary_income=cents(2000),
                        federal_tax_withheld=cents(80))
        model = make_return(wages=50000, withheld=4000, form1099_bs=[sale], schedule_k1s=[k1])
        result = compute_form1040(model)

        assert result.line25 == cents(4200)
        line25 = result.values["form1040.line25"]
        assert line25.inputs == ("w2:w2-1:box2", "1099b:b-1:box4", "k1:k-1:federalTaxWithheld")
        assert sum(result.values[i].amount for i in line25.inputs) == result.line25
        assert result.values["k1:k-1:federalTaxWithheld"].is_document


class TestDeductions:

    def test_itemized_used_when_larger(self):
        itemized = ItemizedDeductions(
            state_local_income_taxes=cents(8000),
            mortgage_interest=cents(12000),
            mortgage_principal=cents(400000),
            charitable_cash=cents(2000),
        )
        model = make_return(
            wages=150000,
            deductions=Deductions(method=DeductionMethod.ITEMIZED, itemized=itemized),
        )
        result = compute_form1040(model)

        assert result.deduction_method == DeductionMethod.ITEMIZED
        assert result.line12 == cents(22000)

    def test_standard_when_itemized_smaller(self):
        itemized = ItemizedDeductions(charitable_cash=cents(1000))
        model = make_return(wages=60000, deductions=Deductions(itemized=itemized))
        result = compute_form1040(model)

        assert result.deduction_method == DeductionMethod.STANDARD
        assert result.line12 == cents(15000)


class TestInvestmentIncome:

    def test_interest_and_dividends_flow_to_lines(self):
        model = make_return(
            wages=60000,
            form1099_ints=[Form1099INT(id="int-1", box1=cents(1200))],
            form1099_divs=[Form1099DIV(id="div-1", box1a=cents(3000), box1b=cents(2000))],
        )
        result = compute_form1040(model)

        assert result.line2b == cents(1200)
        assert result.line3a == cents(2000)
        assert result.line3b == cents(3000)
        assert result.line11 == cents(64200)

    def test_qualified_dividends_taxed_at_preferential_rate(self):
        ordinary = compute_form1040(make_return(
            wages=60000, form1099_ints=[Form1099INT(id="int-1", box1=cents(5000))],
        ))
        qualified = compute_form1040(make_return(
            wages=60000, form1099_divs=[Form1099DIV(id="div-1", box1a=cents(5000), box1b=cents(5000))],
        ))
        assert ordinary.line15 == qualified.line15
        assert qualified.line16 < ordinary.line16


class TestSelfEmployment:

    def test_se_tax_respects_wage_base(self):
        """W-2 Social Security wages use up most of the $176,100 wage base."""
        model = make_return(
            wages=170000,
            schedule_c_businesses=[ScheduleCBusiness(id="biz-1", business_name="Consulting",
                                                     gross_receipts=cents(50000))],
        )
        result = compute_form1040(model)
        se = result.schedule_se

        assert se.line3 == cents(46175)
        assert se.line4a == cents(6100)
        assert se.line4b == cents(756.40)
        assert se.line5 == 133908
        assert se.line6 == se.line4b + se.line5
        assert result.schedule_1.line15 == se.deductible_half

    def test_small_profit_has_no_se_tax(self):
        model = make_return(
            schedule_c_businesses=[ScheduleCBusiness(id="biz-1", gross_receipts=cents(400))],
        )
        result = compute_form1040(model)
        assert result.schedule_se.total_se_tax == 0


class TestCredits:

    def _child(self, born: int = 2015, ssn: str = "111-22-3333") -> Dependent:
        return Dependent(first_name="Kid", relationship="son", ssn=ssn, date_of_birth=date(born, 5, 1))

    def test_child_tax_credit_reduces_tax(self):
        model = make_return(wages=75000, dependents=[self._child()])
        result = compute_form1040(model)

        assert result.child_tax_credit.num_qualifying_children == 1
        assert result.line19 == cents(2200)
        assert result.line22 == cents(8114) - cents(2200)

    def test_earned_income_credit_plateau(self):
        model = make_return(
            wages=20000,
            filing_status=FilingStatus.HEAD_OF_HOUSEHOLD,
            dependents=[self._child()],
        )
        result = compute_form1040(model)

        assert result.earned_income_credit.eligible
        assert result.line27 == cents(4328)
        assert result.values["eic.creditAmount"].amount == cents(4328)

    def test_mfs_gets_no_eic(self):
        model = make_return(wages=15000, filing_status=FilingStatus.MARRIED_SEPARATE,
                            dependents=[self._child()])
        result = compute_form1040(model)
        assert result.line27 == 0
        assert result.earned_income_credit.ineligible_reason == "mfs"


def test_engine_defaults_to_2025():
    engine = FederalTaxEngine()
    assert engine.config.tax_year == 2025


def test_multiple_w2s_sum(config_2025):
    model = make_return(w2s=[make_w2(40000, w2_id="a"), make_w2(35000, w2_id="b")])
    result = FederalTaxEngine(config_2025).calculate(model)
    assert result.line1a == cents(75000)
    assert result.values["w2:a:box1"].amount == cents(40000)


@pytest.mark.parametrize("status", list(FilingStatus))
def test_taxable_income_never_negative(status):
    result = compute_form1040(make_return(wages=1000, filing_status=status))
    assert result.line15 == 0
    assert result.line16 == 0
