"""Tests for non-blocking data-shape findings."""

import pytest

from calculator.decimal_math import cents
from calculator.tax_calculator import compute_all
from calculator.validation import FederalValidator, Severity
from models.income import EntityType, Form1099B, Form1099DIV, ScheduleK1
from models.taxpayer import FilingStatus

from factories import make_return, make_w2


def codes(findings):
    return [f.code for f in findings]


@pytest.fixture
def validator(config_2025):
    return FederalValidator(config_2025)


class TestInputFindings:

    def test_clean_return_has_no_findings(self, validator):
        assert validator.validate(make_return(wages=75000, withheld=9000)) == []

    def test_ss_wages_over_wage_base(self, validator):
        model = make_return(w2s=[make_w2(200000, 40000)])
        findings = validator.validate(model)

        assert codes(findings) == ["W2_SS_WAGES_OVER_BASE"]
        assert findings[0].field == "w2s[0].box3"
        assert "$176,100.00" in findings[0].message

    def test_wages_at_wage_base_are_fine(self, validator):
        assert validator.validate(make_return(w2s=[make_w2(176100)])) == []

    def test_spouse_missing_on_joint_return(self, validator):
        model = make_return(wages=90000, filing_status=FilingStatus.MARRIED_JOINT, spouse=None)
        findings = validator.validate(model)

        assert codes(findings) == ["SPOUSE_MISSING_MFJ"]
        assert findings[0].severity == Severity.WARNING

    def test_qualified_dividends_exceed_ordinary(self, validator):
        div = Form1099DIV(id="div-1", payer_name="Index Fund", box1a=cents(100), box1b=cents(250))
        findings = validator.validate(make_return(form1099_divs=[div]))

        assert codes(findings) == ["QUALIFIED_DIVIDENDS_EXCEED_ORDINARY"]
        assert "Index Fund" in findings[0].message

    def test_unknown_holding_period(self, validator):
        sale = Form1099B(id="b-1", description="100 sh XYZ", proceeds=cents(5000), cost_basis=cents(4000))
        findings = validator.validate(make_return(form1099_bs=[sale]))

        assert codes(findings) == ["UNKNOWN_HOLDING_PERIOD"]
        assert findings[0].severity == Severity.INFO
        assert findings[0].field == "form1099_bs[0].long_term"

    def test_known_holding_period_is_fine(self, validator):
        sale = Form1099B(id="b-1", proceeds=cents(5000), cost_basis=cents(4000), long_term=True)
        assert validator.validate(make_return(form1099_bs=[sale])) == []

    def test_k1_qualified_exceeds_dividends(self, validator):
        k1 = ScheduleK1(
            id="k1-1", entity_type=EntityType.PARTNERSHIP,
            dividend_income=cents(100), qualified_dividends=cents(200),
        )
        assert codes(validator.validate(make_return(schedule_k1s=[k1]))) == ["K1_QUALIFIED_EXCEEDS_DIVIDENDS"]

    def test_defaults_config_from_return_year(self):
        model = make_return(w2s=[make_w2(200000)], tax_year=2026)
        assert codes(FederalValidator().validate(model)) == ["W2_SS_WAGES_OVER_BASE"]


class TestResultFindings:

    def test_capital_loss_carryover(self, registry, settings):
        sale = Form1099B(id="b-1", proceeds=cents(10000), cost_basis=cents(25000), long_term=False)
        result = compute_all(make_return(wages=60000, form1099_bs=[sale]), registry=registry, settings=settings)

        finding = next(f for f in result.findings if f.code == "CAPITAL_LOSS_CARRYOVER")
        assert finding.severity == Severity.INFO
        assert "$12,000.00" in finding.message
        assert "$0.00 long-term" in finding.message
        assert result.form1040.schedule_d.line21 == cents(-3000)

    def test_findings_serialize(self, validator):
        findings = validator.validate(make_return(w2s=[make_w2(200000)]))
        data = findings[0].to_dict()

        assert data["severity"] == "warning"
        assert data["code"] == "W2_SS_WAGES_OVER_BASE"
