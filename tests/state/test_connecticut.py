"""Tests for Connecticut CT-1040."""

from datetime import date

from calculator.decimal_math import cents
from calculator.state.configs.state_2025.ct import TABLE_C, TABLE_D, personal_exemption, phase_in_amount
from models.state import StateReturnConfig
from models.taxpayer import Dependent, FilingStatus

from factories import compute_state, make_return

SINGLE = FilingStatus.SINGLE


class TestConnecticutTables:

    def test_personal_exemption_steps_by_thousand(self):
        assert personal_exemption(SINGLE, cents(30000)) == cents(15000)
        # $10,000.01 over the start counts as eleven steps
        assert personal_exemption(SINGLE, cents(40000.01)) == cents(4000)
        assert personal_exemption(SINGLE, cents(44000)) == 0
        assert personal_exemption(FilingStatus.MARRIED_SEPARATE, cents(20000)) == cents(12000)

    def test_phase_in_rounds_to_whole_dollars(self):
        assert phase_in_amount(TABLE_C, SINGLE, cents(56500)) == 0
        # 200 x 23,500 / 48,500 = 96.91
        assert phase_in_amount(TABLE_C, SINGLE, cents(80000)) == cents(97)
        assert phase_in_amount(TABLE_C, SINGLE, cents(105000)) == cents(200)
        assert phase_in_amount(TABLE_D, FilingStatus.MARRIED_JOINT, cents(400000)) == cents(500)


class TestConnecticut:

    def test_partial_exemption(self, registry, settings):
        result = compute_state(make_return(wages=40000, state="CT"), "CT", registry, settings)

        assert result.deduction == 0
        assert result.exemptions == cents(5000)
        assert result.state_taxable_income == cents(35000)
        assert result.tax_after_credits == cents(1325)

    def test_phase_out_add_back(self, registry, settings):
        result = compute_state(make_return(wages=80000, state="CT"), "CT", registry, settings)

        assert result.bracket_tax == cents(3650)
        assert result.additional_taxes == {"phaseOutAddBack": cents(97)}
        assert result.state_tax == cents(3747)
        assert result.values["ct1040.phaseOutAddBack"].inputs == ("ct1040.stateAGI",)

    def test_benefit_recapture(self, registry, settings):
        result = compute_state(make_return(wages=120000, state="CT"), "CT", registry, settings)

        # 250 x 15,000 / 45,000 = 83.33
        assert result.additional_taxes == {"phaseOutAddBack": cents(200), "benefitRecapture": cents(83)}
        assert result.tax_after_credits == cents(6233)

    def _family(self, **kwargs):
        child = Dependent(first_name="Kid", relationship="son", ssn="111-22-3333", date_of_birth=date(2015, 5, 1))
        return make_return(
            wages=20000, state="CT", filing_status=FilingStatus.HEAD_OF_HOUSEHOLD, dependents=[child], **kwargs
        )

    def test_eitc_with_child_bonus(self, registry, settings):
        result = compute_state(self._family(), "CT", registry, settings)

        # 40% of the 4,328 federal credit plus $250
        assert result.refundable_credits == {"stateEITC": cents(1981.20)}
        assert result.tax_after_credits == cents(20)
        assert result.overpaid == cents(1961.20)

    def test_part_year_gets_no_eitc(self, registry, settings):
        config = StateReturnConfig(state_code="CT", residency_type="part-year", move_in_date=date(2025, 7, 1))
        result = compute_state(self._family(state_returns=[config]), "CT", registry, settings)

        assert result.refundable_credits == {}
