"""Tests for Schedule K-1 aggregation and the passive rental loss limit."""

import pytest

from calculator.decimal_math import cents
from calculator.engine import compute_form1040
from calculator.k1 import compute_k1_aggregate, compute_k1_rental_pal, rental_loss_allowance
from calculator.validation import FederalValidator
from models.income import EntityType, ScheduleK1
from models.taxpayer import FilingStatus

from factories import make_return


def partnership_k1(k1_id: str = "k1-1", **boxes) -> ScheduleK1:
    return ScheduleK1(id=k1_id, entity_type=EntityType.PARTNERSHIP, entity_name="Oak Partners", **boxes)


class TestK1Aggregate:

    def test_sums_boxes_across_entities(self):
        k1s = [
            partnership_k1("a", ordinary_income=cents(10000), guaranteed_payments=cents(5000),
                           interest_income=cents(200)),
            ScheduleK1(id="b", entity_type="s-corp", ordinary_income=cents(-2000),
                       dividend_income=cents(300), qualified_dividends=cents(100)),
        ]
        agg = compute_k1_aggregate(k1s)

        assert agg.k1_count == 2
        assert agg.total_ordinary_income == cents(8000)
        assert agg.total_interest == cents(200)
        assert agg.total_dividends == cents(300)
        assert agg.total_passthrough_income == cents(13000)
        assert agg.se_eligible_income == cents(5000)
        assert agg.entities[1].entity_type == EntityType.S_CORPORATION

    def test_entity_type_aliases(self):
        assert ScheduleK1(id="x", entity_type="trust").entity_type == EntityType.TRUST_ESTATE
        assert ScheduleK1(id="y", entity_type="S_Corporation").entity_type == EntityType.S_CORPORATION

    def test_empty(self):
        agg = compute_k1_aggregate([])
        assert agg.k1_count == 0
        assert agg.total_passthrough_income == 0


class TestRentalLossAllowance:

    def test_full_allowance_below_phase_out(self):
        pal = compute_k1_rental_pal(cents(-40000), cents(80000), FilingStatus.SINGLE)

        assert pal.allowed_rental_income == cents(-25000)
        assert pal.disallowed_loss == cents(-15000)
        assert pal.pal_applied

    def test_midpoint_of_phase_out(self):
        assert rental_loss_allowance(cents(125000), FilingStatus.SINGLE) == cents(12500)

        pal = compute_k1_rental_pal(cents(-20000), cents(125000), FilingStatus.SINGLE)
        assert pal.allowed_rental_income == cents(-12500)
        assert pal.disallowed_loss == cents(-7500)

    def test_fully_phased_out(self):
        assert rental_loss_allowance(cents(150000), FilingStatus.SINGLE) == 0
        assert rental_loss_allowance(cents(400000), FilingStatus.MARRIED_JOINT) == 0

    def test_mfs_has_no_allowance(self):
        pal = compute_k1_rental_pal(cents(-10000), cents(50000), FilingStatus.MARRIED_SEPARATE)

        assert pal.allowed_rental_income == 0
        assert pal.disallowed_loss == cents(-10000)

    def test_income_passes_through(self):
        pal = compute_k1_rental_pal(cents(8000), cents(300000), FilingStatus.SINGLE)

        assert pal.allowed_rental_income == cents(8000)
        assert pal.disallowed_loss == 0
        assert not pal.pal_applied

    def test_allowance_shared_with_schedule_e(self):
        pal = compute_k1_rental_pal(cents(-10000), cents(80000), FilingStatus.SINGLE,
                                    already_used_allowance=cents(20000))

        assert pal.allowed_rental_income == cents(-5000)
        assert pal.disallowed_loss == cents(-5000)

    def test_allowance_never_increases_with_agi(self):
        previous = None
        for agi in range(0, cents(200000), cents(2500)):
            allowance = rental_loss_allowance(agi, FilingStatus.SINGLE)
            assert 0 <= allowance <= cents(25000)
            if previous is not None:
                assert allowance <= previous
            previous = allowance

    @pytest.mark.parametrize("rental", [cents(-1), cents(-12345.67), cents(-25000), cents(-90000)])
    @pytest.mark.parametrize("agi", [0, cents(110000), cents(149999)])
    def test_allowed_plus_disallowed_equals_rental(self, rental, agi):
        pal = compute_k1_rental_pal(rental, agi, FilingStatus.HEAD_OF_HOUSEHOLD)
        assert pal.allowed_rental_income + pal.disallowed_loss == rental
        assert pal.disallowed_loss <= 0


class TestK1OnForm1040:

    def test_rental_loss_limited_on_return(self):
        """Preliminary AGI of $110,000 leaves a $20,000 allowance."""
        model = make_return(wages=150000, schedule_k1s=[partnership_k1(rental_income=cents(-40000))])
        result = compute_form1040(model)

        assert result.k1_pal.allowed_rental_income == cents(-20000)
        assert result.k1_pal.disallowed_loss == cents(-20000)
        assert result.line11 == cents(130000)
        assert result.total_suspended_loss == cents(-20000)
        assert result.values["form8582.suspendedLoss"].amount == cents(-20000)

        codes = [f.code for f in FederalValidator().validate(model, result)]
        assert "PAL_LOSS_SUSPENDED" in codes

    def test_k1_portfolio_income_reaches_form_lines(self):
        model = make_return(
            wages=50000,
            schedule_k1s=[partnership_k1(interest_income=cents(700), dividend_income=cents(400),
                                         qualified_dividends=cents(300))],
        )
        result = compute_form1040(model)

        assert result.line2b == cents(700)
        assert result.line3b == cents(400)
        assert result.line3a == cents(300)
        assert result.values["k1.totalInterest"].amount == cents(700)

    def test_guaranteed_payments_are_self_employment_income(self):
        model = make_return(schedule_k1s=[partnership_k1(guaranteed_payments=cents(30000))])
        result = compute_form1040(model)

        assert result.schedule_se is not None
        assert result.schedule_se.line2 == cents(30000)
        assert result.schedule_1.line5 == cents(30000)

    def test_non_partnership_guaranteed_payments_flagged(self):
        model = make_return(schedule_k1s=[
            ScheduleK1(id="s1", entity_type=EntityType.S_CORPORATION, guaranteed_payments=cents(1000),
                       dividend_income=cents(10), qualified_dividends=cents(20)),
        ])
        codes = [f.code for f in FederalValidator().validate(model)]

        assert "K1_GUARANTEED_PAYMENTS_NON_PARTNERSHIP" in codes
        assert "K1_QUALIFIED_EXCEEDS_DIVIDENDS" in codes
