"""Tests for part-year apportionment."""

from datetime import date

import pytest

from calculator.decimal_math import cents
from calculator.state import apportion_income, compute_apportionment_ratio, scale_full_year_tax
from models.state import ResidencyType, StateReturnConfig


def part_year(move_in=None, move_out=None, **kwargs):
    return StateReturnConfig(
        state_code="CA", residency_type=ResidencyType.PART_YEAR,
        move_in_date=move_in, move_out_date=move_out, **kwargs,
    )


class TestApportionmentRatio:

    def test_full_year(self):
        assert compute_apportionment_ratio(StateReturnConfig(state_code="CA"), 2025) == 1.0

    def test_nonresident(self):
        config = StateReturnConfig(state_code="CA", residency_type="nonresident")
        assert compute_apportionment_ratio(config, 2025) == 0.0

    def test_moved_in_july_first(self):
        ratio = compute_apportionment_ratio(part_year(move_in=date(2025, 7, 1)), 2025)
        assert ratio == 184 / 365

    def test_moved_out(self):
        # Jan 1 through Mar 31, both days counted
        ratio = compute_apportionment_ratio(part_year(move_out=date(2025, 3, 31)), 2025)
        assert ratio == 90 / 365

    def test_leap_year_uses_366_days(self):
        ratio = compute_apportionment_ratio(part_year(move_in=date(2024, 7, 1)), 2024)
        assert ratio == 184 / 366

    def test_dates_clamped_to_tax_year(self):
        config = part_year(move_in=date(2023, 5, 1), move_out=date(2027, 1, 1))
        assert compute_apportionment_ratio(config, 2025) == 1.0

    def test_single_day(self):
        config = part_year(move_in=date(2025, 12, 31), move_out=date(2025, 12, 31))
        assert compute_apportionment_ratio(config, 2025) == 1 / 365

    def test_move_out_before_move_in(self):
        config = part_year(move_in=date(2025, 9, 1), move_out=date(2025, 3, 1))
        assert compute_apportionment_ratio(config, 2025) == 0.0

    def test_part_year_without_dates_is_whole_year(self):
        assert compute_apportionment_ratio(part_year(), 2025) == 1.0

    def test_unparseable_date_falls_back_to_year_bounds(self):
        config = StateReturnConfig.model_construct(
            state_code="CA", residency_type=ResidencyType.PART_YEAR,
            move_in_date="not-a-date", move_out_date="2025-06-30",
        )
        assert compute_apportionment_ratio(config, 2025) == 181 / 365

    def test_iso_strings_accepted_on_model(self):
        config = StateReturnConfig(
            state_code="ca", residency_type="part_year", move_in_date="2025-07-01", move_out_date="",
        )
        assert config.move_in_date == date(2025, 7, 1)
        assert config.move_out_date is None
        assert compute_apportionment_ratio(config, 2025) == 184 / 365


class TestScaling:

    def test_full_ratio_is_identity(self):
        assert scale_full_year_tax(cents(1234.56), 1.0) == cents(1234.56)
        assert apportion_income(cents(50000), 1.0) == cents(50000)

    def test_zero_ratio(self):
        assert scale_full_year_tax(cents(1000), 0.0) == 0

    @pytest.mark.parametrize("amount,ratio,expected", [
        (100000, 0.5, 50000),
        (277457, 184 / 365, 139869),
        (3, 0.5, 2),  # 1.5 cents rounds half up
    ])
    def test_rounded_to_cents(self, amount, ratio, expected):
        assert scale_full_year_tax(amount, ratio) == expected
        assert apportion_income(amount, ratio) == expected
