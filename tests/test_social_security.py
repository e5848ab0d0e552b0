"""Tests for taxable Social Security benefits (Publication 915 worksheet)."""

import pytest

from calculator.decimal_math import cents
from calculator.engine import compute_form1040
from calculator.social_security import compute_taxable_social_security
from models.income import SSA1099
from models.taxpayer import FilingStatus

from factories import make_return


def taxable(config, benefits, other_income, status=FilingStatus.SINGLE, exempt_interest=0):
    return compute_taxable_social_security(
        cents(benefits), cents(other_income), cents(exempt_interest), status, config
    )


class TestWorksheet:

    def test_below_base_amount(self, config_2025):
        result = taxable(config_2025, 20000, 10000)

        assert result.combined_income == cents(20000)
        assert result.tier == 0
        assert result.taxable_benefits == 0

    def test_tier_one(self, config_2025):
        result = taxable(config_2025, 20000, 20000)

        assert result.tier == 1
        assert result.taxable_benefits == cents(2500)

    def test_tier_two(self, config_2025):
        result = taxable(config_2025, 20000, 30000)

        assert result.tier == 2
        # 85% of 6,000 over the additional amount plus the 4,500 tier one maximum
        assert result.taxable_benefits == cents(9600)

    def test_capped_at_85_percent(self, config_2025):
        assert taxable(config_2025, 20000, 100000).taxable_benefits == cents(17000)

    def test_tax_exempt_interest_counts(self, config_2025):
        result = taxable(config_2025, 20000, 10000, exempt_interest=8000)

        assert result.modified_agi == cents(18000)
        assert result.taxable_benefits == cents(1500)

    def test_joint_base_amounts(self, config_2025):
        assert taxable(config_2025, 30000, 15000, FilingStatus.MARRIED_JOINT).taxable_benefits == 0

    def test_married_separate_has_no_base(self, config_2025):
        result = taxable(config_2025, 10000, 1000, FilingStatus.MARRIED_SEPARATE)

        assert result.tier == 2
        assert result.taxable_benefits == cents(5100)

    @pytest.mark.parametrize("benefits", [0, -100])
    def test_no_benefits(self, config_2025, benefits):
        assert taxable(config_2025, benefits, 50000).taxable_benefits == 0


def test_lines_6a_6b_on_return():
    model = make_return(wages=30000, ssa1099s=[SSA1099(id="ssa-1", box5=cents(20000))])
    result = compute_form1040(model)

    assert result.line6a == cents(20000)
    assert result.line6b == cents(9600)
    assert result.line9 == cents(39600)
