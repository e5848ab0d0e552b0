"""Tests for the Section 199A qualified business income deduction."""

from decimal import Decimal

import pytest

from calculator.decimal_math import cents
from calculator.engine import compute_form1040
from calculator.qbi_calculator import QBIBusiness, QBICalculator, wage_limitation
from models.income import ScheduleCBusiness
from models.taxpayer import FilingStatus

from factories import make_return


def business(qbi, wages=0, ubia=0, sstb=False, biz_id="b1"):
    return QBIBusiness(id=biz_id, name=biz_id, qbi=cents(qbi), w2_wages=cents(wages), ubia=cents(ubia),
                       is_sstb=sstb, source="k1")


@pytest.fixture
def calculator():
    return QBICalculator()


def deduction(calculator, config, businesses, taxable_income, net_capital_gain=0):
    return calculator.calculate(businesses, cents(taxable_income), cents(net_capital_gain),
                                FilingStatus.SINGLE, config)


class TestSimplifiedPath:

    def test_twenty_percent_of_qbi(self, calculator, config_2025):
        result = deduction(calculator, config_2025, [business(50000)], 80000)

        assert result.simplified_path
        assert result.qbi_component == cents(10000)
        assert result.final_qbi_deduction == cents(10000)

    def test_limited_by_taxable_income(self, calculator, config_2025):
        result = deduction(calculator, config_2025, [business(100000)], 40000)
        assert result.final_qbi_deduction == cents(8000)

    def test_net_capital_gain_reduces_limit(self, calculator, config_2025):
        result = deduction(calculator, config_2025, [business(100000)], 40000, net_capital_gain=10000)
        assert result.final_qbi_deduction == cents(6000)

    def test_qbi_loss(self, calculator, config_2025):
        assert deduction(calculator, config_2025, [business(-5000)], 80000).final_qbi_deduction == 0


class TestWageLimitedPath:

    def test_wage_limitation_formula(self):
        assert wage_limitation(cents(100000), cents(1000000)) == cents(50000)
        assert wage_limitation(cents(10000), cents(1000000)) == cents(27500)

    def test_above_range(self, calculator, config_2025):
        result = deduction(calculator, config_2025, [business(100000, wages=30000)], 300000)

        assert result.is_above_threshold
        assert result.business_results[0].wage_limitation == cents(15000)
        assert result.final_qbi_deduction == cents(15000)

    def test_halfway_through_phase_in(self, calculator, config_2025):
        result = deduction(calculator, config_2025, [business(100000, wages=20000)], 222300)

        assert result.phase_in_ratio == Decimal("0.5")
        # 20,000 less half of the 10,000 excess over the wage limit
        assert result.final_qbi_deduction == cents(15000)

    def test_sstb_excluded_above_range(self, calculator, config_2025):
        result = deduction(calculator, config_2025, [business(100000, wages=100000, sstb=True)], 300000)

        assert result.business_results[0].sstb_excluded
        assert result.final_qbi_deduction == 0

    def test_sstb_reduced_in_phase_in(self, calculator, config_2025):
        result = deduction(calculator, config_2025, [business(100000, wages=20000, sstb=True)], 222300)

        assert result.business_results[0].sstb_phase_in_applied
        assert result.final_qbi_deduction == cents(5000)

    def test_losses_net_against_gains(self, calculator, config_2025):
        businesses = [business(100000, wages=100000), business(-20000, biz_id="b2")]
        result = deduction(calculator, config_2025, businesses, 300000)

        assert result.final_qbi_deduction == cents(16000)


def test_schedule_c_qbi_on_return():
    shop = ScheduleCBusiness(id="c1", business_name="Design Studio", gross_receipts=cents(60000), expenses=cents(10000))
    result = compute_form1040(make_return(wages=0, schedule_c_businesses=[shop]))

    assert result.qbi.total_qbi > 0
    # Net profit less the deductible half of SE tax, at 20%, within the income limit
    assert result.line13 == result.qbi.final_qbi_deduction
    assert result.line13 <= cents(10000)
    assert result.values["form1040.line13"].inputs == ("qbi.deduction",)
