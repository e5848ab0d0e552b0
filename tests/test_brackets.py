"""Tests for bracket tax and the qualified dividends and capital gain worksheet."""

import pytest

from calculator.brackets import (
    compute_bracket_tax,
    compute_qdcg_tax,
    marginal_rate,
    net_cap_gain_for_qdcg,
    ordinary_income_tax,
)
from calculator.decimal_math import cents
from models.taxpayer import FilingStatus


class TestOrdinaryIncomeTax:

    def test_single_basic(self, config_2025):
        # $10,000 taxable income @ 10%
        assert ordinary_income_tax(cents(10000), FilingStatus.SINGLE, config_2025) == cents(1000)

    def test_single_crosses_bracket(self, config_2025):
        # 10% on first 11,925 = 1,192.50; 12% on remaining 8,075 = 969.00
        assert ordinary_income_tax(cents(20000), FilingStatus.SINGLE, config_2025) == cents(2161.50)

    def test_mfj_crosses_bracket(self, config_2025):
        # 10% on first 23,850 = 2,385.00; 12% on remaining 6,150 = 738.00
        assert ordinary_income_tax(cents(30000), FilingStatus.MARRIED_JOINT, config_2025) == cents(3123)

    def test_zero_and_negative_income(self, config_2025):
        assert ordinary_income_tax(0, FilingStatus.SINGLE, config_2025) == 0
        assert ordinary_income_tax(cents(-500), FilingStatus.SINGLE, config_2025) == 0

    def test_rounded_once(self):
        brackets = [(0, 0.1), (cents(0.05), 0.15)]
        # 0.5 + 0.75 cents is 1.25, not 1 + 1
        assert compute_bracket_tax(10, brackets) == 1

    def test_breakdown(self, config_2025):
        tax, breakdown = compute_bracket_tax(cents(20000), config_2025.brackets_for(FilingStatus.SINGLE), True)

        assert tax == cents(2161.50)
        assert [b["rate"] for b in breakdown] == [0.10, 0.12]
        assert breakdown[1]["income_in_bracket"] == cents(8075)
        assert breakdown[1]["ceiling"] == cents(48475)

    @pytest.mark.parametrize("income,rate", [(0, 0.10), (cents(11925), 0.10), (cents(11926), 0.12),
                                              (cents(700000), 0.37)])
    def test_marginal_rate(self, config_2025, income, rate):
        assert marginal_rate(income, FilingStatus.SINGLE, config_2025) == rate


class TestQualifiedDividendsWorksheet:

    def test_preferential_slice_at_fifteen_percent(self, config_2025):
        ws = compute_qdcg_tax(cents(100000), cents(10000), 0, FilingStatus.SINGLE, config_2025)

        assert ws.line5_ordinary == cents(90000)
        assert ws.line9_taxed_at_zero == 0
        assert ws.line17_taxed_at_fifteen == cents(10000)
        assert ws.line22_tax_on_ordinary == cents(14714)
        assert ws.line24_all_ordinary_tax == cents(16914)
        assert ws.line25_tax == cents(16214)

    def test_all_at_zero_rate(self, config_2025):
        ws = compute_qdcg_tax(cents(40000), cents(40000), 0, FilingStatus.SINGLE, config_2025)

        assert ws.line9_taxed_at_zero == cents(40000)
        assert ws.line25_tax == 0

    def test_twenty_percent_slice(self, config_2025):
        ws = compute_qdcg_tax(cents(700000), 0, cents(200000), FilingStatus.SINGLE, config_2025)

        # 533,400 threshold: 33,400 at 15%, the rest of the gain above it at 20%
        assert ws.line17_taxed_at_fifteen == cents(33400)
        assert ws.line20_taxed_at_twenty == cents(166600)

    def test_never_above_ordinary_tax(self, config_2025):
        ws = compute_qdcg_tax(cents(5000), cents(20000), 0, FilingStatus.SINGLE, config_2025)
        assert ws.line25_tax <= ws.line24_all_ordinary_tax

    def test_net_capital_gain_line(self):
        assert net_cap_gain_for_qdcg(cents(5000), cents(3000), 0, True) == cents(3000)
        assert net_cap_gain_for_qdcg(cents(5000), cents(-1000), 0, True) == 0
        assert net_cap_gain_for_qdcg(0, 0, cents(700), False) == cents(700)
