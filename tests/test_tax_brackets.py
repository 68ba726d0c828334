"""Tests for Israeli progressive income tax, contributions and capital gains."""

from __future__ import annotations

import pytest

from ilequity.taxes.israel import IsraeliTaxModel


class TestProgressiveTax:
    def test_zero_income(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.progressive_tax(0) == 0.0
        assert tax_model.progressive_tax(-5_000) == 0.0

    def test_first_bracket_only(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.progressive_tax(50_000) == pytest.approx(5_000)
        assert tax_model.progressive_tax(83_880) == pytest.approx(8_388)

    def test_spans_two_brackets(self, tax_model: IsraeliTaxModel) -> None:
        expected = 83_880 * 0.10 + (100_000 - 83_880) * 0.14
        assert tax_model.progressive_tax(100_000) == pytest.approx(expected)
        assert tax_model.progressive_tax(100_000) == pytest.approx(10_644.8)

    def test_spans_five_brackets(self, tax_model: IsraeliTaxModel) -> None:
        # 8388 + 5157.6 + 14616 + 23398.8 + 10752
        assert tax_model.progressive_tax(300_000) == pytest.approx(62_312.4)

    def test_top_bracket(self, tax_model: IsraeliTaxModel) -> None:
        base = tax_model.progressive_tax(721_560)
        assert tax_model.progressive_tax(821_560) == pytest.approx(base + 50_000)

    def test_monotonic(self, tax_model: IsraeliTaxModel) -> None:
        previous = 0.0
        for income in range(0, 1_000_001, 10_000):
            tax = tax_model.progressive_tax(income)
            assert tax >= previous
            previous = tax


class TestMarginalRate:
    @pytest.mark.parametrize(
        ("income", "rate"),
        [
            (0, 0.10),
            (83_880, 0.10),
            (83_881, 0.14),
            (150_000, 0.20),
            (300_000, 0.35),
            (560_280, 0.35),
            (600_000, 0.47),
            (5_000_000, 0.50),
        ],
    )
    def test_bracket_lookup(self, tax_model: IsraeliTaxModel, income: float, rate: float) -> None:
        assert tax_model.marginal_rate(income) == pytest.approx(rate)


class TestCreditPoints:
    def test_value(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.credit_points_value(2.25) == pytest.approx(6_264)
        assert tax_model.credit_points_value(0) == 0.0

    def test_apply_never_negative(self, tax_model: IsraeliTaxModel) -> None:
        final, used = tax_model.apply_credit_points(5_000, 2.25)
        assert final == 0.0
        assert used == pytest.approx(5_000)

    def test_apply_partial(self, tax_model: IsraeliTaxModel) -> None:
        final, used = tax_model.apply_credit_points(10_000, 2.25)
        assert final == pytest.approx(3_736)
        assert used == pytest.approx(6_264)


class TestEquityIncomeTax:
    def test_credits_already_used_by_salary(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.equity_income_tax(28_000, 300_000, 2.25)
        assert result.income_tax == pytest.approx(9_800)
        assert result.credit_points_reduction == pytest.approx(0)

    def test_credits_absorb_small_equity_income(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.equity_income_tax(50_000, 0, 2.25)
        assert result.income_tax == 0.0
        assert result.credit_points_reduction == pytest.approx(5_000)

    def test_credits_partially_used(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.equity_income_tax(83_880, 0, 2.25)
        assert result.income_tax == pytest.approx(2_124)
        assert result.credit_points_reduction == pytest.approx(6_264)

    def test_no_work_income(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.equity_income_tax(0, 300_000, 2.25)
        assert result.income_tax == 0.0
        assert result.credit_points_reduction == 0.0


class TestContributions:
    def test_bituah_leumi_below_ceiling(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.bituah_leumi(28_000, 300_000) == pytest.approx(1_960)

    def test_bituah_leumi_partial_ceiling(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.bituah_leumi(28_000, 550_000) == pytest.approx(10_280 * 0.07)

    def test_bituah_leumi_salary_above_ceiling(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.bituah_leumi(28_000, 600_000) == 0.0

    def test_bituah_leumi_on_total_caps(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.bituah_leumi_on_total(100_000) == pytest.approx(7_000)
        assert tax_model.bituah_leumi_on_total(1_000_000) == pytest.approx(560_280 * 0.07)
        assert tax_model.bituah_leumi_on_total(0) == 0.0

    def test_health_insurance_has_no_ceiling(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.health_insurance(1_000_000) == pytest.approx(50_000)
        assert tax_model.health_insurance(-1) == 0.0


class TestCapitalGains:
    def test_base_rate_only(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.capital_gains_tax(100_000)
        assert result.base_tax == pytest.approx(25_000)
        assert result.surtax == 0.0
        assert result.total_tax == pytest.approx(25_000)

    def test_surtax_on_own_gain(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.capital_gains_tax(1_000_000)
        assert result.surtax == pytest.approx((1_000_000 - 721_560) * 0.05)

    def test_surtax_against_cumulative_gains(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.capital_gains_tax(100_000, total_capital_gains=800_000)
        assert result.surtax == pytest.approx(78_440 * 0.05)

    def test_surtax_limited_to_gain(self, tax_model: IsraeliTaxModel) -> None:
        result = tax_model.capital_gains_tax(10_000, total_capital_gains=2_000_000)
        assert result.surtax == pytest.approx(500)

    def test_non_positive_gain(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.capital_gains_tax(0).total_tax == 0.0

    def test_effective_rate(self, tax_model: IsraeliTaxModel) -> None:
        assert tax_model.effective_capital_gains_rate() == pytest.approx(0.30)
