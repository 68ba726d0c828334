"""Tests for single-grant stock option valuation."""

from __future__ import annotations

import pytest

from ilequity.config.schema import StockOptionGrant
from ilequity.core.options import available_quantity, calculate_option_result, detect_route
from ilequity.core.results import PackageResult, TaxBreakdown
from ilequity.taxes.israel import IsraeliTaxModel

SALARY = 300_000.0


def _ordinary(grant: StockOptionGrant) -> StockOptionGrant:
    return grant.model_copy(update={"exercise_price": 5, "average_price": 15})


def _assert_zeroed(result: PackageResult) -> None:
    assert result.gross_value_usd == 0.0
    assert result.gross_value_nis == 0.0
    assert result.net_value_usd == 0.0
    assert result.net_value_nis == 0.0
    assert result.work_income_nis == 0.0
    assert result.capital_gain_nis == 0.0
    assert result.tax_breakdown == TaxBreakdown()


class TestDetectRoute:
    def test_equal_prices_are_capital_gain(self) -> None:
        assert detect_route(10, 10) == "capital_gain"

    def test_exercise_above_average(self) -> None:
        assert detect_route(12, 10) == "capital_gain"

    def test_exercise_below_average(self) -> None:
        assert detect_route(9.99, 10) == "ordinary_income"


class TestAvailableQuantity:
    def test_difference(self) -> None:
        assert available_quantity(800, 200) == 600

    def test_never_negative(self) -> None:
        assert available_quantity(100, 300) == 0


class TestCalculateOptionResult:
    def test_capital_gain_route(
        self, option_grant: StockOptionGrant, tax_model: IsraeliTaxModel
    ) -> None:
        result = calculate_option_result(option_grant, 20, 3.5, SALARY, 2.25, tax_model=tax_model)
        assert result.route == "capital_gain"
        assert not result.is_underwater
        assert result.gross_value_usd == pytest.approx(8_000)
        assert result.gross_value_nis == pytest.approx(28_000)
        assert result.work_income_nis == 0.0
        assert result.capital_gain_nis == pytest.approx(28_000)

        tax = result.tax_breakdown
        assert tax.income_tax == 0.0
        assert tax.bituah_leumi == 0.0
        assert tax.health_insurance == 0.0
        assert tax.capital_gains_tax == pytest.approx(7_000)
        assert tax.surtax == 0.0
        assert tax.total_tax == pytest.approx(7_000)
        assert result.net_value_nis == pytest.approx(21_000)
        assert result.net_value_usd == pytest.approx(6_000)

    def test_ordinary_income_route(
        self, option_grant: StockOptionGrant, tax_model: IsraeliTaxModel
    ) -> None:
        grant = _ordinary(option_grant)
        result = calculate_option_result(grant, 20, 3.5, SALARY, 2.25, tax_model=tax_model)
        assert result.route == "ordinary_income"
        assert result.gross_value_nis == pytest.approx(42_000)
        assert result.work_income_nis == pytest.approx(28_000)
        assert result.capital_gain_nis == pytest.approx(14_000)

        tax = result.tax_breakdown
        assert tax.income_tax == pytest.approx(9_800)
        assert tax.credit_points_reduction == pytest.approx(0)
        assert tax.bituah_leumi == pytest.approx(1_960)
        assert tax.health_insurance == pytest.approx(1_400)
        assert tax.capital_gains_tax == pytest.approx(3_500)
        assert tax.total_tax == pytest.approx(16_660)
        assert result.net_value_nis == pytest.approx(25_340)

    def test_price_between_exercise_and_average(
        self, option_grant: StockOptionGrant, tax_model: IsraeliTaxModel
    ) -> None:
        grant = _ordinary(option_grant)
        result = calculate_option_result(grant, 12, 3.5, SALARY, 2.25, tax_model=tax_model)
        assert result.gross_value_nis == pytest.approx(19_600)
        assert result.work_income_nis == pytest.approx(28_000)
        assert result.capital_gain_nis == 0.0

    def test_net_floored_at_zero(
        self, option_grant: StockOptionGrant, tax_model: IsraeliTaxModel
    ) -> None:
        grant = _ordinary(option_grant)
        result = calculate_option_result(grant, 5.5, 3.5, SALARY, 2.25, tax_model=tax_model)
        assert result.tax_breakdown.total_tax > result.gross_value_nis
        assert result.net_value_nis == 0.0
        assert result.net_value_usd == 0.0

    @pytest.mark.parametrize("price", [5.0, 8.0, 10.0])
    def test_underwater(
        self, option_grant: StockOptionGrant, tax_model: IsraeliTaxModel, price: float
    ) -> None:
        result = calculate_option_result(
            option_grant, price, 3.5, SALARY, 2.25, tax_model=tax_model
        )
        assert result.is_underwater
        assert result.route == "capital_gain"
        _assert_zeroed(result)

    @pytest.mark.parametrize("price", [4.0, 5.0])
    def test_underwater_ordinary_income(
        self, option_grant: StockOptionGrant, tax_model: IsraeliTaxModel, price: float
    ) -> None:
        grant = _ordinary(option_grant)
        result = calculate_option_result(grant, price, 3.5, SALARY, 2.25, tax_model=tax_model)
        assert result.is_underwater
        assert result.route == "ordinary_income"
        _assert_zeroed(result)

    def test_surtax_uses_cumulative_gains(
        self, option_grant: StockOptionGrant, tax_model: IsraeliTaxModel
    ) -> None:
        result = calculate_option_result(
            option_grant,
            20,
            3.5,
            SALARY,
            2.25,
            total_capital_gains=800_000,
            tax_model=tax_model,
        )
        assert result.tax_breakdown.surtax == pytest.approx(28_000 * 0.05)
        assert result.tax_breakdown.total_tax == pytest.approx(7_000 + 1_400)

    def test_default_tax_model(self, option_grant: StockOptionGrant) -> None:
        result = calculate_option_result(option_grant, 20, 3.5, SALARY, 2.25)
        assert result.tax_breakdown.total_tax == pytest.approx(7_000)
