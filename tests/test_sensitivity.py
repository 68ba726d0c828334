"""Tests for the stock price sweep."""

from __future__ import annotations

from datetime import date

import numpy as np
import pytest

from ilequity.analytics.sensitivity import price_sweep, stock_price_grid
from ilequity.config.schema import PersonalInfo, RSUGrant, StockOptionGrant


class TestStockPriceGrid:
    def test_bounds_and_size(self) -> None:
        grid = stock_price_grid(20, spread=0.5, n=11)
        assert len(grid) == 11
        assert grid[0] == pytest.approx(10)
        assert grid[-1] == pytest.approx(30)
        assert grid[5] == pytest.approx(20)

    def test_never_below_minimum(self) -> None:
        grid = stock_price_grid(10, spread=2.0, n=5)
        assert grid[0] == pytest.approx(0.01)

    def test_too_few_points(self) -> None:
        with pytest.raises(ValueError):
            stock_price_grid(10, n=1)

    def test_negative_spread(self) -> None:
        with pytest.raises(ValueError, match="spread must be non-negative"):
            stock_price_grid(10, spread=-0.2)

    def test_zero_spread(self) -> None:
        grid = stock_price_grid(10, spread=0.0, n=3)
        assert list(grid) == pytest.approx([10, 10, 10])


class TestPriceSweep:
    def test_matches_grid(
        self,
        personal_info: PersonalInfo,
        option_grant: StockOptionGrant,
        rsu_grant: RSUGrant,
    ) -> None:
        prices = [10.0, 20.0, 30.0]
        sweep = price_sweep(
            personal_info, [option_grant], [rsu_grant], prices, as_of=date(2025, 1, 1)
        )
        np.testing.assert_allclose(sweep.prices, prices)
        assert np.all(np.diff(sweep.gross_value_nis) > 0)
        np.testing.assert_allclose(
            sweep.net_value_nis, sweep.gross_value_nis - sweep.total_tax_nis
        )
        # at the current price the sweep agrees with the engine
        assert sweep.gross_value_nis[1] == pytest.approx(42_000)

    def test_breakeven(self, personal_info: PersonalInfo, option_grant: StockOptionGrant) -> None:
        sweep = price_sweep(personal_info, [option_grant], [], [5.0, 10.0, 15.0])
        assert sweep.net_value_nis[0] == 0.0
        assert sweep.breakeven_price() == pytest.approx(15.0)

    def test_no_breakeven(
        self, personal_info: PersonalInfo, option_grant: StockOptionGrant
    ) -> None:
        sweep = price_sweep(personal_info, [option_grant], [], [1.0, 2.0])
        assert sweep.breakeven_price() is None
