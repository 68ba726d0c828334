"""Net value of a portfolio across a range of stock prices."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

import numpy as np
from numpy.typing import NDArray

from ilequity.config.schema import PersonalInfo, RSUGrant, StockOptionGrant
from ilequity.core.engine import calculate
from ilequity.taxes.israel import IsraeliTaxModel

MIN_PRICE: float = 0.01


@dataclass(frozen=True)
class PriceSweep:
    """Portfolio totals (NIS) evaluated at each price in ``prices`` (USD)."""

    prices: NDArray[np.floating[Any]]
    gross_value_nis: NDArray[np.floating[Any]]
    total_tax_nis: NDArray[np.floating[Any]]
    net_value_nis: NDArray[np.floating[Any]]

    def breakeven_price(self) -> float | None:
        """Lowest swept price with a positive net value, if any."""
        positive = np.flatnonzero(self.net_value_nis > 0)
        if positive.size == 0:
            return None
        return float(self.prices[positive[0]])


def stock_price_grid(
    center: float, spread: float = 0.5, n: int = 11
) -> NDArray[np.floating[Any]]:
    """Evenly spaced prices within ``center * (1 +/- spread)``.

    Args:
        center: Reference price in USD, usually the current price.
        spread: Fractional distance of the grid ends from ``center``.
        n: Number of grid points (at least 2).
    """
    if n < 2:
        raise ValueError(f"n must be at least 2, got {n}")
    if spread < 0:
        raise ValueError(f"spread must be non-negative, got {spread}")
    low = max(center * (1.0 - spread), MIN_PRICE)
    high = max(center * (1.0 + spread), low)
    return np.linspace(low, high, n)


def price_sweep(
    personal_info: PersonalInfo,
    option_grants: Sequence[StockOptionGrant],
    rsu_grants: Sequence[RSUGrant],
    prices: Sequence[float] | NDArray[np.floating[Any]],
    *,
    as_of: date | None = None,
    tax_model: IsraeliTaxModel | None = None,
) -> PriceSweep:
    """Run ``calculate`` once per price, holding everything else fixed."""
    tax_model = tax_model or IsraeliTaxModel()
    price_arr = np.asarray(prices, dtype=float)
    gross = np.zeros_like(price_arr)
    tax = np.zeros_like(price_arr)
    net = np.zeros_like(price_arr)

    for i, price in enumerate(price_arr):
        info = personal_info.model_copy(update={"stock_price": float(price)})
        result = calculate(info, option_grants, rsu_grants, as_of=as_of, tax_model=tax_model)
        totals = result.totals
        gross[i] = totals.gross_value_nis
        tax[i] = totals.tax_breakdown.total_tax
        net[i] = totals.net_value_nis

    return PriceSweep(
        prices=price_arr, gross_value_nis=gross, total_tax_nis=tax, net_value_nis=net
    )
