"""RSU per-grant valuation.

RSUs are always split: the value at vesting is work income and any
appreciation since vesting is capital gain.
"""

from __future__ import annotations

from datetime import date

from ilequity.config.schema import RSUGrant
from ilequity.core.options import available_quantity
from ilequity.core.results import PackageResult
from ilequity.core.taxation import ValueSplit, build_package_result, single_grant_breakdown
from ilequity.core.vesting import grant_vested_quantity
from ilequity.taxes.israel import IsraeliTaxModel


def rsu_value_split(
    grant: RSUGrant,
    quantity: int,
    stock_price: float,
    exchange_rate: float,
) -> ValueSplit:
    """Split the pre-tax value of ``quantity`` RSUs."""
    stock_price_nis = stock_price * exchange_rate
    vesting_price_nis = grant.average_vesting_price * exchange_rate

    gross_value_nis = stock_price_nis * quantity
    return ValueSplit(
        gross_value_usd=gross_value_nis / exchange_rate,
        gross_value_nis=gross_value_nis,
        work_income_nis=vesting_price_nis * quantity,
        capital_gain_nis=max(0.0, (stock_price_nis - vesting_price_nis) * quantity),
    )


def calculate_rsu_result(
    grant: RSUGrant,
    stock_price: float,
    exchange_rate: float,
    annual_salary: float,
    credit_points: float,
    *,
    as_of: date | None = None,
    total_capital_gains: float | None = None,
    tax_model: IsraeliTaxModel | None = None,
) -> PackageResult | None:
    """Value and tax a single RSU grant in isolation.

    Returns ``None`` when nothing is available (fully sold or unvested).
    """
    tax_model = tax_model or IsraeliTaxModel()
    vested = grant_vested_quantity(grant, as_of)
    quantity = available_quantity(vested, grant.used_quantity)
    if quantity <= 0:
        return None

    split = rsu_value_split(grant, quantity, stock_price, exchange_rate)
    breakdown = single_grant_breakdown(
        split, annual_salary, credit_points, tax_model, total_capital_gains
    )
    return build_package_result(grant, split, breakdown, exchange_rate)
