"""Stock option route classification and per-grant valuation.

Options follow the Article 102 rule: a grant whose exercise price is at or
above the grant-date average price is taxed entirely as capital gain;
otherwise the discount is work income and the rest is capital gain.
"""

from __future__ import annotations

from ilequity.config.schema import StockOptionGrant, TaxRoute
from ilequity.core.results import PackageResult, TaxBreakdown
from ilequity.core.taxation import (
    ZERO_SPLIT,
    ValueSplit,
    build_package_result,
    single_grant_breakdown,
)
from ilequity.taxes.israel import IsraeliTaxModel


def detect_route(exercise_price: float, average_price: float) -> TaxRoute:
    """Capital gain iff ``exercise_price >= average_price``."""
    return "capital_gain" if exercise_price >= average_price else "ordinary_income"


def available_quantity(vested: int, used: int) -> int:
    """Shares that can still be exercised or sold, never negative."""
    return max(0, vested - used)


def option_value_split(
    grant: StockOptionGrant,
    quantity: int,
    stock_price: float,
    exchange_rate: float,
) -> ValueSplit | None:
    """Split the pre-tax value of ``quantity`` options.

    Returns ``None`` when the option is underwater (no profit per share).
    """
    stock_price_nis = stock_price * exchange_rate
    exercise_price_nis = grant.exercise_price * exchange_rate
    average_price_nis = grant.average_price * exchange_rate

    profit_per_share_nis = stock_price_nis - exercise_price_nis
    if profit_per_share_nis <= 0:
        return None

    gross_value_nis = profit_per_share_nis * quantity
    if detect_route(grant.exercise_price, grant.average_price) == "capital_gain":
        work_income_nis = 0.0
        capital_gain_nis = gross_value_nis
    else:
        work_income_nis = (average_price_nis - exercise_price_nis) * quantity
        # Can floor to 0 when the price sits between exercise and average price
        capital_gain_nis = max(0.0, (stock_price_nis - average_price_nis) * quantity)

    return ValueSplit(
        gross_value_usd=gross_value_nis / exchange_rate,
        gross_value_nis=gross_value_nis,
        work_income_nis=work_income_nis,
        capital_gain_nis=capital_gain_nis,
    )


def underwater_result(grant: StockOptionGrant, exchange_rate: float) -> PackageResult:
    """Zeroed result that still reports the route."""
    return build_package_result(
        grant,
        ZERO_SPLIT,
        TaxBreakdown(),
        exchange_rate,
        route=detect_route(grant.exercise_price, grant.average_price),
        is_underwater=True,
    )


def calculate_option_result(
    grant: StockOptionGrant,
    stock_price: float,
    exchange_rate: float,
    annual_salary: float,
    credit_points: float,
    *,
    total_capital_gains: float | None = None,
    tax_model: IsraeliTaxModel | None = None,
) -> PackageResult:
    """Value and tax a single option grant in isolation.

    Availability is measured against the grant's total quantity, and
    credit points are attributed with the salary-aware algorithm of
    ``IsraeliTaxModel.equity_income_tax``. Net values are floored at 0.

    Args:
        grant: The option grant.
        stock_price: Current share price in USD.
        exchange_rate: NIS per USD.
        annual_salary: Annual salary in NIS.
        credit_points: Credit points of the employee.
        total_capital_gains: Cumulative gains for the surtax threshold.
            Defaults to this grant's own capital gain.
        tax_model: Tax model to use; defaults to the current tax year.
    """
    tax_model = tax_model or IsraeliTaxModel()
    quantity = available_quantity(grant.total_quantity, grant.used_quantity)

    split = option_value_split(grant, quantity, stock_price, exchange_rate)
    if split is None:
        return underwater_result(grant, exchange_rate)

    breakdown = single_grant_breakdown(
        split, annual_salary, credit_points, tax_model, total_capital_gains
    )
    return build_package_result(
        grant,
        split,
        breakdown,
        exchange_rate,
        route=detect_route(grant.exercise_price, grant.average_price),
    )
