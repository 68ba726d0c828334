"""Default configuration values for ilequity."""

from __future__ import annotations

from ilequity.config.schema import PersonalInfo, Portfolio

DEFAULT_CREDIT_POINTS: float = 2.25
DEFAULT_EXCHANGE_RATE: float = 3.20
DEFAULT_VESTING_YEARS: int = 4
DEFAULT_TAX_YEAR: int = 2025

# Placeholder until the user enters a real quote; PersonalInfo requires a positive price.
_PLACEHOLDER_STOCK_PRICE: float = 1.0


def default_personal_info() -> PersonalInfo:
    """Personal info with a resident's default credit points and a typical rate."""
    return PersonalInfo(
        monthly_salary=0.0,
        credit_points=DEFAULT_CREDIT_POINTS,
        exchange_rate=DEFAULT_EXCHANGE_RATE,
        stock_price=_PLACEHOLDER_STOCK_PRICE,
    )


def empty_portfolio() -> Portfolio:
    """A portfolio with default personal info and no grants."""
    return Portfolio(personal_info=default_personal_info())
