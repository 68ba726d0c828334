"""Custom exceptions for ilequity."""

from __future__ import annotations


class IlEquityError(Exception):
    """Base exception for ilequity."""


class ConfigError(IlEquityError):
    """Invalid tax tables or unreadable portfolio data."""


class PortfolioValidationError(ConfigError):
    """Stored portfolio failed validation.

    Attributes:
        errors: Field path (e.g. ``"stock_options.0.used_quantity"``) to message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        details = "; ".join(f"{path or '<root>'}: {msg}" for path, msg in errors.items())
        super().__init__(f"Invalid portfolio: {details}")


class ExchangeRateError(IlEquityError):
    """Failed to fetch or parse the USD/ILS exchange rate."""
