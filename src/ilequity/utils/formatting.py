"""Human-readable money and percentage formatting for CLI output."""

from __future__ import annotations


def format_usd(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_nis(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}₪{abs(value):,.0f}"


def format_percentage(value: float, decimals: int = 1) -> str:
    """Format a value already expressed in percent, e.g. ``35.0 -> "35.0%"``."""
    return f"{value:.{decimals}f}%"
