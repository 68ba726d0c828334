"""Serialization for portfolios and calculation results."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from ilequity.config.schema import Portfolio
from ilequity.config.validation import validate_portfolio
from ilequity.core.results import CalculationResult
from ilequity.utils.exceptions import ConfigError, PortfolioValidationError


def dump_portfolio(portfolio: Portfolio) -> str:
    """Serialize a portfolio to a JSON string."""
    return portfolio.model_dump_json(indent=2)


def load_portfolio(json_str: str) -> Portfolio:
    """Deserialize and validate a portfolio from a JSON string.

    Raises:
        ConfigError: If the text is not valid JSON.
        PortfolioValidationError: If the data fails validation.
    """
    try:
        data: Any = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Portfolio is not valid JSON: {exc}") from exc
    outcome = validate_portfolio(data)
    if isinstance(outcome, dict):
        raise PortfolioValidationError(outcome)
    return outcome


def result_to_dict(result: CalculationResult) -> dict[str, Any]:
    """Convert a calculation result into JSON-compatible primitives."""
    data = asdict(result)
    data["personal_info"] = result.personal_info.model_dump(mode="json")
    data["as_of_date"] = result.as_of_date.isoformat()
    data["packages"] = list(data["packages"])
    return data


def dump_results_summary(result: CalculationResult) -> str:
    """Serialize a calculation result to JSON for display or export.

    Results are derived data and are never written back to the store.
    """
    return json.dumps(result_to_dict(result), indent=2)
