"""Validation of raw user input into typed models.

Each ``validate_*`` function returns either the validated model or a
mapping from field path to a single human-readable message. Invalid input
never raises.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ilequity.config.schema import (
    PersonalInfo,
    Portfolio,
    RSUGrant,
    SimulationParams,
    StockOptionGrant,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

FieldErrors = dict[str, str]


def error_messages(error: ValidationError) -> FieldErrors:
    """Flatten a pydantic error into ``{"a.b.0": message}``.

    Only the first message per path is kept.
    """
    errors: FieldErrors = {}
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"])
        errors.setdefault(path, issue["msg"])
    return errors


def _validate(model: type[ModelT], data: Any) -> ModelT | FieldErrors:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        return error_messages(exc)


def validate_personal_info(data: Any) -> PersonalInfo | FieldErrors:
    return _validate(PersonalInfo, data)


def validate_stock_option(data: Any) -> StockOptionGrant | FieldErrors:
    data = {**data, "kind": "option"} if isinstance(data, dict) else data
    return _validate(StockOptionGrant, data)


def validate_rsu(data: Any) -> RSUGrant | FieldErrors:
    data = {**data, "kind": "rsu"} if isinstance(data, dict) else data
    return _validate(RSUGrant, data)


def validate_simulation(data: Any) -> SimulationParams | FieldErrors:
    return _validate(SimulationParams, data)


def validate_portfolio(data: Any) -> Portfolio | FieldErrors:
    return _validate(Portfolio, data)
