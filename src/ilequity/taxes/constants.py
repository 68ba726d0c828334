"""Israeli tax constants loaded from the bundled YAML tables."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from ilequity.io.yaml_loader import load_package_yaml
from ilequity.utils.exceptions import ConfigError


@dataclass(frozen=True, slots=True)
class TaxBracket:
    """One progressive income-tax bracket, ``floor < income <= ceiling``."""

    floor: float
    ceiling: float
    rate: float

    @property
    def size(self) -> float:
        return self.ceiling - self.floor


@dataclass(frozen=True, slots=True)
class BituahLeumiRates:
    """Employee social security and health contributions on work income."""

    general_rate: float
    health_rate: float
    ceiling: float


@dataclass(frozen=True, slots=True)
class CapitalGainsRates:
    """Flat capital gains rate plus the high-income surtax."""

    base_rate: float
    surtax_rate: float
    surtax_threshold: float
    effective_rate: float


@dataclass(frozen=True, slots=True)
class TaxTables:
    """All static tables for one tax year."""

    tax_year: int
    brackets: tuple[TaxBracket, ...]
    credit_point_value: float
    bituah_leumi: BituahLeumiRates
    capital_gains: CapitalGainsRates


def _build_brackets(rows: list[list[Any]]) -> tuple[TaxBracket, ...]:
    brackets: list[TaxBracket] = []
    floor = 0.0
    prev_rate = -1.0
    for upper_bound, rate in rows:
        ceiling = math.inf if upper_bound is None else float(upper_bound)
        if ceiling <= floor:
            raise ConfigError(f"Bracket ceilings must ascend, got {ceiling} after {floor}")
        if rate < prev_rate:
            raise ConfigError(f"Bracket rates must not decrease, got {rate} after {prev_rate}")
        brackets.append(TaxBracket(floor=floor, ceiling=ceiling, rate=float(rate)))
        floor = ceiling
        prev_rate = float(rate)
    if not brackets or not math.isinf(brackets[-1].ceiling):
        raise ConfigError("The last income bracket must have no upper bound")
    return tuple(brackets)


@lru_cache(maxsize=None)
def load_tax_tables(tax_year: int = 2025) -> TaxTables:
    """Load and validate the tax tables for ``tax_year``.

    Raises:
        ConfigError: If no tables exist for the year or they are inconsistent.
    """
    try:
        data: dict[str, Any] = load_package_yaml(f"taxes/tables/israel_{tax_year}.yaml")
    except ConfigError as exc:
        raise ConfigError(f"No tax tables available for tax year {tax_year}") from exc

    try:
        bl = data["bituah_leumi"]
        cg = data["capital_gains"]
        return TaxTables(
            tax_year=int(data["tax_year"]),
            brackets=_build_brackets(data["income_brackets"]),
            credit_point_value=float(data["credit_point_value"]),
            bituah_leumi=BituahLeumiRates(
                general_rate=float(bl["general_rate"]),
                health_rate=float(bl["health_rate"]),
                ceiling=float(bl["ceiling"]),
            ),
            capital_gains=CapitalGainsRates(
                base_rate=float(cg["base_rate"]),
                surtax_rate=float(cg["surtax_rate"]),
                surtax_threshold=float(cg["surtax_threshold"]),
                effective_rate=float(cg["effective_rate"]),
            ),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Malformed tax tables for {tax_year}: {exc}") from exc
