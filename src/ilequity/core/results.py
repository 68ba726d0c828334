"""Immutable result value objects produced by the calculators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ilequity.config.schema import GrantKind, PersonalInfo, TaxRoute


@dataclass(frozen=True, slots=True)
class TaxBreakdown:
    """Tax components in NIS. ``total_tax`` is already net of credit points."""

    income_tax: float = 0.0
    capital_gains_tax: float = 0.0
    bituah_leumi: float = 0.0
    health_insurance: float = 0.0
    credit_points_reduction: float = 0.0
    surtax: float = 0.0
    total_tax: float = 0.0


@dataclass(frozen=True, slots=True)
class PackageResult:
    """Valuation of a single grant."""

    id: str
    name: str
    kind: GrantKind
    gross_value_usd: float
    gross_value_nis: float
    tax_breakdown: TaxBreakdown
    net_value_usd: float
    net_value_nis: float
    work_income_nis: float
    capital_gain_nis: float
    route: TaxRoute | None = None  # options only
    is_underwater: bool = False


@dataclass(frozen=True, slots=True)
class Totals:
    """Portfolio-level totals."""

    gross_value_usd: float
    gross_value_nis: float
    tax_breakdown: TaxBreakdown
    net_value_usd: float
    net_value_nis: float
    effective_tax_rate: float  # percent of gross


@dataclass(frozen=True, slots=True)
class CalculationResult:
    """Output of one ``calculate`` run. Never updated in place."""

    personal_info: PersonalInfo
    annual_salary: float
    marginal_tax_rate: float  # percent
    packages: tuple[PackageResult, ...]
    totals: Totals
    as_of_date: date
    tax_year: int
