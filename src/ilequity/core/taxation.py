"""Shared per-grant building blocks used by the option and RSU calculators."""

from __future__ import annotations

from dataclasses import dataclass

from ilequity.config.schema import RSUGrant, StockOptionGrant, TaxRoute
from ilequity.core.results import PackageResult, TaxBreakdown
from ilequity.taxes.israel import IsraeliTaxModel


@dataclass(frozen=True, slots=True)
class ValueSplit:
    """Raw (pre-tax) value of a grant, split by tax treatment."""

    gross_value_usd: float
    gross_value_nis: float
    work_income_nis: float
    capital_gain_nis: float


ZERO_SPLIT = ValueSplit(0.0, 0.0, 0.0, 0.0)


def single_grant_breakdown(
    split: ValueSplit,
    annual_salary: float,
    credit_points: float,
    tax_model: IsraeliTaxModel,
    total_capital_gains: float | None = None,
) -> TaxBreakdown:
    """Tax one grant in isolation, attributing credit points precisely."""
    work_income = split.work_income_nis
    income = tax_model.equity_income_tax(work_income, annual_salary, credit_points)
    bituah_leumi = tax_model.bituah_leumi(work_income, annual_salary)
    health = tax_model.health_insurance(work_income)
    cg = tax_model.capital_gains_tax(split.capital_gain_nis, total_capital_gains)

    total = income.income_tax + cg.base_tax + bituah_leumi + health + cg.surtax
    return TaxBreakdown(
        income_tax=income.income_tax,
        capital_gains_tax=cg.base_tax,
        bituah_leumi=bituah_leumi,
        health_insurance=health,
        credit_points_reduction=income.credit_points_reduction,
        surtax=cg.surtax,
        total_tax=total,
    )


def build_package_result(
    grant: StockOptionGrant | RSUGrant,
    split: ValueSplit,
    breakdown: TaxBreakdown,
    exchange_rate: float,
    *,
    route: TaxRoute | None = None,
    is_underwater: bool = False,
    floor_at_zero: bool = True,
) -> PackageResult:
    """Assemble a ``PackageResult`` with ``net = gross - total_tax``.

    With ``floor_at_zero`` gross and net values are clamped at 0.
    """
    net_nis = split.gross_value_nis - breakdown.total_tax
    net_usd = net_nis / exchange_rate
    gross_usd = split.gross_value_usd
    gross_nis = split.gross_value_nis
    if floor_at_zero:
        net_nis, net_usd = max(0.0, net_nis), max(0.0, net_usd)
        gross_usd, gross_nis = max(0.0, gross_usd), max(0.0, gross_nis)
    return PackageResult(
        id=grant.id,
        name=grant.name,
        kind=grant.kind,
        gross_value_usd=gross_usd,
        gross_value_nis=gross_nis,
        tax_breakdown=breakdown,
        net_value_usd=net_usd,
        net_value_nis=net_nis,
        work_income_nis=split.work_income_nis,
        capital_gain_nis=split.capital_gain_nis,
        route=route,
        is_underwater=is_underwater,
    )
