"""Portfolio calculation engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from ilequity.config.schema import (
    Grant,
    PersonalInfo,
    RSUGrant,
    SimulationParams,
    StockOptionGrant,
    TaxRoute,
)
from ilequity.core.options import (
    available_quantity,
    calculate_option_result,
    detect_route,
    option_value_split,
)
from ilequity.core.results import CalculationResult, PackageResult, TaxBreakdown, Totals
from ilequity.core.rsus import calculate_rsu_result, rsu_value_split
from ilequity.core.taxation import ZERO_SPLIT, ValueSplit, build_package_result
from ilequity.core.vesting import grant_vested_quantity
from ilequity.taxes.israel import IsraeliTaxModel
from ilequity.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _PackageData:
    """Pre-tax figures for one grant, before portfolio-level taxation."""

    grant: StockOptionGrant | RSUGrant
    split: ValueSplit
    route: TaxRoute | None = None
    is_underwater: bool = False


def _option_packages(
    grants: Sequence[StockOptionGrant],
    stock_price: float,
    exchange_rate: float,
    as_of: date,
    recompute: bool,
) -> list[_PackageData]:
    packages: list[_PackageData] = []
    for grant in grants:
        vested = grant_vested_quantity(grant, as_of, recompute=recompute)
        quantity = available_quantity(vested, grant.used_quantity)
        route = detect_route(grant.exercise_price, grant.average_price)
        split = option_value_split(grant, quantity, stock_price, exchange_rate)
        if split is None:
            packages.append(_PackageData(grant, ZERO_SPLIT, route, is_underwater=True))
        else:
            packages.append(_PackageData(grant, split, route))
    return packages


def _rsu_packages(
    grants: Sequence[RSUGrant],
    stock_price: float,
    exchange_rate: float,
    as_of: date,
    recompute: bool,
) -> list[_PackageData]:
    packages: list[_PackageData] = []
    for grant in grants:
        vested = grant_vested_quantity(grant, as_of, recompute=recompute)
        quantity = available_quantity(vested, grant.used_quantity)
        if quantity <= 0:
            continue
        split = rsu_value_split(grant, quantity, stock_price, exchange_rate)
        packages.append(_PackageData(grant, split))
    return packages


def calculate(
    personal_info: PersonalInfo,
    option_grants: Sequence[StockOptionGrant],
    rsu_grants: Sequence[RSUGrant],
    simulation: SimulationParams | None = None,
    *,
    as_of: date | None = None,
    tax_model: IsraeliTaxModel | None = None,
) -> CalculationResult:
    """Value an equity portfolio net of Israeli tax.

    Work income is taxed at a single portfolio marginal rate and capital
    gains at the flat effective rate; social security, health insurance
    and the credit-point offset are applied once on the totals.

    Args:
        personal_info: Salary, credit points, exchange rate and stock price.
        option_grants: Stock option grants, in display order.
        rsu_grants: RSU grants, in display order.
        simulation: Optional projection to a future date, price and rate.
            Vested quantities are then recomputed as of the simulation date.
        as_of: Date for vesting when a grant defers to its schedule.
            Defaults to today. Ignored when ``simulation`` is given.
        tax_model: Tax model to use; defaults to the current tax year.

    Returns:
        CalculationResult with packages (options first, then RSUs) and totals.
    """
    tax_model = tax_model or IsraeliTaxModel()

    if simulation is not None:
        personal_info = personal_info.model_copy(
            update={
                "stock_price": simulation.stock_price,
                "exchange_rate": simulation.exchange_rate or personal_info.exchange_rate,
            }
        )
        valuation_date = simulation.as_of_date
    else:
        valuation_date = as_of or date.today()
    recompute = simulation is not None

    stock_price = personal_info.stock_price
    exchange_rate = personal_info.exchange_rate
    annual_salary = personal_info.annual_salary

    # Step 1: raw value split per grant
    packages_data = _option_packages(
        option_grants, stock_price, exchange_rate, valuation_date, recompute
    ) + _rsu_packages(rsu_grants, stock_price, exchange_rate, valuation_date, recompute)
    total_work_income = sum(pkg.split.work_income_nis for pkg in packages_data)

    # Step 2: one marginal rate at the midpoint of the equity work income
    marginal_rate = tax_model.marginal_rate(annual_salary + total_work_income / 2)
    capital_gains_rate = tax_model.effective_capital_gains_rate()

    # Step 3: per-package income and capital gains tax
    package_results: list[PackageResult] = []
    total_income_tax = 0.0
    total_capital_gains_tax = 0.0
    total_gross_nis = 0.0
    total_gross_usd = 0.0
    for pkg in packages_data:
        income_tax = pkg.split.work_income_nis * marginal_rate
        capital_gains_tax = pkg.split.capital_gain_nis * capital_gains_rate
        breakdown = TaxBreakdown(
            income_tax=income_tax,
            capital_gains_tax=capital_gains_tax,
            total_tax=income_tax + capital_gains_tax,
        )
        package_results.append(
            build_package_result(
                pkg.grant,
                pkg.split,
                breakdown,
                exchange_rate,
                route=pkg.route,
                is_underwater=pkg.is_underwater,
                floor_at_zero=False,
            )
        )
        total_income_tax += income_tax
        total_capital_gains_tax += capital_gains_tax
        total_gross_nis += pkg.split.gross_value_nis
        total_gross_usd += pkg.split.gross_value_usd

    # Step 4: contributions on the combined work income
    bituah_leumi = tax_model.bituah_leumi_on_total(total_work_income)
    health_insurance = tax_model.health_insurance(total_work_income)

    # Step 5: credit points once, against the whole liability
    tax_before_credits = (
        total_income_tax + total_capital_gains_tax + bituah_leumi + health_insurance
    )
    credit_value = tax_model.credit_points_value(personal_info.credit_points)
    credit_reduction = min(credit_value, tax_before_credits)
    total_tax = tax_before_credits - credit_reduction

    net_nis = total_gross_nis - total_tax
    totals = Totals(
        gross_value_usd=total_gross_usd,
        gross_value_nis=total_gross_nis,
        tax_breakdown=TaxBreakdown(
            income_tax=total_income_tax,
            capital_gains_tax=total_capital_gains_tax,
            bituah_leumi=bituah_leumi,
            health_insurance=health_insurance,
            credit_points_reduction=credit_reduction,
            total_tax=total_tax,
        ),
        net_value_usd=net_nis / exchange_rate,
        net_value_nis=net_nis,
        effective_tax_rate=(total_tax / total_gross_nis * 100) if total_gross_nis > 0 else 0.0,
    )

    logger.debug(
        "calculation_complete",
        packages=len(package_results),
        simulated=recompute,
        as_of=valuation_date.isoformat(),
        marginal_rate=marginal_rate,
        total_tax=total_tax,
    )

    return CalculationResult(
        personal_info=personal_info,
        annual_salary=annual_salary,
        marginal_tax_rate=marginal_rate * 100,
        packages=tuple(package_results),
        totals=totals,
        as_of_date=valuation_date,
        tax_year=tax_model.tax_year,
    )


def calculate_grant_result(
    grant: Grant,
    personal_info: PersonalInfo,
    *,
    as_of: date | None = None,
    tax_model: IsraeliTaxModel | None = None,
) -> PackageResult | None:
    """Value one grant in isolation, dispatching on its kind.

    Returns ``None`` for an RSU grant with nothing available.
    """
    if isinstance(grant, StockOptionGrant):
        return calculate_option_result(
            grant,
            personal_info.stock_price,
            personal_info.exchange_rate,
            personal_info.annual_salary,
            personal_info.credit_points,
            tax_model=tax_model,
        )
    return calculate_rsu_result(
        grant,
        personal_info.stock_price,
        personal_info.exchange_rate,
        personal_info.annual_salary,
        personal_info.credit_points,
        as_of=as_of,
        tax_model=tax_model,
    )
