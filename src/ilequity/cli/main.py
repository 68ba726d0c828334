"""CLI entry point for ilequity."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from ilequity.analytics.sensitivity import price_sweep, stock_price_grid
from ilequity.config.defaults import empty_portfolio
from ilequity.config.schema import (
    GrantKind,
    Portfolio,
    RSUGrant,
    SimulationParams,
    StockOptionGrant,
)
from ilequity.config.settings import get_settings
from ilequity.config.validation import (
    FieldErrors,
    error_messages,
    validate_portfolio,
    validate_rsu,
    validate_stock_option,
)
from ilequity.core.engine import calculate
from ilequity.core.portfolio import (
    add_grant,
    remove_grant,
    reorder_grants,
    update_grant,
    update_personal_info,
)
from ilequity.core.results import CalculationResult
from ilequity.core.vesting import vested_quantity
from ilequity.io.exchange_rate import fetch_exchange_rate
from ilequity.io.serialize import dump_results_summary, load_portfolio
from ilequity.io.store import PortfolioStore
from ilequity.taxes.israel import IsraeliTaxModel
from ilequity.utils.exceptions import IlEquityError
from ilequity.utils.formatting import format_nis, format_percentage, format_usd
from ilequity.utils.logging import configure_logging

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


_NO_PORTFOLIO = (
    "No saved portfolio. Run `ilequity personal set --monthly-salary N --stock-price X`"
    " first, or pass --portfolio."
)


def _store() -> PortfolioStore:
    return PortfolioStore(get_settings().data_dir)


def _load(portfolio_path: Path | None) -> Portfolio:
    """Load a portfolio file, or the saved portfolio when no path is given."""
    try:
        if portfolio_path is not None:
            return load_portfolio(portfolio_path.read_text(encoding="utf-8"))
        store = _store()
        if not store.exists():
            raise click.ClickException(_NO_PORTFOLIO)
        return store.load()
    except IlEquityError as exc:
        raise click.ClickException(str(exc)) from exc


def _save(portfolio: Portfolio) -> Path:
    try:
        return _store().save(portfolio)
    except IlEquityError as exc:
        raise click.ClickException(str(exc)) from exc


def _field_errors(exc: ValidationError) -> click.ClickException:
    details = "\n".join(f"  {path}: {msg}" for path, msg in error_messages(exc).items())
    return click.ClickException(f"Invalid input:\n{details}")


def _tax_model() -> IsraeliTaxModel:
    try:
        return IsraeliTaxModel(get_settings().tax_year)
    except IlEquityError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_result(result: CalculationResult) -> None:
    info = result.personal_info
    click.echo(
        f"As of {result.as_of_date.isoformat()} | price {format_usd(info.stock_price)}"
        f" | rate {info.exchange_rate:.4f} | tax year {result.tax_year}"
    )
    click.echo(
        f"Annual salary: {format_nis(result.annual_salary)}"
        f" | marginal rate: {format_percentage(result.marginal_tax_rate, 0)}"
    )
    if not result.packages:
        click.echo("\nNo grants with available shares.")
    for pkg in result.packages:
        label = pkg.kind.upper()
        if pkg.route is not None:
            label += f", {pkg.route}"
        if pkg.is_underwater:
            label += ", underwater"
        click.echo(f"\n{pkg.name} [{label}]")
        click.echo(
            f"  gross {format_nis(pkg.gross_value_nis)} ({format_usd(pkg.gross_value_usd)})"
            f"  tax {format_nis(pkg.tax_breakdown.total_tax)}"
            f"  net {format_nis(pkg.net_value_nis)} ({format_usd(pkg.net_value_usd)})"
        )

    totals = result.totals
    tax = totals.tax_breakdown
    click.echo("\nTotals:")
    click.echo(f"  Gross value:      {format_nis(totals.gross_value_nis)}")
    click.echo(f"  Income tax:       {format_nis(tax.income_tax)}")
    click.echo(f"  Capital gains:    {format_nis(tax.capital_gains_tax)}")
    click.echo(f"  Bituah Leumi:     {format_nis(tax.bituah_leumi)}")
    click.echo(f"  Health insurance: {format_nis(tax.health_insurance)}")
    click.echo(f"  Credit points:    -{format_nis(tax.credit_points_reduction)}")
    click.echo(f"  Total tax:        {format_nis(tax.total_tax)}")
    click.echo(
        f"  Net value:        {format_nis(totals.net_value_nis)}"
        f" ({format_usd(totals.net_value_usd)})"
    )
    click.echo(f"  Effective rate:   {format_percentage(totals.effective_tax_rate)}")


_portfolio_option = click.option(
    "--portfolio",
    "portfolio_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Portfolio JSON file. Uses the saved portfolio if not provided.",
)


@click.group()
@click.version_option(package_name="ilequity")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer (default from ILEQUITY_LOG_FORMAT).",
)
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging.")
def cli(log_format: str | None, debug: bool) -> None:
    """ilequity: net value of Israeli employee equity after tax."""
    settings = get_settings()
    configure_logging(log_format or settings.log_format, debug or settings.debug)


@cli.command("calculate")
@_portfolio_option
@click.option("--as-of", type=_DATE, default=None, help="Vesting date (YYYY-MM-DD).")
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to write results JSON.",
)
def calculate_cmd(
    portfolio_path: Path | None,
    as_of: datetime | None,
    output_path: Path | None,
) -> None:
    """Calculate net value of the portfolio today."""
    portfolio = _load(portfolio_path)
    result = calculate(
        portfolio.personal_info,
        portfolio.stock_options,
        portfolio.rsus,
        as_of=_as_date(as_of),
        tax_model=_tax_model(),
    )
    _echo_result(result)
    if output_path is not None:
        output_path.write_text(dump_results_summary(result), encoding="utf-8")
        click.echo(f"\nResults written to {output_path}")


@cli.command("simulate")
@_portfolio_option
@click.option("--date", "target_date", type=_DATE, required=True, help="Target date.")
@click.option("--stock-price", type=float, required=True, help="Projected price in USD.")
@click.option("--exchange-rate", type=float, default=None, help="Projected NIS per USD.")
def simulate_cmd(
    portfolio_path: Path | None,
    target_date: datetime,
    stock_price: float,
    exchange_rate: float | None,
) -> None:
    """Project the portfolio to a future date and price."""
    portfolio = _load(portfolio_path)
    if not portfolio.stock_options and not portfolio.rsus:
        raise click.ClickException("Add some grants first to simulate future values.")
    try:
        simulation = SimulationParams(
            as_of_date=target_date.date(),
            stock_price=stock_price,
            exchange_rate=exchange_rate,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    result = calculate(
        portfolio.personal_info,
        portfolio.stock_options,
        portfolio.rsus,
        simulation,
        tax_model=_tax_model(),
    )
    _echo_result(result)


@cli.command("sweep")
@_portfolio_option
@click.option(
    "--spread",
    type=click.FloatRange(min=0),
    default=0.5,
    show_default=True,
    help="Price range +/- as a fraction.",
)
@click.option("--points", type=int, default=11, show_default=True, help="Grid points.")
def sweep_cmd(portfolio_path: Path | None, spread: float, points: int) -> None:
    """Tabulate net value across a range of stock prices."""
    portfolio = _load(portfolio_path)
    if points < 2:
        raise click.BadParameter("must be at least 2", param_hint="--points")
    prices = stock_price_grid(portfolio.personal_info.stock_price, spread, points)
    sweep = price_sweep(
        portfolio.personal_info,
        portfolio.stock_options,
        portfolio.rsus,
        prices,
        tax_model=_tax_model(),
    )
    click.echo(f"{'Price':>12}  {'Gross':>14}  {'Tax':>14}  {'Net':>14}")
    for price, gross, tax, net in zip(
        sweep.prices, sweep.gross_value_nis, sweep.total_tax_nis, sweep.net_value_nis
    ):
        click.echo(
            f"{format_usd(price):>12}  {format_nis(gross):>14}"
            f"  {format_nis(tax):>14}  {format_nis(net):>14}"
        )


@cli.command("fetch-rate")
@click.option("--save", is_flag=True, default=False, help="Store the rate in the portfolio.")
def fetch_rate_cmd(save: bool) -> None:
    """Fetch the latest USD/ILS exchange rate."""
    try:
        fx = fetch_exchange_rate()
    except IlEquityError as exc:
        raise click.ClickException(f"{exc}. Enter the rate manually instead.") from exc
    click.echo(f"USD/ILS {fx.rate:.4f} (as of {fx.date})")
    if save:
        try:
            portfolio = update_personal_info(_load(None), exchange_rate=fx.rate)
        except ValidationError as exc:
            raise _field_errors(exc) from exc
        click.echo(f"Saved to {_save(portfolio)}")


@cli.command("validate")
@click.argument(
    "portfolio_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def validate_cmd(portfolio_path: Path) -> None:
    """Check a portfolio file and list field errors."""
    try:
        data = json.loads(portfolio_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Not valid JSON: {exc}") from exc
    outcome = validate_portfolio(data)
    if isinstance(outcome, dict):
        for path, message in outcome.items():
            click.echo(f"{path or '<root>'}: {message}")
        click.get_current_context().exit(1)
    click.echo(
        f"OK: {len(outcome.stock_options)} option grant(s), {len(outcome.rsus)} RSU grant(s)"
    )


@cli.command("vesting")
@click.option("--total", type=int, required=True, help="Total granted shares.")
@click.option("--first-date", type=_DATE, required=True, help="First vesting date.")
@click.option("--years", type=int, default=4, show_default=True, help="Vesting duration.")
@click.option(
    "--frequency",
    type=click.Choice(["monthly", "quarterly", "annually"]),
    default="quarterly",
    show_default=True,
)
@click.option("--as-of", type=_DATE, default=None, help="Valuation date (default today).")
def vesting_cmd(
    total: int,
    first_date: datetime,
    years: int,
    frequency: str,
    as_of: datetime | None,
) -> None:
    """Show how many shares have vested."""
    vested = vested_quantity(
        total, first_date.date(), years, frequency, _as_date(as_of)  # type: ignore[arg-type]
    )
    click.echo(f"Vested: {vested} of {total}")



@cli.group("personal")
def personal() -> None:
    """Show or edit the saved personal info."""


@personal.command("set")
@click.option("--monthly-salary", type=float, default=None, help="Gross monthly salary (NIS).")
@click.option("--credit-points", type=float, default=None, help="Tax credit points.")
@click.option("--exchange-rate", type=float, default=None, help="NIS per USD.")
@click.option("--stock-price", type=float, default=None, help="Current stock price (USD).")
def personal_set_cmd(
    monthly_salary: float | None,
    credit_points: float | None,
    exchange_rate: float | None,
    stock_price: float | None,
) -> None:
    """Update personal info. A new portfolio needs a salary and a stock price."""
    changes = {
        key: value
        for key, value in {
            "monthly_salary": monthly_salary,
            "credit_points": credit_points,
            "exchange_rate": exchange_rate,
            "stock_price": stock_price,
        }.items()
        if value is not None
    }
    if not changes:
        raise click.UsageError("Nothing to update.")

    if _store().exists():
        portfolio = _load(None)
    else:
        missing = [
            option
            for option, key in (
                ("--monthly-salary", "monthly_salary"),
                ("--stock-price", "stock_price"),
            )
            if key not in changes
        ]
        if missing:
            raise click.UsageError(f"{' and '.join(missing)} required for a new portfolio.")
        portfolio = empty_portfolio()

    try:
        portfolio = update_personal_info(portfolio, **changes)
    except ValidationError as exc:
        raise _field_errors(exc) from exc
    path = _save(portfolio)
    _echo_personal(portfolio)
    click.echo(f"Saved to {path}")


@personal.command("show")
def personal_show_cmd() -> None:
    """Print the saved personal info."""
    _echo_personal(_load(None))


def _echo_personal(portfolio: Portfolio) -> None:
    info = portfolio.personal_info
    click.echo(
        f"Salary {format_nis(info.monthly_salary)}/month"
        f" | credit points {info.credit_points:g}"
        f" | rate {info.exchange_rate:.4f}"
        f" | price {format_usd(info.stock_price)}"
    )


_KIND = click.Choice(["option", "rsu"])


def _grant_fields(func: Callable[..., None]) -> Callable[..., None]:
    """Options shared by ``grant add-option`` and ``grant add-rsu``."""
    options = [
        click.option("--name", required=True, help="Display name (1-50 chars)."),
        click.option("--total", "total_quantity", type=int, required=True),
        click.option(
            "--vested",
            "vested_quantity",
            type=int,
            default=None,
            help="Vested shares. Omit to follow the vesting schedule.",
        ),
        click.option("--used", "used_quantity", type=int, default=0, show_default=True),
        click.option("--first-date", "first_vesting_date", type=_DATE, default=None),
        click.option(
            "--years", "vesting_duration_years", type=int, default=4, show_default=True
        ),
        click.option(
            "--frequency",
            "vesting_frequency",
            type=click.Choice(["monthly", "quarterly", "annually"]),
            default="quarterly",
            show_default=True,
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _add(outcome: StockOptionGrant | RSUGrant | FieldErrors) -> None:
    if isinstance(outcome, dict):
        details = "\n".join(f"  {path}: {msg}" for path, msg in outcome.items())
        raise click.ClickException(f"Invalid input:\n{details}")
    _save(add_grant(_load(None), outcome))
    click.echo(f"Added {outcome.kind} grant {outcome.name!r} ({outcome.id})")


def _grant_data(fields: dict[str, Any]) -> dict[str, Any]:
    return {**fields, "first_vesting_date": _as_date(fields["first_vesting_date"])}


@cli.group("grant")
def grant() -> None:
    """List, add, edit, remove and reorder saved grants."""


@grant.command("list")
def grant_list_cmd() -> None:
    """List saved grants in calculation order."""
    portfolio = _load(None)
    rows: list[tuple[str, list[StockOptionGrant] | list[RSUGrant]]] = [
        ("option", portfolio.stock_options),
        ("rsu", portfolio.rsus),
    ]
    for kind, grants in rows:
        for index, item in enumerate(grants):
            vested = "schedule" if item.vested_quantity is None else item.vested_quantity
            click.echo(
                f"{kind} #{index} {item.id} {item.name!r}: total {item.total_quantity},"
                f" vested {vested}, used {item.used_quantity}"
            )


@grant.command("add-option")
@_grant_fields
@click.option("--exercise-price", type=float, required=True, help="Strike price (USD).")
@click.option(
    "--average-price", type=float, required=True, help="30-day average at grant (USD)."
)
def grant_add_option_cmd(**fields: Any) -> None:
    """Add a stock option grant."""
    _add(validate_stock_option(_grant_data(fields)))


@grant.command("add-rsu")
@_grant_fields
@click.option(
    "--average-vesting-price", type=float, required=True, help="Price at vesting (USD)."
)
def grant_add_rsu_cmd(**fields: Any) -> None:
    """Add an RSU grant."""
    _add(validate_rsu(_grant_data(fields)))


def _parse_assignment(assignment: str) -> tuple[str, str | None]:
    field, sep, value = assignment.partition("=")
    if not sep or not field:
        raise click.BadParameter(
            f"expected FIELD=VALUE, got {assignment!r}", param_hint="--set"
        )
    return field.strip(), None if value.strip().lower() in ("", "none") else value.strip()


@grant.command("update")
@click.argument("kind", type=_KIND)
@click.argument("grant_id")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    required=True,
    help="FIELD=VALUE, e.g. used_quantity=300. Use 'none' to clear vested_quantity.",
)
def grant_update_cmd(kind: GrantKind, grant_id: str, assignments: tuple[str, ...]) -> None:
    """Change fields of a saved grant."""
    changes = dict(_parse_assignment(a) for a in assignments)
    try:
        portfolio = update_grant(_load(None), kind, grant_id, **changes)
    except KeyError as exc:
        raise click.ClickException(f"No {kind} grant with id {grant_id}") from exc
    except ValidationError as exc:
        raise _field_errors(exc) from exc
    _save(portfolio)
    click.echo(f"Updated {kind} grant {grant_id}")


@grant.command("remove")
@click.argument("kind", type=_KIND)
@click.argument("grant_id")
def grant_remove_cmd(kind: GrantKind, grant_id: str) -> None:
    """Delete a saved grant."""
    portfolio = _load(None)
    grants = portfolio.stock_options if kind == "option" else portfolio.rsus
    if all(g.id != grant_id for g in grants):
        raise click.ClickException(f"No {kind} grant with id {grant_id}")
    _save(remove_grant(portfolio, kind, grant_id))
    click.echo(f"Removed {kind} grant {grant_id}")


@grant.command("reorder")
@click.argument("kind", type=_KIND)
@click.argument("from_index", type=int)
@click.argument("to_index", type=int)
def grant_reorder_cmd(kind: GrantKind, from_index: int, to_index: int) -> None:
    """Move a grant from one position to another."""
    portfolio = _load(None)
    count = len(portfolio.stock_options if kind == "option" else portfolio.rsus)
    for index in (from_index, to_index):
        if not 0 <= index < count:
            raise click.BadParameter(f"index {index} out of range 0..{count - 1}")
    _save(reorder_grants(portfolio, kind, from_index, to_index))
    click.echo(f"Moved {kind} grant #{from_index} to #{to_index}")


if __name__ == "__main__":
    cli()
