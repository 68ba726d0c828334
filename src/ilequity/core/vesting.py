"""Vested quantity from a linear periodic vesting schedule.

Periods are measured in continuous days using the mean Julian year
(365.25 days), not calendar month boundaries.
"""

from __future__ import annotations

import math
from datetime import date

from ilequity.config.schema import RSUGrant, StockOptionGrant, VestingFrequency

DAYS_PER_YEAR: float = 365.25

PERIODS_PER_YEAR: dict[str, int] = {
    "monthly": 12,
    "quarterly": 4,
    "annually": 1,
}


def vested_quantity(
    total_quantity: int,
    first_vesting_date: date | None,
    duration_years: int,
    frequency: VestingFrequency,
    as_of: date | None = None,
) -> int:
    """Number of shares vested by ``as_of`` (default today).

    Returns 0 for an unset first vesting date, a non-positive quantity or
    duration, or a first vesting date after ``as_of``. The result is
    rounded to whole shares and saturates at ``total_quantity``.
    """
    if first_vesting_date is None or total_quantity <= 0 or duration_years <= 0:
        return 0
    if as_of is None:
        as_of = date.today()
    if first_vesting_date > as_of:
        return 0

    elapsed_days = (as_of - first_vesting_date).days
    periods_per_year = PERIODS_PER_YEAR[frequency]
    days_per_period = DAYS_PER_YEAR / periods_per_year
    total_periods = duration_years * periods_per_year

    completed = min(math.floor(elapsed_days / days_per_period), total_periods)
    # round-half-up; Python's round() is banker's rounding
    return int(math.floor(total_quantity * completed / total_periods + 0.5))


def grant_vested_quantity(
    grant: StockOptionGrant | RSUGrant,
    as_of: date | None = None,
    *,
    recompute: bool = False,
) -> int:
    """Resolve the vested quantity to use for ``grant``.

    The stored ``vested_quantity`` wins unless it is unset or ``recompute``
    is requested. A grant without a first vesting date always keeps its
    stored quantity.
    """
    stored = grant.vested_quantity
    if stored is not None and (not recompute or grant.first_vesting_date is None):
        return stored
    return vested_quantity(
        grant.total_quantity,
        grant.first_vesting_date,
        grant.vesting_duration_years,
        grant.vesting_frequency,
        as_of,
    )
