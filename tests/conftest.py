"""Shared test fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date

import pytest
import structlog

from ilequity.config.schema import PersonalInfo, RSUGrant, StockOptionGrant
from ilequity.config.settings import get_settings
from ilequity.taxes.israel import IsraeliTaxModel
from ilequity.utils.logging import ROOT_LOGGER


@pytest.fixture
def tax_model() -> IsraeliTaxModel:
    return IsraeliTaxModel(tax_year=2025)


@pytest.fixture
def personal_info() -> PersonalInfo:
    """300k NIS annual salary, 2.25 credit points, $20 share at 3.5 NIS/USD."""
    return PersonalInfo(
        monthly_salary=25_000,
        credit_points=2.25,
        exchange_rate=3.5,
        stock_price=20,
    )


@pytest.fixture
def option_grant() -> StockOptionGrant:
    """Capital-gain route option (exercise == average price)."""
    return StockOptionGrant(
        id="option-1",
        name="Option Grant 1",
        total_quantity=1000,
        vested_quantity=800,
        used_quantity=200,
        exercise_price=10,
        average_price=10,
        first_vesting_date=date(2022, 1, 1),
    )


@pytest.fixture
def rsu_grant() -> RSUGrant:
    return RSUGrant(
        id="rsu-1",
        name="RSU Grant 1",
        total_quantity=500,
        vested_quantity=300,
        used_quantity=0,
        average_vesting_price=15,
        first_vesting_date=date(2022, 1, 1),
    )


@pytest.fixture(autouse=True)
def _isolated_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Iterator[None]:
    """Point the data directory at a temp dir; reset cached settings and logging."""
    monkeypatch.setenv("ILEQUITY_DATA_DIR", str(tmp_path_factory.mktemp("data")))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
    root = logging.getLogger(ROOT_LOGGER)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
