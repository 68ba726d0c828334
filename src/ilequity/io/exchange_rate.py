"""USD/ILS exchange rate from the Frankfurter API."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from ilequity.config.settings import get_settings
from ilequity.utils.exceptions import ExchangeRateError
from ilequity.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """NIS per USD and the publication date reported by the API."""

    rate: float
    date: str


def fetch_exchange_rate(
    client: httpx.Client | None = None,
    *,
    url: str | None = None,
    timeout: float | None = None,
) -> ExchangeRate:
    """Fetch the latest USD/ILS rate. No retries, no caching.

    Args:
        client: Optional HTTP client (tests inject a mock transport).
        url: Endpoint override; defaults to ``Settings.exchange_rate_url``.
        timeout: Timeout override in seconds.

    Raises:
        ExchangeRateError: On network failure, a non-2xx status, or a
            response without an ILS rate.
    """
    settings = get_settings()
    url = url or settings.exchange_rate_url
    timeout = timeout if timeout is not None else settings.exchange_rate_timeout
    params = {"base": "USD", "symbols": "ILS"}

    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        response = http.get(url, params=params)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as exc:
        logger.warning("exchange_rate_fetch_failed", status=exc.response.status_code)
        raise ExchangeRateError(
            f"Failed to fetch exchange rate: {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning("exchange_rate_fetch_failed", error=str(exc))
        raise ExchangeRateError(f"Failed to fetch exchange rate: {exc}") from exc
    except ValueError as exc:
        raise ExchangeRateError("Exchange rate response is not valid JSON") from exc
    finally:
        if owns_client:
            http.close()

    rate = (data.get("rates") or {}).get("ILS") if isinstance(data, dict) else None
    if not isinstance(rate, (int, float)) or rate <= 0:
        raise ExchangeRateError("ILS rate not found in response")

    result = ExchangeRate(rate=float(rate), date=str(data.get("date", "")))
    logger.info("exchange_rate_fetched", rate=result.rate, date=result.date)
    return result
