"""Runtime settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

FRANKFURTER_API = "https://api.frankfurter.dev/v1/latest"


class Settings(BaseSettings):
    """Settings read from ``ILEQUITY_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="ILEQUITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    tax_year: int = 2025
    """Year of the bundled tax tables to apply."""

    data_dir: Path = Path.home() / ".ilequity"
    """Directory holding the saved portfolio."""

    exchange_rate_url: str = FRANKFURTER_API
    """Endpoint returning the latest USD/ILS rate."""

    exchange_rate_timeout: float = 10.0
    """HTTP timeout in seconds for the exchange-rate request."""

    log_format: Literal["console", "json"] | None = None
    """Logging renderer; console when unset."""

    debug: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
