"""File-backed persistence of the user's portfolio."""

from __future__ import annotations

from pathlib import Path

from ilequity.config.defaults import empty_portfolio
from ilequity.config.schema import Portfolio
from ilequity.io.serialize import dump_portfolio, load_portfolio
from ilequity.utils.exceptions import ConfigError
from ilequity.utils.logging import get_logger

STORAGE_KEY = "israeli-equity-calculator"

logger = get_logger(__name__)


class PortfolioStore:
    """Load and save the portfolio under a fixed storage key.

    Only inputs are stored; every load is followed by a fresh calculation.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir)

    @property
    def path(self) -> Path:
        return self._data_dir / f"{STORAGE_KEY}.json"

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Portfolio:
        """Return the saved portfolio, or an empty one when none is saved."""
        if not self.exists():
            logger.info("portfolio_not_found", path=str(self.path))
            return empty_portfolio()
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read portfolio {self.path}: {exc}") from exc
        portfolio = load_portfolio(text)
        logger.info(
            "portfolio_loaded",
            path=str(self.path),
            stock_options=len(portfolio.stock_options),
            rsus=len(portfolio.rsus),
        )
        return portfolio

    def save(self, portfolio: Portfolio) -> Path:
        """Write ``portfolio`` and return the file path."""
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(dump_portfolio(portfolio), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot write portfolio {self.path}: {exc}") from exc
        logger.info("portfolio_saved", path=str(self.path))
        return self.path

    def clear(self) -> None:
        """Delete the saved portfolio, if any."""
        self.path.unlink(missing_ok=True)
        logger.info("portfolio_cleared", path=str(self.path))
