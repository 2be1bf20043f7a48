"""Configuration for the stock report."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


# Symbols reported when none are given
DEFAULT_SYMBOLS = ["MSFT", "GOOG", "AAPL", "UBER", "IBM"]


class ConfigError(ValueError):
    """Raised when the report configuration is invalid."""


def parse_symbols(value: str) -> list[str]:
    """Split a comma-separated symbol list, ignoring blank entries."""
    return [s.strip() for s in value.split(",") if s.strip()]


def parse_period_start(value: str) -> datetime:
    """
    Parse the ISO-8601 start of the report period.

    Timestamps without an offset are taken as UTC. The result is always in UTC.
    """
    try:
        ts = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Failed to parse 'from' date: {value!r}") from e

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass
class ReportConfig:
    """Configuration for one report run."""

    # Start of the fetched window, shared by every row
    period_start: datetime

    # Ticker symbols, reported in this order
    symbols: list[str] = field(default_factory=lambda: list(DEFAULT_SYMBOLS))

    # Trailing moving average window in days
    sma_window: int = 30

    # Data provider name, see providers.PROVIDERS
    provider: str = "yahoo"

    api_key: Optional[str] = None
