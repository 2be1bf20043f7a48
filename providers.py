"""Stock quote providers - supports multiple APIs."""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd
import requests

from config import ConfigError
from models import Quote

logger = logging.getLogger(__name__)


class QuoteError(Exception):
    """Base class for failures to obtain quotes for a symbol."""


class FetchError(QuoteError):
    """The provider could not be reached or reported an error."""


class ParseError(QuoteError):
    """The provider answered with a payload that could not be read."""


def _frame_to_quotes(df: pd.DataFrame, close_column: str, date_column: str = "Date") -> list[Quote]:
    """Convert a provider dataframe into quotes."""
    if df.empty:
        return []

    if date_column not in df.columns:
        df = df.reset_index()
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = [col[0] if isinstance(col, tuple) else col for col in df.columns]

    missing = {date_column, close_column} - set(df.columns)
    if missing:
        raise ParseError(f"Missing columns: {', '.join(sorted(missing))}")

    try:
        timestamps = pd.to_datetime(df[date_column], utc=True)
        closes = df[close_column].astype(float)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Unreadable quotes: {e}") from e

    return [
        Quote(timestamp=ts.to_pydatetime(), adjusted_close=float(close))
        for ts, close in zip(timestamps, closes)
    ]


class DataProvider(ABC):
    """Abstract base class for stock quote providers."""

    @abstractmethod
    def fetch_quotes(self, symbol: str, start: datetime, end: datetime) -> list[Quote]:
        """
        Fetch daily quotes for a symbol between two timestamps.

        Raises:
            FetchError: the provider failed
            ParseError: the response could not be read
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""


class YahooFinanceProvider(DataProvider):
    """Yahoo Finance provider using yfinance."""

    @property
    def name(self) -> str:
        return "Yahoo Finance"

    def fetch_quotes(self, symbol: str, start: datetime, end: datetime) -> list[Quote]:
        import yfinance as yf

        logger.debug("Fetching %s from %s between %s and %s", symbol, self.name, start, end)
        try:
            df = yf.download(
                symbol,
                start=start,
                end=end + timedelta(days=1),
                auto_adjust=False,
                progress=False,
                timeout=30
            )
        except Exception as e:
            raise FetchError(f"Yahoo Finance error for {symbol}: {e}") from e

        if df is None:
            raise FetchError(f"Yahoo Finance returned nothing for {symbol}")
        return _frame_to_quotes(df, "Adj Close")


class AlphaVantageProvider(DataProvider):
    """Alpha Vantage provider - requires an API key."""

    def __init__(self, api_key: str = "demo"):
        self.api_key = api_key
        self.base_url = "https://www.alphavantage.co/query"

    @property
    def name(self) -> str:
        return "Alpha Vantage"

    def fetch_quotes(self, symbol: str, start: datetime, end: datetime) -> list[Quote]:
        params = {
            "function": "TIME_SERIES_DAILY_ADJUSTED",
            "symbol": symbol,
            "apikey": self.api_key,
            "outputsize": "full",  # Get all available data
            "datatype": "json"
        }

        logger.debug("Fetching %s from %s", symbol, self.name)
        try:
            response = requests.get(self.base_url, params=params, timeout=30)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Alpha Vantage error for {symbol}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"Alpha Vantage returned invalid JSON for {symbol}") from e

        if not isinstance(data, dict):
            raise ParseError(f"Alpha Vantage returned an unexpected payload for {symbol}")
        if "Time Series (Daily)" not in data:
            error = data.get("Note", data.get("Information", data.get("Error Message", "Unknown error")))
            raise FetchError(f"Alpha Vantage: {str(error)[:80]}")

        records = []
        try:
            for date_str, values in data["Time Series (Daily)"].items():
                record_date = date.fromisoformat(date_str)
                if start.date() <= record_date <= end.date():
                    records.append({
                        "Date": record_date,
                        "Adj Close": float(values["5. adjusted close"])
                    })
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Alpha Vantage returned malformed quotes for {symbol}") from e

        return _frame_to_quotes(pd.DataFrame(records), "Adj Close")


class FMPProvider(DataProvider):
    """Financial Modeling Prep - free tier available."""

    def __init__(self, api_key: str = "demo"):
        self.api_key = api_key
        self.base_url = "https://financialmodelingprep.com/api/v3"

    @property
    def name(self) -> str:
        return "Financial Modeling Prep"

    def fetch_quotes(self, symbol: str, start: datetime, end: datetime) -> list[Quote]:
        url = f"{self.base_url}/historical-price-full/{symbol}"
        params = {
            "from": start.date().isoformat(),
            "to": end.date().isoformat(),
            "apikey": self.api_key
        }

        logger.debug("Fetching %s from %s", symbol, self.name)
        try:
            response = requests.get(url, params=params, timeout=30)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"FMP error for {symbol}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"FMP returned invalid JSON for {symbol}") from e

        if not isinstance(data, dict):
            raise ParseError(f"FMP returned an unexpected payload for {symbol}")
        if "historical" not in data:
            logger.debug("FMP returned no history for %s", symbol)
            return []

        try:
            records = [
                {
                    "Date": date.fromisoformat(item["date"]),
                    "Adj Close": float(item["adjClose"])
                }
                for item in data["historical"]
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"FMP returned malformed quotes for {symbol}") from e

        return _frame_to_quotes(pd.DataFrame(records), "Adj Close")


PROVIDERS = {
    "yahoo": YahooFinanceProvider,
    "alphavantage": AlphaVantageProvider,
    "fmp": FMPProvider,
}


def get_provider(name: str = "yahoo", api_key: Optional[str] = None) -> DataProvider:
    """Get a provider by name."""
    try:
        provider_cls = PROVIDERS[name]
    except KeyError:
        raise ConfigError(f"Unknown provider '{name}'") from None

    if provider_cls is YahooFinanceProvider:
        return provider_cls()
    if not api_key:
        logger.info("No API key for %s, using the demo key", name)
        return provider_cls()
    return provider_cls(api_key)
