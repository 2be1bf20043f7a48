"""Data model for price series and per-window statistics."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator

import pandas as pd


@dataclass(frozen=True)
class Quote:
    """A single daily quote as returned by a data provider."""

    timestamp: datetime
    adjusted_close: float


class PriceSeries:
    """Adjusted closes for one symbol, ordered by quote timestamp."""

    def __init__(self, closes: Iterable[float] = ()):
        self.closes = pd.Series(list(closes), dtype="float64")

    @classmethod
    def from_quotes(cls, quotes: Iterable[Quote]) -> "PriceSeries":
        """
        Build a series from quotes in any order.

        Quotes are sorted by timestamp before the adjusted closes are taken.
        Values are not validated; zero and negative prices pass through.
        """
        ordered = sorted(quotes, key=lambda q: q.timestamp)
        return cls(q.adjusted_close for q in ordered)

    def __len__(self) -> int:
        return len(self.closes)

    def __iter__(self) -> Iterator[float]:
        return iter(self.closes.tolist())

    def __repr__(self) -> str:
        return f"PriceSeries({self.closes.tolist()!r})"

    @property
    def is_empty(self) -> bool:
        return self.closes.empty

    @property
    def first(self) -> float:
        return float(self.closes.iloc[0])

    @property
    def last(self) -> float:
        return float(self.closes.iloc[-1])


@dataclass(frozen=True)
class WindowStats:
    """Statistics over one fetched window of a price series."""

    last_price: float
    pct_change: float
    min: float
    max: float
    trailing_sma: float
