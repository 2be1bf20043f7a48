"""CSV report of per-symbol window statistics."""

import csv
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, Optional, TextIO

from models import PriceSeries, WindowStats
from providers import DataProvider, QuoteError
from series_stats import max_price, min_price, n_window_sma, price_diff

logger = logging.getLogger(__name__)


def report_header(window: int = 30) -> list[str]:
    """Column names of the report."""
    return ["period start", "symbol", "price", "change %", "min", "max", f"{window}d avg"]


@dataclass(frozen=True)
class ReportRow:
    """One line of the report."""

    period_start: datetime
    symbol: str
    last_price: float
    pct_change_pct: float
    min: float
    max: float
    trailing_sma: float

    def to_fields(self) -> list[str]:
        return [
            self.period_start.isoformat(),
            self.symbol,
            f"{self.last_price}",
            f"{self.pct_change_pct}%",
            f"${self.min}",
            f"${self.max}",
            f"${self.trailing_sma}",
        ]


def build_row(symbol: str, period_start: datetime, stats: WindowStats) -> ReportRow:
    """Combine a symbol and its window statistics into a report row."""
    return ReportRow(
        period_start=period_start,
        symbol=symbol,
        last_price=stats.last_price,
        pct_change_pct=stats.pct_change * 100.0,
        min=stats.min,
        max=stats.max,
        trailing_sma=stats.trailing_sma,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReportPipeline:
    """Fetches quotes symbol by symbol and turns them into report rows."""

    def __init__(
        self,
        provider: DataProvider,
        sma_window: int = 30,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        now: Callable[[], datetime] = _utc_now,
    ):
        self.provider = provider
        self.sma_window = sma_window
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.now = now

    def summarize(self, series: PriceSeries) -> WindowStats:
        """
        Compute the statistics of a non-empty series.

        Undefined change or moving average fall back to zero so that a row is
        always produced.
        """
        _, pct_change = price_diff(series) or (0.0, 0.0)
        sma = n_window_sma(self.sma_window, series) or []

        return WindowStats(
            last_price=series.last,
            pct_change=pct_change,
            min=min_price(series),
            max=max_price(series),
            trailing_sma=sma[-1] if sma else 0.0,
        )

    def _report_missing(self, symbol: str) -> None:
        print(f"No quotes found '{symbol}'", file=self.err)

    def process_symbol(self, symbol: str, period_start: datetime) -> Optional[ReportRow]:
        """
        Fetch and summarize one symbol.

        Returns:
            The report row, or None when no quotes could be obtained
        """
        try:
            quotes = self.provider.fetch_quotes(symbol, period_start, self.now())
        except QuoteError as e:
            logger.debug("Fetching %s failed: %s", symbol, e)
            self._report_missing(symbol)
            return None

        if not quotes:
            logger.debug("%s returned no quotes for %s", self.provider.name, symbol)
            self._report_missing(symbol)
            return None

        series = PriceSeries.from_quotes(quotes)
        logger.debug("Got %d quotes for %s", len(series), symbol)
        return build_row(symbol, period_start, self.summarize(series))

    def rows(self, symbols: Iterable[str], period_start: datetime) -> Iterator[ReportRow]:
        """Yield report rows in symbol order, skipping symbols without quotes."""
        for symbol in symbols:
            row = self.process_symbol(symbol, period_start)
            if row is not None:
                yield row

    def run(self, symbols: Iterable[str], period_start: datetime) -> int:
        """
        Write the header and one CSV line per reported symbol.

        Returns:
            Number of rows written
        """
        writer = csv.writer(self.out, lineterminator="\n")
        writer.writerow(report_header(self.sma_window))

        count = 0
        for row in self.rows(symbols, period_start):
            writer.writerow(row.to_fields())
            self.out.flush()
            count += 1
        return count
