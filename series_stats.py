"""Descriptive statistics over a PriceSeries.

Every function returns None when the statistic is undefined for its input.
Callers decide what to substitute.
"""

from typing import Optional

from models import PriceSeries


def price_diff(series: PriceSeries) -> Optional[tuple[float, float]]:
    """
    Absolute and relative change between the first and last price.

    A first price of exactly 0.0 is replaced by 1.0 as the denominator, so the
    relative figure equals the absolute one in that case.

    Returns:
        (absolute, relative), or None for an empty series
    """
    if series.is_empty:
        return None

    first, last = series.first, series.last
    diff = last - first
    denominator = 1.0 if first == 0.0 else first
    return diff, diff / denominator


def n_window_sma(n: int, series: PriceSeries) -> Optional[list[float]]:
    """
    Simple moving average over every window of n consecutive prices.

    Args:
        n: Window size, must be greater than 1
        series: Prices in chronological order

    Returns:
        One mean per window start, in series order. An empty list when the
        series is shorter than the window; None when the series is empty or
        n <= 1.
    """
    if series.is_empty or n <= 1:
        return None
    if len(series) < n:
        return []

    # Each mean is summed from its own window, left to right
    means = series.closes.rolling(window=n, min_periods=n).apply(
        lambda window: sum(window.tolist()) / n, raw=True
    )
    return means.iloc[n - 1:].tolist()


def max_price(series: PriceSeries) -> Optional[float]:
    """Highest price in the series."""
    if series.is_empty:
        return None
    return float(series.closes.max())


def min_price(series: PriceSeries) -> Optional[float]:
    """Lowest price in the series."""
    if series.is_empty:
        return None
    return float(series.closes.min())
