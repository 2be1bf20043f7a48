from __future__ import annotations

import random

import pytest

from models import PriceSeries
from series_stats import max_price, min_price, n_window_sma, price_diff


def test_empty_series_has_no_statistics():
    empty = PriceSeries()

    assert price_diff(empty) is None
    assert max_price(empty) is None
    assert min_price(empty) is None
    for n in (0, 1, 2, 30):
        assert n_window_sma(n, empty) is None


def test_price_diff_relative_to_first_price():
    assert price_diff(PriceSeries([5.0, 10.0])) == (5.0, 1.0)


def test_price_diff_substitutes_zero_denominator():
    assert price_diff(PriceSeries([0.0, 10.0])) == (10.0, 10.0)


def test_price_diff_ignores_intermediate_prices():
    noisy = PriceSeries([4.0, 100.0, -3.0, 0.5, 5.0])
    assert price_diff(noisy) == (1.0, 0.25)


def test_price_diff_single_price_is_flat():
    assert price_diff(PriceSeries([7.5])) == (0.0, 0.0)


def test_sma_returns_one_mean_per_window():
    prices = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    sma = n_window_sma(3, PriceSeries(prices))

    assert len(sma) == len(prices) - 3 + 1
    expected = [sum(prices[i:i + 3]) / 3 for i in range(len(prices) - 2)]
    assert sma == expected


def test_sma_window_equal_to_length_gives_single_mean():
    assert n_window_sma(4, PriceSeries([2.0, 4.0, 6.0, 8.0])) == [5.0]


def test_sma_short_series_is_empty_not_absent():
    sma = n_window_sma(30, PriceSeries([100.0, 110.0]))
    assert sma is not None
    assert sma == []


@pytest.mark.parametrize("n", [1, 0, -5])
def test_sma_degenerate_window_is_absent(n):
    assert n_window_sma(n, PriceSeries([1.0, 2.0, 3.0])) is None


def test_max_and_min():
    series = PriceSeries([3.0, -1.0, 7.0, 2.0])
    assert max_price(series) == 7.0
    assert min_price(series) == -1.0


def test_max_of_all_negative_series():
    series = PriceSeries([-8.0, -2.5, -4.0])
    assert max_price(series) == -2.5
    assert min_price(series) == -8.0


def _cent_prices(rng: random.Random, count: int) -> list[float]:
    return [round(rng.uniform(10.0, 500.0), 2) for _ in range(count)]


@pytest.mark.parametrize("n", [2, 3, 7, 30])
def test_sma_equals_mean_of_each_slice(n):
    rng = random.Random(20240101 + n)
    for _ in range(50):
        prices = _cent_prices(rng, 60)

        sma = n_window_sma(n, PriceSeries(prices))

        assert sma == [sum(prices[i:i + n]) / n for i in range(len(prices) - n + 1)]
