from datetime import date, datetime, timedelta, timezone

import pytest

from btc_direction_index.alignment import TimeSeries
from btc_direction_index.history import (
    build_index_history,
    days_for_timespan,
    describe_correlation,
    index_price_correlation,
    within_timespan,
)
from btc_direction_index.types import IndexHistoryPoint, PriceSnapshot

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def daily_prices(values: list[float]) -> list[PriceSnapshot]:
    return [PriceSnapshot(price=v, timestamp=START + timedelta(days=i)) for i, v in enumerate(values)]


def flat_liquidity() -> tuple[TimeSeries, TimeSeries, TimeSeries]:
    fed = TimeSeries.from_pairs([(date(2024, 1, 3), 100.0), (date(2024, 1, 10), 100.0)])
    tga = TimeSeries.from_pairs([(date(2024, 1, 3), 10.0), (date(2024, 1, 10), 10.0)])
    return fed, tga, TimeSeries()


def test_points_before_first_liquidity_are_skipped() -> None:
    fed, tga, rrp = flat_liquidity()
    prices = daily_prices([50_000.0] * 15)

    history = build_index_history(fed, tga, rrp, TimeSeries(), prices)

    assert len(history) == 13
    assert history[0].date == date(2024, 1, 3)
    assert [h.timestamp for h in history] == [p.timestamp for p in prices[2:]]
    assert all(h.index == 50.0 for h in history)


def test_pmi_forward_fill_defaults_to_neutral() -> None:
    fed, tga, rrp = flat_liquidity()
    pmi = TimeSeries.from_pairs([(date(2024, 1, 10), 60.0)])

    history = build_index_history(fed, tga, rrp, pmi, daily_prices([50_000.0] * 15))
    by_day = {h.date: h.index for h in history}

    # Before the first PMI print the neutral 50 sits far below the history.
    assert by_day[date(2024, 1, 5)] == pytest.approx(32.5)
    assert by_day[date(2024, 1, 12)] == 50.0


def test_needs_two_prices() -> None:
    fed, tga, rrp = flat_liquidity()
    prices = [PriceSnapshot(price=1.0, timestamp=datetime(2024, 1, 5, tzinfo=timezone.utc))]
    assert build_index_history(fed, tga, rrp, TimeSeries(), prices) == []


def test_empty_liquidity_gives_empty_history() -> None:
    assert build_index_history(TimeSeries(), TimeSeries(), TimeSeries(), TimeSeries(), daily_prices([1.0, 2.0])) == []


def test_unsorted_prices_are_ordered() -> None:
    fed, tga, rrp = flat_liquidity()
    prices = daily_prices([100.0 + i for i in range(10)])

    history = build_index_history(fed, tga, rrp, TimeSeries(), list(reversed(prices)))

    assert [h.timestamp for h in history] == sorted(h.timestamp for h in history)
    assert all(0.0 <= h.index <= 100.0 for h in history)
    assert history[-1].index > 50.0


def test_history_correlation() -> None:
    fed, tga, rrp = flat_liquidity()
    prices = daily_prices([100.0 + i * i for i in range(20)])
    history = build_index_history(fed, tga, rrp, TimeSeries(), prices)

    r = index_price_correlation(history)
    assert -1.0 <= r <= 1.0
    assert index_price_correlation([]) == 0.0


def test_correlation_of_hand_built_history() -> None:
    history = [
        IndexHistoryPoint(timestamp=START + timedelta(days=i), date=date(2024, 1, 1 + i), index=40.0 + i, price=100.0 + i)
        for i in range(5)
    ]
    assert index_price_correlation(history) == pytest.approx(1.0)


@pytest.mark.parametrize(
    ("r", "label"),
    [(0.9, "strong positive"), (0.5, "moderate positive"), (0.0, "weak"), (-0.3, "negative"), (-0.8, "negative")],
)
def test_describe_correlation(r: float, label: str) -> None:
    assert describe_correlation(r) == label


def test_timespans() -> None:
    assert days_for_timespan("7D") == 7
    assert days_for_timespan("ALL") == 365 * 15
    assert days_for_timespan("bogus") == 365


def test_within_timespan() -> None:
    prices = daily_prices([float(i) for i in range(20)])
    kept = within_timespan(prices, "7D")
    assert [p.price for p in kept] == [float(i) for i in range(12, 20)]
    assert within_timespan([], "1Y") == []
