from datetime import date, datetime, timedelta, timezone

from btc_direction_index.alignment import TimeSeries, forward_fill, merge_nearest
from btc_direction_index.types import MergedPoint, TimeSeriesPoint

T0 = datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_forward_fill_most_recent_on_or_before() -> None:
    s = TimeSeries.from_pairs([(date(2024, 1, 1), 1.0), (date(2024, 2, 1), 2.0)])
    assert s.value_at(date(2024, 1, 15)) == 1.0
    assert s.value_at(date(2023, 12, 1)) is None
    assert s.value_at(date(2024, 3, 1)) == 2.0
    assert s.value_at(date(2024, 2, 1)) == 2.0


def test_forward_fill_bulk() -> None:
    s = TimeSeries.from_pairs([(date(2024, 1, 1), 1.0), (date(2024, 2, 1), 2.0)])
    targets = [date(2023, 12, 31), date(2024, 1, 31), date(2024, 2, 2)]
    assert forward_fill(s, targets) == [None, 1.0, 2.0]


def test_unsorted_input_and_duplicate_dates() -> None:
    s = TimeSeries(
        [
            TimeSeriesPoint(date(2024, 2, 1), 2.0),
            TimeSeriesPoint(date(2024, 1, 1), 1.0),
            TimeSeriesPoint(date(2024, 2, 1), 3.0),
        ]
    )
    assert s.dates() == [date(2024, 1, 1), date(2024, 2, 1)]
    assert s.values() == [1.0, 3.0]
    assert s.latest() == TimeSeriesPoint(date(2024, 2, 1), 3.0)


def test_exact_lookup_and_entry_at() -> None:
    s = TimeSeries.from_pairs([(date(2024, 1, 1), 1.0), (date(2024, 2, 1), 2.0)])
    assert s.get(date(2024, 1, 1)) == 1.0
    assert s.get(date(2024, 1, 2)) is None
    assert s.entry_at(date(2024, 1, 20)) == TimeSeriesPoint(date(2024, 1, 1), 1.0)


def test_empty_series() -> None:
    s = TimeSeries()
    assert len(s) == 0
    assert s.latest() is None
    assert s.value_at(date(2024, 1, 1)) is None


def test_nearest_drops_points_beyond_tolerance() -> None:
    merged = merge_nearest([(T0, 100.0), (T0 + timedelta(hours=25), 101.0)], [(T0, 55.0)])
    assert merged == [MergedPoint(timestamp=T0, price=100.0, index=55.0)]


def test_nearest_tolerance_is_strict() -> None:
    assert merge_nearest([(T0 + timedelta(hours=24), 100.0)], [(T0, 55.0)]) == []


def test_nearest_uses_fallback_when_index_empty() -> None:
    prices = [(T0, 100.0), (T0 + timedelta(hours=25), 101.0)]
    merged = merge_nearest(prices, [])
    assert [m.index for m in merged] == [50.0, 50.0]
    assert [m.price for m in merged] == [100.0, 101.0]


def test_nearest_prefers_exact_then_closest() -> None:
    index = [(T0, 40.0), (T0 + timedelta(hours=10), 60.0)]
    merged = merge_nearest([(T0, 1.0), (T0 + timedelta(hours=6), 2.0)], index)
    assert [m.index for m in merged] == [40.0, 60.0]


def test_nearest_tie_goes_to_earlier_stamp() -> None:
    index = [(T0, 40.0), (T0 + timedelta(hours=12), 60.0)]
    merged = merge_nearest([(T0 + timedelta(hours=6), 1.0)], index)
    assert merged[0].index == 40.0


def test_nearest_ignores_non_finite_index_values() -> None:
    merged = merge_nearest([(T0, 1.0)], [(T0, float("nan")), (T0 + timedelta(hours=2), 70.0)])
    assert merged[0].index == 70.0
    assert merge_nearest([(T0, 1.0)], [(T0, float("inf"))])[0].index == 50.0


def test_nearest_output_is_sorted() -> None:
    prices = [(T0 + timedelta(hours=2), 2.0), (T0, 1.0)]
    merged = merge_nearest(prices, [(T0, 50.5)])
    assert [m.timestamp for m in merged] == [T0, T0 + timedelta(hours=2)]


def test_nearest_accepts_naive_and_aware_stamps() -> None:
    naive_t0 = T0.replace(tzinfo=None)
    merged = merge_nearest([(naive_t0 + timedelta(hours=1), 100.0)], [(T0, 55.0)])
    assert merged == [MergedPoint(timestamp=T0 + timedelta(hours=1), price=100.0, index=55.0)]

    merged = merge_nearest([(T0, 100.0)], [(naive_t0 + timedelta(hours=3), 60.0)])
    assert [m.index for m in merged] == [60.0]
