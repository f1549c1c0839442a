from __future__ import annotations

import math
from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator, Sequence
from datetime import date, datetime, timedelta, timezone

from .types import MergedPoint, TimeSeriesPoint

NEAREST_TOLERANCE = timedelta(hours=24)
FALLBACK_INDEX = 50.0


class TimeSeries:
    """Date-keyed series kept sorted ascending, one value per date.

    Duplicate dates collapse to the last value supplied for that date.
    """

    def __init__(self, points: Iterable[TimeSeriesPoint] = ()) -> None:
        by_date: dict[date, float] = {}
        for p in points:
            by_date[p.date] = float(p.value)
        self._dates: list[date] = sorted(by_date)
        self._values: list[float] = [by_date[d] for d in self._dates]

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[date, float]]) -> TimeSeries:
        return cls(TimeSeriesPoint(date=d, value=v) for d, v in pairs)

    def __len__(self) -> int:
        return len(self._dates)

    def __iter__(self) -> Iterator[TimeSeriesPoint]:
        for d, v in zip(self._dates, self._values):
            yield TimeSeriesPoint(date=d, value=v)

    def dates(self) -> list[date]:
        return list(self._dates)

    def values(self) -> list[float]:
        return list(self._values)

    def get(self, target: date) -> float | None:
        i = bisect_left(self._dates, target)
        if i < len(self._dates) and self._dates[i] == target:
            return self._values[i]
        return None

    def latest(self) -> TimeSeriesPoint | None:
        if not self._dates:
            return None
        return TimeSeriesPoint(date=self._dates[-1], value=self._values[-1])

    def entry_at(self, target: date) -> TimeSeriesPoint | None:
        """Most recent observation dated on or before ``target``."""
        i = bisect_right(self._dates, target)
        if i == 0:
            return None
        return TimeSeriesPoint(date=self._dates[i - 1], value=self._values[i - 1])

    def value_at(self, target: date) -> float | None:
        entry = self.entry_at(target)
        return entry.value if entry is not None else None


def forward_fill(series: TimeSeries, targets: Iterable[date]) -> list[float | None]:
    return [series.value_at(t) for t in targets]


def _as_utc(ts: datetime) -> datetime:
    # Naive stamps are taken to be UTC.
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _nearest_within(
    stamps: Sequence[datetime],
    values: Sequence[float],
    target: datetime,
    tolerance: timedelta,
) -> float | None:
    i = bisect_left(stamps, target)
    if i < len(stamps) and stamps[i] == target:
        return values[i]

    best: float | None = None
    best_diff = tolerance
    # Left neighbour first so the earlier stamp wins a tie.
    for j in (i - 1, i):
        if 0 <= j < len(stamps):
            diff = abs(target - stamps[j])
            if diff < best_diff:
                best_diff = diff
                best = values[j]
    return best


def merge_nearest(
    price_points: Iterable[tuple[datetime, float]],
    index_points: Iterable[tuple[datetime, float]],
    tolerance: timedelta = NEAREST_TOLERANCE,
) -> list[MergedPoint]:
    """Attach the closest index value to each price point for display.

    A price point with no index value strictly within ``tolerance`` is
    dropped, unless the index series is empty altogether, in which case every
    price point carries ``FALLBACK_INDEX``. Timestamps are compared and
    returned in UTC; naive ones are read as UTC.
    """
    by_stamp: dict[datetime, float] = {}
    for ts, value in index_points:
        if value is None or not math.isfinite(value):
            continue
        by_stamp[_as_utc(ts)] = float(value)
    stamps = sorted(by_stamp)
    values = [by_stamp[ts] for ts in stamps]

    merged: list[MergedPoint] = []
    for raw_ts, price in price_points:
        ts = _as_utc(raw_ts)
        if not stamps:
            matched: float | None = FALLBACK_INDEX
        else:
            matched = _nearest_within(stamps, values, ts, tolerance)
        if matched is None:
            continue
        merged.append(MergedPoint(timestamp=ts, price=float(price), index=matched))

    merged.sort(key=lambda m: m.timestamp)
    return merged
