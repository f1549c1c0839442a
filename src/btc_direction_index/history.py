from __future__ import annotations

import logging
from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import replace
from datetime import timedelta, timezone
from typing import Literal

from .alignment import TimeSeries
from .composite import PMI_NEUTRAL, compose_index
from .correlation import pearson_correlation
from .snapshots import liquidity_on, liquidity_series
from .types import IndexHistoryPoint, PMISnapshot, PriceSnapshot

logger = logging.getLogger(__name__)

Timespan = Literal["1D", "7D", "30D", "90D", "1Y", "ALL"]

TIMESPAN_DAYS: dict[str, int] = {
    "1D": 1,
    "7D": 7,
    "30D": 30,
    "90D": 90,
    "1Y": 365,
    "ALL": 365 * 15,
}
RECENT_PRICE_WINDOW = 30


def days_for_timespan(timespan: str) -> int:
    return TIMESPAN_DAYS.get(timespan, 365)


def within_timespan(prices: Sequence[PriceSnapshot], timespan: str) -> list[PriceSnapshot]:
    """Prices no older than the timespan, measured back from the newest one."""
    if not prices:
        return []
    start = max(p.timestamp for p in prices) - timedelta(days=days_for_timespan(timespan))
    return [p for p in prices if p.timestamp >= start]


def build_index_history(
    fed: TimeSeries,
    tga: TimeSeries,
    rrp: TimeSeries,
    pmi: TimeSeries,
    prices: Sequence[PriceSnapshot],
) -> list[IndexHistoryPoint]:
    """Rebuild one direction-index value per price observation.

    Liquidity and PMI are forward-filled onto each price's UTC calendar date.
    Points with no liquidity observation yet, or with fewer than two prices up
    to and including them, are skipped. PMI defaults to 50 before its first
    observation.
    """
    liquidity = liquidity_series(fed, tga, rrp)
    liquidity_history = liquidity.values()
    if not liquidity_history:
        logger.warning("no liquidity history available; index history is empty")
        return []

    pmi_history = pmi.values()
    if not pmi_history:
        logger.warning("no PMI history available; PMI defaults to %s", PMI_NEUTRAL)

    ordered = sorted(prices, key=lambda p: p.timestamp)
    stamps = [p.timestamp for p in ordered]
    closes = [p.price for p in ordered]

    history: list[IndexHistoryPoint] = []
    for point in ordered:
        day = point.timestamp.astimezone(timezone.utc).date()

        liq_entry = liquidity.entry_at(day)
        if liq_entry is None:
            continue
        snapshot = liquidity_on(fed, tga, rrp, liq_entry.date)
        if snapshot is None:
            continue

        pmi_value = pmi.value_at(day)
        pmi_snapshot = PMISnapshot(value=pmi_value if pmi_value is not None else PMI_NEUTRAL, date=day)

        end = bisect_right(stamps, point.timestamp)
        recent = closes[max(0, end - RECENT_PRICE_WINDOW):end]
        if len(recent) < 2:
            continue

        result = compose_index(snapshot, liquidity_history, pmi_snapshot, pmi_history, point, recent)
        result = replace(result, timestamp=point.timestamp)
        history.append(IndexHistoryPoint(timestamp=result.timestamp, date=day, index=result.index, price=point.price))

    logger.debug("rebuilt %d index history points from %d prices", len(history), len(ordered))
    return history


def index_price_correlation(history: Sequence[IndexHistoryPoint]) -> float:
    return pearson_correlation([h.index for h in history], [h.price for h in history])


def describe_correlation(r: float) -> str:
    if r > 0.7:
        return "strong positive"
    if r > 0.3:
        return "moderate positive"
    if r > -0.3:
        return "weak"
    return "negative"
