from __future__ import annotations

from collections.abc import Sequence

SHORT_WINDOW = 7
MEDIUM_WINDOW = 30
TREND_SCALE = 10.0


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _avg(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def estimate_trend(current_price: float, price_history: Sequence[float]) -> float:
    """Short vs medium moving-average momentum, scaled and clamped to [-1, 1].

    ``current_price`` is part of the call signature but does not enter the
    calculation; only the trailing windows of ``price_history`` do.
    """
    if len(price_history) < 2:
        return 0.0

    history = list(price_history)
    short = history[-SHORT_WINDOW:]
    medium = history[-MEDIUM_WINDOW:]
    if not short or not medium:
        return 0.0

    medium_avg = _avg(medium)
    if medium_avg == 0:
        return 0.0

    trend = (_avg(short) - medium_avg) / medium_avg
    return clamp(trend * TREND_SCALE, -1.0, 1.0)
