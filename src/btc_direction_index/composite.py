from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from .stats import compute_stats, z_score
from .trend import clamp, estimate_trend
from .types import DirectionIndexResult, Interpretation, LiquiditySnapshot, PMISnapshot, PriceSnapshot

logger = logging.getLogger(__name__)

LIQUIDITY_WEIGHT = 0.40
PMI_WEIGHT = 0.35
TREND_WEIGHT = 0.25

PMI_NEUTRAL = 50.0
Z_CLAMP = 2.0

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def interpret(index: float) -> Interpretation:
    if index < 20:
        return "very_bearish"
    if index < 40:
        return "bearish"
    if index < 60:
        return "neutral"
    if index < 80:
        return "bullish"
    return "very_bullish"


def _round_half_up(value: float, ndigits: int = 2) -> float:
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


def compose_index(
    liquidity: LiquiditySnapshot,
    liquidity_history: Sequence[float],
    pmi: PMISnapshot,
    pmi_history: Sequence[float],
    price: PriceSnapshot,
    recent_prices: Sequence[float],
    clock: Clock = utc_now,
) -> DirectionIndexResult:
    """Blend liquidity, PMI and BTC momentum into a 0-100 direction score.

    Both z-scores are clamped to [-2, 2] and halved before weighting, so each
    component contributes within [-1, 1]. The result is stamped by ``clock``;
    callers rebuilding historical points replace the timestamp themselves.
    """
    liquidity_stats = compute_stats(liquidity_history)
    liquidity_z = z_score(liquidity.liquidity, liquidity_stats.mean, liquidity_stats.std_dev)

    # Measure PMI against the expansion/contraction line, not against zero.
    pmi_stats = compute_stats([p - PMI_NEUTRAL for p in pmi_history])
    pmi_z = z_score(pmi.value - PMI_NEUTRAL, pmi_stats.mean, pmi_stats.std_dev)

    trend = estimate_trend(price.price, recent_prices)

    norm_liquidity = clamp(liquidity_z, -Z_CLAMP, Z_CLAMP) / Z_CLAMP
    norm_pmi = clamp(pmi_z, -Z_CLAMP, Z_CLAMP) / Z_CLAMP

    raw = LIQUIDITY_WEIGHT * norm_liquidity + PMI_WEIGHT * norm_pmi + TREND_WEIGHT * trend
    index = clamp(_round_half_up((raw + 1) / 2 * 100), 0.0, 100.0)

    logger.debug(
        "direction index computed",
        extra={"index": index, "liquidity_z": liquidity_z, "pmi_z": pmi_z, "trend": trend},
    )

    return DirectionIndexResult(
        index=index,
        liquidity_z_score=liquidity_z,
        pmi_z_score=pmi_z,
        btc_trend=trend,
        timestamp=clock(),
        interpretation=interpret(index),
    )
