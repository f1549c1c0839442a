from __future__ import annotations

import logging
from datetime import date, datetime

from .alignment import TimeSeries
from .types import LiquiditySnapshot, PMISnapshot, PriceSnapshot

logger = logging.getLogger(__name__)

PLACEHOLDER_PMI = 50.0
PLACEHOLDER_NOTE = "No PMI observations available; using the neutral 50 threshold."


def _snapshot_for(fed_value: float, obs_date: date, tga: TimeSeries, rrp: TimeSeries) -> LiquiditySnapshot:
    return LiquiditySnapshot(
        fed_balance_sheet=fed_value,
        treasury_account_balance=tga.get(obs_date) or 0.0,
        reverse_repo_balance=rrp.get(obs_date) or 0.0,
        date=obs_date,
    )


def liquidity_series(fed: TimeSeries, tga: TimeSeries, rrp: TimeSeries) -> TimeSeries:
    """Net liquidity per balance-sheet date.

    TGA and RRP are matched on the same calendar date and count as 0 when that
    date has no observation.
    """
    return TimeSeries.from_pairs((p.date, _snapshot_for(p.value, p.date, tga, rrp).liquidity) for p in fed)


def liquidity_on(fed: TimeSeries, tga: TimeSeries, rrp: TimeSeries, obs_date: date) -> LiquiditySnapshot | None:
    fed_value = fed.get(obs_date)
    if fed_value is None:
        return None
    return _snapshot_for(fed_value, obs_date, tga, rrp)


def latest_liquidity(fed: TimeSeries, tga: TimeSeries, rrp: TimeSeries) -> LiquiditySnapshot | None:
    latest_fed = fed.latest()
    if latest_fed is None:
        logger.warning("balance sheet series is empty; no liquidity snapshot")
        return None

    latest_tga = tga.latest()
    latest_rrp = rrp.latest()
    return LiquiditySnapshot(
        fed_balance_sheet=latest_fed.value,
        treasury_account_balance=latest_tga.value if latest_tga else 0.0,
        reverse_repo_balance=latest_rrp.value if latest_rrp else 0.0,
        date=latest_fed.date,
    )


def latest_pmi(pmi: TimeSeries, today: date) -> PMISnapshot:
    points = list(pmi)
    if not points:
        logger.warning("PMI series is empty; falling back to placeholder value %s", PLACEHOLDER_PMI)
        return PMISnapshot(
            value=PLACEHOLDER_PMI,
            date=today,
            prior_change=0.0,
            source_note=PLACEHOLDER_NOTE,
            source="placeholder",
        )

    latest = points[-1]
    change = latest.value - points[-2].value if len(points) > 1 else 0.0
    return PMISnapshot(value=latest.value, date=latest.date, prior_change=change)


def price_snapshot(last: float, open_price: float, timestamp: datetime) -> PriceSnapshot:
    change = (last - open_price) / open_price * 100.0 if open_price else 0.0
    return PriceSnapshot(price=last, timestamp=timestamp, change_24h=change)
