from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

Interpretation = Literal["very_bearish", "bearish", "neutral", "bullish", "very_bullish"]


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: date
    value: float


@dataclass(frozen=True)
class LiquiditySnapshot:
    """Net liquidity: balance sheet minus treasury account minus reverse repo.

    ``liquidity`` is derived once at construction and is not an init argument.
    """

    fed_balance_sheet: float
    treasury_account_balance: float
    reverse_repo_balance: float
    date: date
    liquidity: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "liquidity",
            self.fed_balance_sheet - self.treasury_account_balance - self.reverse_repo_balance,
        )


@dataclass(frozen=True)
class PMISnapshot:
    value: float
    date: date
    prior_change: float | None = None
    source_note: str | None = None
    source: str | None = None


@dataclass(frozen=True)
class PriceSnapshot:
    price: float
    timestamp: datetime
    change_24h: float | None = None


@dataclass(frozen=True)
class SampleStats:
    mean: float
    std_dev: float


@dataclass(frozen=True)
class DirectionIndexResult:
    index: float
    liquidity_z_score: float
    pmi_z_score: float
    btc_trend: float
    timestamp: datetime
    interpretation: Interpretation


@dataclass(frozen=True)
class IndexHistoryPoint:
    timestamp: datetime
    date: date
    index: float
    price: float


@dataclass(frozen=True)
class MergedPoint:
    timestamp: datetime
    price: float
    index: float
