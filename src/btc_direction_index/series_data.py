from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd

from .alignment import TimeSeries
from .types import PriceSnapshot, TimeSeriesPoint


def _read_csv(csv_path: Path) -> pd.DataFrame:
    if not csv_path.exists():
        raise FileNotFoundError(f"Series file not found at {csv_path}")
    return pd.read_csv(csv_path, dtype=str)


class SeriesRepository:
    """Daily/weekly/monthly observations stored as ``date,value`` CSV.

    FRED's ``"."`` placeholder for a missing observation is dropped.
    """

    def __init__(self, csv_path: str) -> None:
        self.csv_path = Path(csv_path)

    def _frame(self) -> pd.DataFrame:
        df = _read_csv(self.csv_path)
        required = {"date", "value"}
        if not required.issubset(df.columns):
            raise ValueError(f"Series CSV {self.csv_path} must contain columns {required}")

        df = df[["date", "value"]].copy()
        df["date"] = pd.to_datetime(df["date"].str.strip(), errors="coerce").dt.date
        df["value"] = pd.to_numeric(df["value"].str.strip(), errors="coerce")
        df = df.dropna(subset=["date", "value"])
        return df.drop_duplicates("date", keep="last").sort_values("date")

    def load(self) -> TimeSeries:
        df = self._frame()
        return TimeSeries(TimeSeriesPoint(date=d, value=float(v)) for d, v in zip(df["date"], df["value"]))

    def latest(self) -> TimeSeriesPoint:
        point = self.load().latest()
        if point is None:
            raise ValueError(f"No valid rows found in {self.csv_path}")
        return point


def _epoch_unit(raw_ts: pd.Series) -> str | None:
    if not len(raw_ts):
        return None
    if raw_ts.str.fullmatch(r"\d{13}").fillna(False).astype(bool).all():
        return "ms"
    if raw_ts.str.fullmatch(r"\d{9,10}").fillna(False).astype(bool).all():
        return "s"
    return None


def load_price_csv(csv_path: str) -> list[PriceSnapshot]:
    """Price observations from ``timestamp,price`` or ``date,close`` CSV.

    Timestamps are parsed as UTC; 13-digit epoch milliseconds and
    10-digit epoch seconds are accepted too.
    """
    path = Path(csv_path)
    df = _read_csv(path)

    if {"timestamp", "price"}.issubset(df.columns):
        raw_ts, raw_px = df["timestamp"].str.strip(), df["price"]
    elif {"date", "close"}.issubset(df.columns):
        raw_ts, raw_px = df["date"].str.strip(), df["close"]
    else:
        raise ValueError(f"Price CSV {path} must contain columns timestamp,price or date,close")

    unit = _epoch_unit(raw_ts)
    if unit is not None:
        ts = pd.to_datetime(pd.to_numeric(raw_ts), unit=unit, utc=True)
    else:
        ts = pd.to_datetime(raw_ts, utc=True, errors="coerce")

    out = pd.DataFrame({"timestamp": ts, "price": pd.to_numeric(raw_px, errors="coerce")})
    out = out.dropna().drop_duplicates("timestamp", keep="last").sort_values("timestamp")

    stamps: list[datetime] = [t.to_pydatetime() for t in out["timestamp"]]
    return [PriceSnapshot(price=float(px), timestamp=t) for t, px in zip(stamps, out["price"])]
