#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json

from btc_direction_index.alignment import merge_nearest
from btc_direction_index.history import build_index_history, within_timespan
from btc_direction_index.logging_utils import setup_logging
from btc_direction_index.series_data import SeriesRepository, load_price_csv
from btc_direction_index.settings import settings


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Merge BTC prices with the rebuilt direction index for charting")
    p.add_argument("--fed-csv", default=settings.fed_balance_sheet_csv)
    p.add_argument("--tga-csv", default=settings.tga_csv)
    p.add_argument("--rrp-csv", default=settings.rrp_csv)
    p.add_argument("--pmi-csv", default=settings.pmi_csv)
    p.add_argument("--price-csv", default=settings.price_csv)
    p.add_argument("--timespan", default=settings.index_timespan, choices=["1D", "7D", "30D", "90D", "1Y", "ALL"])
    return p.parse_args()


def main() -> None:
    args = parse_args()
    setup_logging(settings.log_level, settings.log_json)

    prices = within_timespan(load_price_csv(args.price_csv), args.timespan)

    history = build_index_history(
        SeriesRepository(args.fed_csv).load(),
        SeriesRepository(args.tga_csv).load(),
        SeriesRepository(args.rrp_csv).load(),
        SeriesRepository(args.pmi_csv).load(),
        prices,
    )

    merged = merge_nearest(
        [(p.timestamp, p.price) for p in prices],
        [(h.timestamp, h.index) for h in history],
    )
    data = [{"timestamp": m.timestamp.isoformat(), "price": m.price, "index": m.index} for m in merged]
    print(json.dumps({"timespan": args.timespan, "count": len(data), "data": data}, indent=2))


if __name__ == "__main__":
    main()
