#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from bisect import bisect_right
from datetime import timedelta

from btc_direction_index.composite import compose_index
from btc_direction_index.history import (
    RECENT_PRICE_WINDOW,
    build_index_history,
    describe_correlation,
    index_price_correlation,
    within_timespan,
)
from btc_direction_index.logging_utils import setup_logging
from btc_direction_index.series_data import SeriesRepository, load_price_csv
from btc_direction_index.settings import settings
from btc_direction_index.snapshots import latest_liquidity, latest_pmi, liquidity_series, price_snapshot
from btc_direction_index.types import PriceSnapshot


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compute the Bitcoin direction index from local series CSVs")
    p.add_argument("--fed-csv", default=settings.fed_balance_sheet_csv, help="CSV with columns: date,value")
    p.add_argument("--tga-csv", default=settings.tga_csv)
    p.add_argument("--rrp-csv", default=settings.rrp_csv)
    p.add_argument("--pmi-csv", default=settings.pmi_csv)
    p.add_argument("--price-csv", default=settings.price_csv, help="CSV with timestamp,price or date,close")
    p.add_argument("--timespan", default=settings.index_timespan, choices=["1D", "7D", "30D", "90D", "1Y", "ALL"])
    p.add_argument("--no-history", action="store_true", help="Only compute the current index")
    return p.parse_args()


def current_price(prices: list[PriceSnapshot]) -> PriceSnapshot:
    last = prices[-1]
    stamps = [p.timestamp for p in prices]
    i = bisect_right(stamps, last.timestamp - timedelta(hours=24))
    open_price = prices[i - 1].price if i > 0 else prices[0].price
    return price_snapshot(last.price, open_price, last.timestamp)


def main() -> None:
    args = parse_args()
    setup_logging(settings.log_level, settings.log_json)

    fed = SeriesRepository(args.fed_csv).load()
    tga = SeriesRepository(args.tga_csv).load()
    rrp = SeriesRepository(args.rrp_csv).load()
    pmi = SeriesRepository(args.pmi_csv).load()
    prices = load_price_csv(args.price_csv)

    liquidity = latest_liquidity(fed, tga, rrp)
    if liquidity is None:
        raise ValueError(f"No balance sheet observations in {args.fed_csv}")
    if not prices:
        raise ValueError(f"No price observations in {args.price_csv}")

    price = current_price(prices)
    pmi_now = latest_pmi(pmi, today=price.timestamp.date())

    result = compose_index(
        liquidity,
        liquidity_series(fed, tga, rrp).values(),
        pmi_now,
        pmi.values(),
        price,
        [p.price for p in prices[-RECENT_PRICE_WINDOW:]],
    )

    output: dict[str, object] = {
        "bitcoin_price": {
            "price": price.price,
            "timestamp": price.timestamp.isoformat(),
            "change_24h": price.change_24h,
        },
        "liquidity": {
            "fed_balance_sheet": liquidity.fed_balance_sheet,
            "tga": liquidity.treasury_account_balance,
            "rrp": liquidity.reverse_repo_balance,
            "liquidity": liquidity.liquidity,
            "date": liquidity.date.isoformat(),
        },
        "pmi": {
            "value": pmi_now.value,
            "date": pmi_now.date.isoformat(),
            "change": pmi_now.prior_change,
            "source": pmi_now.source,
            "note": pmi_now.source_note,
        },
        "direction_index": {
            "index": result.index,
            "liquidity_z_score": result.liquidity_z_score,
            "pmi_z_score": result.pmi_z_score,
            "btc_trend": result.btc_trend,
            "timestamp": result.timestamp.isoformat(),
            "interpretation": result.interpretation,
        },
    }

    if not args.no_history:
        history = build_index_history(fed, tga, rrp, pmi, within_timespan(prices, args.timespan))
        correlation = index_price_correlation(history)
        output["history"] = {"timespan": args.timespan, "count": len(history)}
        output["correlation"] = {"value": correlation, "description": describe_correlation(correlation)}

    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
