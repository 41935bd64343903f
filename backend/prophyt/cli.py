from __future__ import annotations

import argparse
import asyncio
import json

from prophyt.core.config import get_settings
from prophyt.core.database import AsyncSessionLocal
from prophyt.core.logging import setup_logging
from prophyt.services.oracle import get_latest_price_payload
from prophyt.tasks.price_updater import PriceUpdater

settings = get_settings()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prophyt operational CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser(
        "refresh_price",
        help="Run a single price update tick and print the outcome",
    )

    show_parser = subparsers.add_parser(
        "show_price",
        help="Print the stored latest price for an asset",
    )
    show_parser.add_argument("--asset", default=None, help="Asset id (defaults to PRICE_FEED_ASSET_ID)")

    return parser


async def _run_refresh_price() -> int:
    result = await PriceUpdater().run_once()
    summary = {
        "status": result.status,
        "started_at": result.started_at.isoformat(),
        "price": str(result.price) if result.price is not None else None,
        "error": result.error,
    }
    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0 if result.status == "updated" else 1


async def _run_show_price(asset: str | None) -> int:
    async with AsyncSessionLocal() as db:
        payload = await get_latest_price_payload(
            db,
            asset or settings.price_feed_asset_id,
            max_age_seconds=settings.price_stale_after_seconds,
        )
    if payload is None:
        print(json.dumps({"error": "Price not available"}))
        return 1
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def main() -> int:
    setup_logging()
    parser = _build_arg_parser()
    args = parser.parse_args()
    if args.command == "refresh_price":
        return asyncio.run(_run_refresh_price())
    if args.command == "show_price":
        return asyncio.run(_run_show_price(args.asset))

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
