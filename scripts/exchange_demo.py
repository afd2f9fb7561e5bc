"""
Command-line helper for quotes, order books and order submission.

Usage examples:
    python scripts/exchange_demo.py --exchange kraken ticker --pair BTC_EUR

    python scripts/exchange_demo.py --account account_bitstamp --keys keys_real.json \
        orderbook --pair BTC_USD --depth 5

    python scripts/exchange_demo.py --exchange kraken order \
        --pair BTC_EUR --type buy_limit --quantity 0.01 --price 20000

Environment variables (when --account is not given):
    <EXCHANGE>_API_KEY
    <EXCHANGE>_API_SECRET
    <EXCHANGE>_CUSTOMER_ID (Bitstamp only)
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from exchanges import (  # noqa: E402
    Exchange,
    ExchangeClientError,
    OrderType,
    Pair,
    open_exchange,
    open_exchange_from_file,
)
from exchanges.credentials import credentials_from_env  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Exchange API helper")
    parser.add_argument("--exchange", choices=[member.value for member in Exchange], help="Exchange to query")
    parser.add_argument("--account", help="Account name inside the key file")
    parser.add_argument("--keys", default=None, help="Path to the JSON key file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ticker_parser = subparsers.add_parser("ticker", help="Show the latest quote")
    ticker_parser.add_argument("--pair", required=True, help="Canonical pair, e.g. BTC_USD")

    book_parser = subparsers.add_parser("orderbook", help="Show the order book")
    book_parser.add_argument("--pair", required=True, help="Canonical pair, e.g. BTC_USD")
    book_parser.add_argument("--depth", type=int, default=10, help="Rows to print per side")

    order_parser = subparsers.add_parser("order", help="Submit an order")
    order_parser.add_argument("--pair", required=True, help="Canonical pair, e.g. BTC_USD")
    order_parser.add_argument(
        "--type", required=True, choices=[member.value for member in OrderType], help="Order type"
    )
    order_parser.add_argument("--quantity", required=True, type=float, help="Amount in base currency")
    order_parser.add_argument("--price", type=float, help="Limit price (required for limit)")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        pair = Pair.parse(args.pair)
        api = _open(args)
    except (ValueError, KeyError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        if args.command == "ticker":
            response = dataclasses.asdict(api.ticker(pair))
        elif args.command == "orderbook":
            book = api.orderbook(pair)
            response = dataclasses.asdict(book)
            response["asks"] = response["asks"][: args.depth]
            response["bids"] = response["bids"][: args.depth]
        else:
            info = api.add_order(OrderType(args.type), pair, args.quantity, args.price)
            response = dataclasses.asdict(info)
    except (ExchangeClientError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        api.close()

    print(json.dumps(response, indent=2, default=_json_default))


def _open(args: argparse.Namespace):
    if args.account:
        keys = args.keys or _default_keys_file()
        return open_exchange_from_file(args.account, keys)
    if not args.exchange:
        raise ValueError("Either --exchange or --account is required")
    exchange = Exchange.parse(args.exchange)
    return open_exchange(exchange, credentials_from_env(exchange.name))


def _default_keys_file() -> str:
    try:
        import config as config_module  # type: ignore
    except ModuleNotFoundError:
        return "keys_real.json"
    return getattr(config_module, "KEYS_FILE", "keys_real.json")


def _json_default(value):
    if isinstance(value, Pair):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


if __name__ == "__main__":
    main()
