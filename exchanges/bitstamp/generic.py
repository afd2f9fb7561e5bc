"""
Bitstamp implementation of the exchange-agnostic `ExchangeApi`.

This is the safer way to trade on Bitstamp, but it only covers what every
exchange offers. Use `BitstampExchange.client` for the extended parameters
(``limit_price``, ``daily_order``).
"""

from __future__ import annotations

from typing import Any, Optional

from exchanges.base_client import ExchangeCredentials
from exchanges.bitstamp.client import BitstampClient, check_response
from exchanges.bitstamp.pairs import BITSTAMP_PAIRS
from exchanges.normalize import parse_offers, require_field, require_mapping, to_float
from exchanges.order_validation import ensure_valid_order
from exchanges.schemas import Orderbook, OrderInfo, OrderType, Pair, Ticker
from exchanges.throttle import unix_timestamp_ms


def parse_ticker(payload: Any, pair: Pair) -> Ticker:
    data = require_mapping(check_response(payload), "bitstamp ticker")
    volume = data.get("volume")
    return Ticker(
        timestamp=unix_timestamp_ms(),
        pair=pair,
        last_trade_price=to_float(require_field(data, "last", "bitstamp ticker"), "last"),
        lowest_ask=to_float(require_field(data, "ask", "bitstamp ticker"), "ask"),
        highest_bid=to_float(require_field(data, "bid", "bitstamp ticker"), "bid"),
        volume=to_float(volume, "volume") if volume is not None else None,
    )


def parse_orderbook(payload: Any, pair: Pair) -> Orderbook:
    data = require_mapping(check_response(payload), "bitstamp order book")
    return Orderbook(
        timestamp=unix_timestamp_ms(),
        pair=pair,
        asks=parse_offers(require_field(data, "asks", "bitstamp order book"), "asks"),
        bids=parse_offers(require_field(data, "bids", "bitstamp order book"), "bids"),
    )


def parse_order_info(payload: Any) -> OrderInfo:
    data = require_mapping(check_response(payload), "bitstamp order")
    order_id = require_field(data, "id", "bitstamp order")
    return OrderInfo(timestamp=unix_timestamp_ms(), identifier=(str(order_id),))


class BitstampExchange:
    """`ExchangeApi` backed by a `BitstampClient`."""

    name = "bitstamp"

    def __init__(self, client: BitstampClient) -> None:
        self.client = client

    @classmethod
    def connect(cls, credentials: ExchangeCredentials, **client_kwargs: Any) -> "BitstampExchange":
        return cls(BitstampClient(credentials, **client_kwargs))

    def __repr__(self) -> str:
        return f"BitstampExchange({self.client!r})"

    def ticker(self, pair: Pair) -> Ticker:
        return parse_ticker(self.client.return_ticker(pair), pair)

    def orderbook(self, pair: Pair) -> Orderbook:
        return parse_orderbook(self.client.return_order_book(pair), pair)

    def add_order(
        self,
        order_type: OrderType,
        pair: Pair,
        quantity: float,
        price: Optional[float] = None,
    ) -> OrderInfo:
        BITSTAMP_PAIRS.require(pair)
        ensure_valid_order(order_type, quantity, price)
        if order_type is OrderType.BUY_LIMIT:
            raw = self.client.buy_limit(pair, quantity, price)
        elif order_type is OrderType.SELL_LIMIT:
            raw = self.client.sell_limit(pair, quantity, price)
        elif order_type is OrderType.BUY_MARKET:
            raw = self.client.buy_market(pair, quantity)
        else:
            raw = self.client.sell_market(pair, quantity)
        return parse_order_info(raw)

    def close(self) -> None:
        self.client.close()

