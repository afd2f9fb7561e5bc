"""
Kraken implementation of the exchange-agnostic `ExchangeApi`.

Kraken-only options (``price2``, ``leverage``, ``oflags``, ``validate``...)
stay on `KrakenExchange.client.add_standard_order`.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from exchanges.base_client import ExchangeCredentials
from exchanges.errors import InvalidDataError
from exchanges.kraken.client import KrakenClient, parse_result
from exchanges.kraken.pairs import KRAKEN_PAIRS
from exchanges.normalize import parse_offers, require_field, require_mapping, to_float
from exchanges.order_validation import ensure_valid_order
from exchanges.rest import format_number
from exchanges.schemas import Orderbook, OrderInfo, OrderType, Pair, Ticker
from exchanges.throttle import unix_timestamp_ms

ORDER_BOOK_DEPTH = 1000


def _pair_entry(result: Any, token: str) -> Mapping[str, Any]:
    data = require_mapping(result, "kraken result")
    if token in data:
        return require_mapping(data[token], f"kraken {token}")
    # Kraken may key the result by an alternate pair name.
    if len(data) == 1:
        return require_mapping(next(iter(data.values())), f"kraken {token}")
    raise InvalidDataError(f"Kraken result has no entry for {token}", payload=dict(data))


def _indexed(data: Mapping[str, Any], key: str, index: int) -> Any:
    values = require_field(data, key, "kraken ticker")
    if not isinstance(values, list) or len(values) <= index:
        raise InvalidDataError(f"Kraken ticker field '{key}' has no index {index}: {values!r}")
    return values[index]


def parse_ticker(payload: Any, pair: Pair, token: str) -> Ticker:
    data = _pair_entry(parse_result(payload), token)
    volume = _indexed(data, "v", 1) if "v" in data else None
    return Ticker(
        timestamp=unix_timestamp_ms(),
        pair=pair,
        last_trade_price=to_float(_indexed(data, "c", 0), "c"),
        lowest_ask=to_float(_indexed(data, "a", 0), "a"),
        highest_bid=to_float(_indexed(data, "b", 0), "b"),
        volume=to_float(volume, "v") if volume is not None else None,
    )


def parse_orderbook(payload: Any, pair: Pair, token: str) -> Orderbook:
    data = _pair_entry(parse_result(payload), token)
    return Orderbook(
        timestamp=unix_timestamp_ms(),
        pair=pair,
        asks=parse_offers(require_field(data, "asks", "kraken order book"), "asks"),
        bids=parse_offers(require_field(data, "bids", "kraken order book"), "bids"),
    )


def parse_order_info(payload: Any) -> OrderInfo:
    data = require_mapping(parse_result(payload), "kraken order")
    txids = require_field(data, "txid", "kraken order")
    if not isinstance(txids, list) or not txids:
        raise InvalidDataError(f"Kraken order returned no transaction ids: {txids!r}", payload=dict(data))
    return OrderInfo(timestamp=unix_timestamp_ms(), identifier=tuple(str(txid) for txid in txids))


class KrakenExchange:
    """`ExchangeApi` backed by a `KrakenClient`."""

    name = "kraken"

    def __init__(self, client: KrakenClient) -> None:
        self.client = client

    @classmethod
    def connect(cls, credentials: ExchangeCredentials, **client_kwargs: Any) -> "KrakenExchange":
        return cls(KrakenClient(credentials, **client_kwargs))

    def __repr__(self) -> str:
        return f"KrakenExchange({self.client!r})"

    def ticker(self, pair: Pair) -> Ticker:
        token = KRAKEN_PAIRS.require(pair)
        return parse_ticker(self.client.get_ticker_information(token), pair, token)

    def orderbook(self, pair: Pair) -> Orderbook:
        token = KRAKEN_PAIRS.require(pair)
        return parse_orderbook(self.client.get_order_book(token, ORDER_BOOK_DEPTH), pair, token)

    def add_order(
        self,
        order_type: OrderType,
        pair: Pair,
        quantity: float,
        price: Optional[float] = None,
    ) -> OrderInfo:
        token = KRAKEN_PAIRS.require(pair)
        ensure_valid_order(order_type, quantity, price)
        raw = self.client.add_standard_order(
            pair=token,
            type=order_type.side,
            ordertype=order_type.kind,
            volume=format_number(quantity),
            price=format_number(price) if order_type.is_limit else "",
        )
        return parse_order_info(raw)

    def close(self) -> None:
        self.client.close()
