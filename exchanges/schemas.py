"""
Canonical, exchange-agnostic values returned by every `ExchangeApi`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

OrderSide = Literal["buy", "sell"]
OrderKind = Literal["limit", "market"]

Price = float
Volume = float
Offer = Tuple[Price, Volume]


class Pair(enum.Enum):
    """Canonical currency pairs, written BASE_QUOTE."""

    BTC_USD = "BTC_USD"
    BTC_EUR = "BTC_EUR"
    BTC_GBP = "BTC_GBP"
    BTC_JPY = "BTC_JPY"
    BTC_CAD = "BTC_CAD"
    ETH_BTC = "ETH_BTC"
    ETH_USD = "ETH_USD"
    ETH_EUR = "ETH_EUR"
    LTC_BTC = "LTC_BTC"
    LTC_USD = "LTC_USD"
    LTC_EUR = "LTC_EUR"
    XRP_BTC = "XRP_BTC"
    XRP_USD = "XRP_USD"
    XRP_EUR = "XRP_EUR"
    BCH_BTC = "BCH_BTC"
    BCH_USD = "BCH_USD"
    BCH_EUR = "BCH_EUR"
    XLM_BTC = "XLM_BTC"
    ZEC_BTC = "ZEC_BTC"
    ETC_ETH = "ETC_ETH"
    XMR_BTC = "XMR_BTC"
    DOGE_BTC = "DOGE_BTC"
    USDT_USD = "USDT_USD"
    EUR_USD = "EUR_USD"

    @property
    def base(self) -> str:
        return self.value.split("_", 1)[0]

    @property
    def quote(self) -> str:
        return self.value.split("_", 1)[1]

    @classmethod
    def parse(cls, value: str) -> "Pair":
        """Accept `BTC_USD`, `btc/usd` or `BTC-USD`."""
        normalized = value.strip().upper().replace("/", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unknown pair '{value}'") from exc


class OrderType(enum.Enum):
    BUY_LIMIT = "buy_limit"
    BUY_MARKET = "buy_market"
    SELL_LIMIT = "sell_limit"
    SELL_MARKET = "sell_market"

    @property
    def side(self) -> OrderSide:
        return "buy" if self in (OrderType.BUY_LIMIT, OrderType.BUY_MARKET) else "sell"

    @property
    def kind(self) -> OrderKind:
        return "limit" if self.is_limit else "market"

    @property
    def is_limit(self) -> bool:
        return self in (OrderType.BUY_LIMIT, OrderType.SELL_LIMIT)


@dataclass(frozen=True, slots=True)
class Ticker:
    """Latest quote for a pair. `volume` is None when the exchange omits it."""

    timestamp: int
    pair: Pair
    last_trade_price: Price
    lowest_ask: Price
    highest_bid: Price
    volume: Optional[Volume] = None


@dataclass(frozen=True, slots=True)
class Orderbook:
    """Order book snapshot; both sides keep the order sent by the exchange."""

    timestamp: int
    pair: Pair
    asks: Tuple[Offer, ...]
    bids: Tuple[Offer, ...]

    @property
    def best_ask(self) -> Optional[Offer]:
        return self.asks[0] if self.asks else None

    @property
    def best_bid(self) -> Optional[Offer]:
        return self.bids[0] if self.bids else None


@dataclass(frozen=True, slots=True)
class OrderInfo:
    """Confirmation of a submitted order; one logical order may map to several remote ids."""

    timestamp: int
    identifier: Tuple[str, ...]
