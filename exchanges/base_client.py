"""
Abstract client definitions for centralized exchange integrations.

Concrete adapters (Bitstamp, Kraken) implement `ExchangeApi` structurally,
without inheriting from it, and are selected once at construction time via
`exchanges.factory`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from exchanges.schemas import Orderbook, OrderInfo, OrderType, Pair, Ticker


class Exchange(enum.Enum):
    """Exchanges with a concrete `ExchangeApi` implementation."""

    BITSTAMP = "bitstamp"
    KRAKEN = "kraken"

    @classmethod
    def parse(cls, value: str) -> "Exchange":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            known = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown exchange '{value}'. Known: {known}") from exc


@dataclass(frozen=True, slots=True)
class ExchangeCredentials:
    """Typed container for exchange authentication data."""

    api_key: str
    api_secret: str
    customer_id: str | None = None

    def __repr__(self) -> str:
        return f"ExchangeCredentials(api_key={self.api_key[:4]}..., customer_id={self.customer_id!r})"


@runtime_checkable
class ExchangeApi(Protocol):
    """
    Capability contract shared by every exchange implementation.

    Implementations hold mutable throttling state and are not safe for
    concurrent calls on the same instance; serialize access or use one
    instance per thread.
    """

    def ticker(self, pair: Pair) -> Ticker:
        """Return the latest quote for `pair`."""

    def orderbook(self, pair: Pair) -> Orderbook:
        """Return the order book for `pair`, best price first on each side."""

    def add_order(
        self,
        order_type: OrderType,
        pair: Pair,
        quantity: float,
        price: Optional[float] = None,
    ) -> OrderInfo:
        """
        Submit an order and return the remote identifiers.

        `quantity` is expressed in the base currency (left member of the
        pair). `price` is required for limit orders and ignored for market
        orders.
        """

    def close(self) -> None:
        """Release network resources."""
