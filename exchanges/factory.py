"""
Registry that maps an `Exchange` to the builder of its `ExchangeApi`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterable

from exchanges.base_client import Exchange, ExchangeApi, ExchangeCredentials
from exchanges.bitstamp.generic import BitstampExchange
from exchanges.credentials import load_credentials
from exchanges.kraken.generic import KrakenExchange

ExchangeBuilder = Callable[..., ExchangeApi]


class ExchangeRegistry:
    """Holds registered builders keyed by `Exchange`."""

    def __init__(self) -> None:
        self._builders: Dict[Exchange, ExchangeBuilder] = {}

    def register(self, exchange: Exchange, builder: ExchangeBuilder, *, overwrite: bool = False) -> None:
        if not overwrite and exchange in self._builders:
            raise KeyError(f"Builder already registered for exchange '{exchange.value}'")
        self._builders[exchange] = builder

    def get(self, exchange: Exchange) -> ExchangeBuilder:
        try:
            return self._builders[exchange]
        except KeyError as exc:
            raise KeyError(f"No builder registered for exchange '{exchange.value}'") from exc

    def list(self) -> Iterable[Exchange]:
        return self._builders.keys()

    def create(self, exchange: Exchange, credentials: ExchangeCredentials, **client_kwargs: Any) -> ExchangeApi:
        return self.get(exchange)(credentials, **client_kwargs)


default_registry = ExchangeRegistry()
default_registry.register(Exchange.BITSTAMP, BitstampExchange.connect)
default_registry.register(Exchange.KRAKEN, KrakenExchange.connect)


def open_exchange(exchange: Exchange | str, credentials: ExchangeCredentials, **client_kwargs: Any) -> ExchangeApi:
    """Build the `ExchangeApi` for `exchange`; keyword arguments reach the client constructor."""
    if isinstance(exchange, str):
        exchange = Exchange.parse(exchange)
    return default_registry.create(exchange, credentials, **client_kwargs)


def open_exchange_from_file(account_name: str, path: str | Path, **client_kwargs: Any) -> ExchangeApi:
    """Build the `ExchangeApi` for a named account of the JSON key file."""
    exchange, credentials = load_credentials(account_name, path)
    return open_exchange(exchange, credentials, **client_kwargs)
