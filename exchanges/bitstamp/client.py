"""
Bitstamp v2 REST client.

Public endpoints are plain GETs on ``<base>/<method>/<pair>/``. Private
endpoints are form-encoded POSTs carrying ``key``, ``signature`` and
``nonce`` next to the method fields (see `exchanges.bitstamp.signer`).

Methods return the decoded JSON untouched; use `check_response` or the
normalizers in `exchanges.bitstamp.generic` to detect error envelopes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx

from exchanges.base_client import Exchange, ExchangeCredentials
from exchanges.bitstamp.pairs import BITSTAMP_PAIRS
from exchanges.bitstamp.signer import build_signature
from exchanges.credentials import load_credentials
from exchanges.errors import ExchangeError
from exchanges.normalize import flatten_messages
from exchanges.rest import FORM_CONTENT_TYPE, RestClient, encode_form, format_number, strip_empties
from exchanges.schemas import Pair, Price, Volume
from exchanges.settings import ClientSettings
from exchanges.throttle import NonceGenerator, RateLimiter

logger = logging.getLogger(__name__)


def check_response(payload: Any) -> Any:
    """Raise `ExchangeError` when Bitstamp answered with an error envelope."""
    if isinstance(payload, Mapping):
        if payload.get("status") == "error":
            messages = flatten_messages(payload.get("reason")) or ["unknown error"]
        elif payload.get("error"):
            messages = flatten_messages(payload.get("error"))
        else:
            return payload
        logger.warning("Bitstamp returned an error: %s", "; ".join(messages))
        raise ExchangeError("bitstamp", messages, payload=dict(payload))
    return payload


class BitstampClient(RestClient):
    """Bitstamp REST client. Not safe for concurrent calls on one instance."""

    exchange_name = "bitstamp"

    def __init__(
        self,
        credentials: ExchangeCredentials,
        *,
        settings: ClientSettings | None = None,
        http_client: httpx.Client | None = None,
        rate_limiter: RateLimiter | None = None,
        nonce_generator: NonceGenerator | None = None,
    ) -> None:
        if not credentials.customer_id:
            raise ValueError("Bitstamp credentials require a customer_id")
        super().__init__(
            credentials,
            settings or ClientSettings.from_env(Exchange.BITSTAMP),
            http_client=http_client,
            rate_limiter=rate_limiter,
            nonce_generator=nonce_generator,
        )

    @classmethod
    def from_file(cls, account_name: str, path: str | Path, **kwargs: Any) -> "BitstampClient":
        exchange, credentials = load_credentials(account_name, path)
        if exchange is not Exchange.BITSTAMP:
            raise ValueError(f"Account '{account_name}' belongs to {exchange.value}, not bitstamp")
        return cls(credentials, **kwargs)

    def build_url(self, method: str, pair_token: Optional[str] = None) -> str:
        base = self.settings.base_url.rstrip("/")
        if pair_token:
            return f"{base}/{method}/{pair_token}/"
        return f"{base}/{method}/"

    def public_query(self, method: str, pair_token: Optional[str] = None) -> Any:
        self._throttle()
        return self._send("GET", self.build_url(method, pair_token))

    def private_query(
        self,
        method: str,
        pair_token: Optional[str] = None,
        fields: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        self._throttle()
        nonce = self._next_nonce()
        post_params: Dict[str, str] = {
            "key": self.credentials.api_key,
            "signature": build_signature(nonce, self.credentials),
            "nonce": str(nonce),
        }
        post_params.update(strip_empties(fields))
        return self._send(
            "POST",
            self.build_url(method, pair_token),
            body=encode_form(post_params),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )

    # ------------------------------------------------------------------
    # Public endpoints
    # ------------------------------------------------------------------
    def return_ticker(self, pair: Pair) -> Any:
        """
        Sample output::

            {"last": "2211.00", "high": "2811.00", "low": "2188.97", "vwap": "2189.80",
             "volume": "213.26801100", "bid": "2188.97", "ask": "2211.00",
             "timestamp": "1379490840", "open": "2200.00"}
        """
        return self.public_query("ticker", BITSTAMP_PAIRS.require(pair))

    def return_order_book(self, pair: Pair) -> Any:
        """
        Sample output::

            {"timestamp": "1379490840", "bids": [["2188.97", "0.5"], ...],
             "asks": [["2211.00", "1.2"], ...]}
        """
        return self.public_query("order_book", BITSTAMP_PAIRS.require(pair))

    def return_trade_history(self, pair: Pair) -> Any:
        """
        Sample output::

            [{"date": "1379490840", "tid": "1", "price": "2211.00", "amount": "0.1", "type": "0"}, ...]
        """
        return self.public_query("transactions", BITSTAMP_PAIRS.require(pair))

    # ------------------------------------------------------------------
    # Private endpoints
    # ------------------------------------------------------------------
    def return_balances(self, pair: Pair) -> Any:
        """
        Sample output::

            {"btc_available": "0.59098578", "usd_available": "3.31", "fee": "0.25", ...}
        """
        return self.private_query("balance", BITSTAMP_PAIRS.require(pair))

    def buy_limit(
        self,
        pair: Pair,
        amount: Volume,
        price: Price,
        limit_price: Optional[Price] = None,
        daily_order: Optional[bool] = None,
    ) -> Any:
        """
        Add a buy limit order.

        limit_price: once executed, a sell order is placed at this price.
        daily_order: cancel at 0:00 UTC unless executed.
        """
        return self._limit_order("buy", pair, amount, price, limit_price, daily_order)

    def sell_limit(
        self,
        pair: Pair,
        amount: Volume,
        price: Price,
        limit_price: Optional[Price] = None,
        daily_order: Optional[bool] = None,
    ) -> Any:
        """
        Add a sell limit order.

        limit_price: once executed, a buy order is placed at this price.
        daily_order: cancel at 0:00 UTC unless executed.
        """
        return self._limit_order("sell", pair, amount, price, limit_price, daily_order)

    def buy_market(self, pair: Pair, amount: Volume) -> Any:
        token = BITSTAMP_PAIRS.require(pair)
        return self.private_query("buy/market", token, {"amount": format_number(amount)})

    def sell_market(self, pair: Pair, amount: Volume) -> Any:
        token = BITSTAMP_PAIRS.require(pair)
        return self.private_query("sell/market", token, {"amount": format_number(amount)})

    def _limit_order(
        self,
        method: str,
        pair: Pair,
        amount: Volume,
        price: Price,
        limit_price: Optional[Price],
        daily_order: Optional[bool],
    ) -> Any:
        token = BITSTAMP_PAIRS.require(pair)
        fields: Dict[str, Any] = {
            "amount": format_number(amount),
            "price": format_number(price),
            "limit_price": format_number(limit_price) if limit_price is not None else "",
        }
        if daily_order is not None:
            # Bitstamp only accepts "True"; false is expressed by omitting the field.
            fields["daily_order"] = "True" if daily_order else ""
        return self.private_query(method, token, fields)
