"""
Kraken REST client.

Public methods are GETs on ``/0/public/<Method>``; private methods are
form-encoded POSTs on ``/0/private/<Method>`` authenticated by the
``API-Key`` and ``API-Sign`` headers (see `exchanges.kraken.signer`).

Every response uses the ``{"error": [...], "result": {...}}`` envelope.
Methods return it untouched; `parse_result` unwraps it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx

from exchanges.base_client import Exchange, ExchangeCredentials
from exchanges.credentials import load_credentials
from exchanges.errors import ExchangeError, InvalidDataError
from exchanges.kraken.signer import build_signature
from exchanges.normalize import flatten_messages, require_mapping
from exchanges.rest import FORM_CONTENT_TYPE, RestClient, encode_form, format_number, strip_empties
from exchanges.settings import ClientSettings
from exchanges.throttle import NonceGenerator, RateLimiter

logger = logging.getLogger(__name__)

API_VERSION = "0"


def parse_result(payload: Any) -> Any:
    """Return ``result`` from a Kraken envelope, raising on a non-empty error list."""
    data = require_mapping(payload, "kraken response")
    errors = flatten_messages(data.get("error"))
    if errors:
        logger.warning("Kraken returned an error: %s", "; ".join(errors))
        raise ExchangeError("kraken", errors, payload=dict(data))
    if "result" not in data:
        raise InvalidDataError("Kraken response has neither errors nor a result", payload=dict(data))
    return data["result"]


class KrakenClient(RestClient):
    """Kraken REST client. Not safe for concurrent calls on one instance."""

    exchange_name = "kraken"

    def __init__(
        self,
        credentials: ExchangeCredentials,
        *,
        settings: ClientSettings | None = None,
        http_client: httpx.Client | None = None,
        rate_limiter: RateLimiter | None = None,
        nonce_generator: NonceGenerator | None = None,
    ) -> None:
        super().__init__(
            credentials,
            settings or ClientSettings.from_env(Exchange.KRAKEN),
            http_client=http_client,
            rate_limiter=rate_limiter,
            nonce_generator=nonce_generator,
        )

    @classmethod
    def from_file(cls, account_name: str, path: str | Path, **kwargs: Any) -> "KrakenClient":
        exchange, credentials = load_credentials(account_name, path)
        if exchange is not Exchange.KRAKEN:
            raise ValueError(f"Account '{account_name}' belongs to {exchange.value}, not kraken")
        return cls(credentials, **kwargs)

    def public_query(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        url = f"{self.settings.base_url.rstrip('/')}/{API_VERSION}/public/{method}"
        self._throttle()
        return self._send("GET", url, params=strip_empties(params))

    def private_query(self, method: str, fields: Optional[Mapping[str, Any]] = None) -> Any:
        uri_path = f"/{API_VERSION}/private/{method}"
        self._throttle()
        nonce = self._next_nonce()
        post_params: Dict[str, str] = {"nonce": str(nonce)}
        post_params.update(strip_empties(fields))
        post_data = encode_form(post_params)
        headers = {
            "API-Key": self.credentials.api_key,
            "API-Sign": build_signature(uri_path, nonce, post_data, self.credentials),
            "Content-Type": FORM_CONTENT_TYPE,
        }
        return self._send(
            "POST",
            f"{self.settings.base_url.rstrip('/')}{uri_path}",
            body=post_data,
            headers=headers,
        )

    # ------------------------------------------------------------------
    # Public endpoints
    # ------------------------------------------------------------------
    def get_server_time(self) -> Any:
        return self.public_query("Time")

    def get_tradable_asset_pairs(self, pair: str = "", info: str = "") -> Any:
        """`pair`: comma separated Kraken tokens; `info`: info | leverage | fees | margin."""
        return self.public_query("AssetPairs", {"pair": pair, "info": info})

    def get_ticker_information(self, pair: str) -> Any:
        """
        Sample result::

            {"XXBTZUSD": {"a": ["101.0", "1", "1.000"], "b": ["100.0", "2", "2.000"],
                          "c": ["100.5", "0.1"], "v": ["10.0", "50.0"], ...}}

        ``v[1]`` is the volume over the last 24 hours.
        """
        return self.public_query("Ticker", {"pair": pair})

    def get_order_book(self, pair: str, count: int | str = "") -> Any:
        """Rows are ``[price, volume, timestamp]``; asks ascending, bids descending."""
        return self.public_query("Depth", {"pair": pair, "count": count})

    def get_recent_trades(self, pair: str, since: str = "") -> Any:
        return self.public_query("Trades", {"pair": pair, "since": since})

    # ------------------------------------------------------------------
    # Private endpoints
    # ------------------------------------------------------------------
    def get_account_balance(self) -> Any:
        return self.private_query("Balance")

    def get_trade_balance(self, aclass: str = "", asset: str = "") -> Any:
        return self.private_query("TradeBalance", {"aclass": aclass, "asset": asset})

    def get_open_orders(self, trades: str = "", userref: str = "") -> Any:
        return self.private_query("OpenOrders", {"trades": trades, "userref": userref})

    def get_closed_orders(
        self,
        trades: str = "",
        userref: str = "",
        start: str = "",
        end: str = "",
        ofs: str = "",
        closetime: str = "",
    ) -> Any:
        return self.private_query(
            "ClosedOrders",
            {
                "trades": trades,
                "userref": userref,
                "start": start,
                "end": end,
                "ofs": ofs,
                "closetime": closetime,
            },
        )

    def add_standard_order(
        self,
        pair: str,
        type: str,
        ordertype: str,
        volume: float | str,
        price: float | str = "",
        price2: float | str = "",
        leverage: str = "",
        oflags: str = "",
        starttm: str = "",
        expiretm: str = "",
        userref: str = "",
        validate: str = "",
    ) -> Any:
        """
        Place an order. Empty arguments are left out of the request.

        type: buy | sell
        ordertype: market | limit | stop-loss | take-profit | ...
        price2: secondary price, depending on ordertype
        oflags: comma separated list of fcib, fciq, nompp, post
        validate: "true" to validate inputs only, nothing is submitted
        """
        return self.private_query(
            "AddOrder",
            {
                "pair": pair,
                "type": type,
                "ordertype": ordertype,
                "price": _number_field(price),
                "price2": _number_field(price2),
                "volume": _number_field(volume),
                "leverage": leverage,
                "oflags": oflags,
                "starttm": starttm,
                "expiretm": expiretm,
                "userref": userref,
                "validate": validate,
            },
        )

    def cancel_open_order(self, txid: str) -> Any:
        return self.private_query("CancelOrder", {"txid": txid})


def _number_field(value: float | str) -> str:
    if value == "" or value is None:
        return ""
    return format_number(value)
