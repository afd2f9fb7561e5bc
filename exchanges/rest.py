"""
Shared HTTP plumbing for exchange REST clients.

Each client instance owns its credentials, its `httpx.Client` and the
timestamp of its last request. That timestamp is mutable, so one instance
must not be used from several threads at once.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import httpx

from exchanges.base_client import ExchangeCredentials
from exchanges.errors import InvalidDataError, NetworkError
from exchanges.settings import ClientSettings
from exchanges.throttle import NonceGenerator, RateLimiter, nonce_generator_for, unix_timestamp_ms

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def strip_empties(fields: Mapping[str, Any] | None) -> Dict[str, str]:
    """Drop None/empty values and stringify the rest, keeping insertion order."""
    if not fields:
        return {}
    return {key: str(value) for key, value in fields.items() if value is not None and value != ""}


def encode_form(fields: Mapping[str, str]) -> str:
    return urlencode(list(fields.items()))


def format_number(value: float | int | str) -> str:
    """Render a quantity or price in plain decimal notation (no exponent)."""
    if isinstance(value, str):
        return value
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class RestClient:
    """Throttled, JSON-decoding HTTP access shared by the exchange clients."""

    exchange_name = "exchange"

    def __init__(
        self,
        credentials: ExchangeCredentials,
        settings: ClientSettings,
        *,
        http_client: httpx.Client | None = None,
        rate_limiter: RateLimiter | None = None,
        nonce_generator: NonceGenerator | None = None,
    ) -> None:
        self.credentials = credentials
        self.settings = settings
        self.last_request_timestamp = 0
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client(timeout=settings.timeout)
        self._rate_limiter = (
            rate_limiter if rate_limiter is not None else RateLimiter(settings.min_request_interval_ms)
        )
        self._nonces = nonce_generator if nonce_generator is not None else nonce_generator_for(credentials)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(credentials={self.credentials!r}, base_url={self.settings.base_url!r})"

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _throttle(self) -> None:
        self._rate_limiter.throttle(self.last_request_timestamp)

    def _next_nonce(self) -> int:
        return self._nonces.next()

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        body: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Issue one request; callers throttle first. `body` and `headers` carry signatures and stay out of the log."""
        logger.debug("%s %s %s", self.exchange_name, method, url)
        try:
            response = self._client.request(
                method,
                url,
                params=params or None,
                content=body,
                headers=headers,
            )
        except httpx.DecodingError as exc:
            self._record_request()
            raise InvalidDataError(f"{self.exchange_name} sent an undecodable body from {url}: {exc}") from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"{self.exchange_name} request to {url} failed: {exc}") from exc
        self._record_request()
        return self._decode(response)

    def _record_request(self) -> None:
        self.last_request_timestamp = max(self.last_request_timestamp, unix_timestamp_ms())

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            snippet = response.text[:200]
            raise InvalidDataError(
                f"{self.exchange_name} returned a non-JSON body (HTTP {response.status_code}): {snippet}"
            ) from exc
