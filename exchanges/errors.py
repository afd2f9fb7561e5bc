"""
Error taxonomy shared by all exchange integrations.

Every failure surfaced to callers is one of four kinds. Each exception carries
its `ErrorKind` so call sites can branch exhaustively without isinstance
chains.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, Optional


class ErrorKind(enum.Enum):
    PAIR_UNSUPPORTED = "pair_unsupported"
    NETWORK = "network"
    INVALID_DATA = "invalid_data"
    EXCHANGE = "exchange"


class ExchangeClientError(RuntimeError):
    """Base class for every error raised by the exchange layer."""

    kind: ErrorKind

    def __init__(self, message: str, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.payload = payload if payload is not None else {}


class PairUnsupportedError(ExchangeClientError):
    """The pair has no token on the target exchange. Raised before any request."""

    kind = ErrorKind.PAIR_UNSUPPORTED

    def __init__(self, pair: Any, exchange: str) -> None:
        name = getattr(pair, "value", pair)
        super().__init__(f"Pair {name} is not supported by {exchange}")
        self.pair = pair
        self.exchange = exchange


class NetworkError(ExchangeClientError):
    """Connection, TLS or timeout failure in the transport."""

    kind = ErrorKind.NETWORK


class InvalidDataError(ExchangeClientError):
    """Response body is not JSON or lacks the structure the normalizer needs."""

    kind = ErrorKind.INVALID_DATA


class ExchangeError(ExchangeClientError):
    """The exchange answered with an error envelope; `messages` are kept verbatim."""

    kind = ErrorKind.EXCHANGE

    def __init__(
        self,
        exchange: str,
        messages: Iterable[str],
        payload: Optional[Any] = None,
    ) -> None:
        self.exchange = exchange
        self.messages = list(messages)
        super().__init__(f"{exchange} error: {'; '.join(self.messages)}", payload=payload)
