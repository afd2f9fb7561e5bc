"""
Per-exchange client settings resolved from env, then ``config.py``, then defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from exchanges.base_client import Exchange

_DEFAULTS = {
    Exchange.BITSTAMP: ("https://www.bitstamp.net/api/v2/", 1000),
    Exchange.KRAKEN: ("https://api.kraken.com", 2000),
}
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """Connection and pacing parameters for one exchange client."""

    base_url: str
    min_request_interval_ms: int
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @staticmethod
    def from_env(exchange: Exchange) -> "ClientSettings":
        name = exchange.name
        base_url, interval = _DEFAULTS[exchange]
        timeout = DEFAULT_TIMEOUT_SECONDS

        try:
            import config as config_module  # type: ignore
        except ModuleNotFoundError:
            config_module = None  # type: ignore

        if config_module is not None:
            base_url = getattr(config_module, f"{name}_API_URL", base_url)
            interval = getattr(config_module, f"{name}_MIN_REQUEST_INTERVAL_MS", interval)
            timeout = getattr(config_module, "HTTP_TIMEOUT_SECONDS", timeout)

        base_url = os.getenv(f"COINBRIDGE_{name}_API_URL") or base_url
        interval = _int_env(f"COINBRIDGE_{name}_MIN_REQUEST_INTERVAL_MS", interval)
        timeout = _float_env("COINBRIDGE_HTTP_TIMEOUT_SECONDS", timeout)

        return ClientSettings(
            base_url=base_url,
            min_request_interval_ms=int(interval),
            timeout=float(timeout),
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got '{raw}'") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number, got '{raw}'") from exc
