"""
Load exchange credentials from a JSON key file or from environment variables.

Key file layout, one entry per named account::

    {
        "account_kraken": {
            "exchange"  : "kraken",
            "api_key"   : "123456789ABCDEF",
            "api_secret": "ABC&EF?abcdef"
        },
        "account_bitstamp": {
            "exchange"   : "bitstamp",
            "api_key"    : "1234567890ABCDEF1234567890ABCDEF",
            "api_secret" : "1234567890ABCDEF1234567890ABCDEF",
            "customer_id": "123456"
        }
    }
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Tuple

from exchanges.base_client import Exchange, ExchangeCredentials

logger = logging.getLogger(__name__)


def load_credentials(account_name: str, path: str | Path) -> Tuple[Exchange, ExchangeCredentials]:
    """Return the exchange and credentials stored under `account_name`."""
    key_file = Path(path)
    try:
        raw = key_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Unable to read key file {key_file}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Key file {key_file} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Key file {key_file} must contain a JSON object")

    try:
        entry = data[account_name]
    except KeyError as exc:
        raise KeyError(f"No account named '{account_name}' in {key_file}") from exc
    if not isinstance(entry, dict):
        raise ValueError(f"Account '{account_name}' in {key_file} must be a JSON object")

    try:
        exchange = Exchange.parse(str(entry["exchange"]))
        credentials = ExchangeCredentials(
            api_key=str(entry["api_key"]),
            api_secret=str(entry["api_secret"]),
            customer_id=str(entry["customer_id"]) if entry.get("customer_id") else None,
        )
    except KeyError as exc:
        raise ValueError(f"Account '{account_name}' is missing field {exc}") from exc

    logger.debug("Loaded %s credentials for account '%s'", exchange.value, account_name)
    return exchange, credentials


def credentials_from_env(prefix: str) -> ExchangeCredentials:
    """Read `<PREFIX>_API_KEY`, `<PREFIX>_API_SECRET` and optional `<PREFIX>_CUSTOMER_ID`."""
    prefix = prefix.upper().rstrip("_")
    missing = [
        name
        for name in (f"{prefix}_API_KEY", f"{prefix}_API_SECRET")
        if not os.environ.get(name)
    ]
    if missing:
        raise ValueError(f"Missing environment variables: {', '.join(missing)}")
    return ExchangeCredentials(
        api_key=os.environ[f"{prefix}_API_KEY"],
        api_secret=os.environ[f"{prefix}_API_SECRET"],
        customer_id=os.environ.get(f"{prefix}_CUSTOMER_ID") or None,
    )
