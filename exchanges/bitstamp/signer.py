"""
Bitstamp v2 request signature.

The signed message is ``nonce + customer_id + api_key`` encoded as UTF-8,
keyed with the UTF-8 API secret under HMAC-SHA256. Bitstamp expects the
digest as uppercase hex in the ``signature`` form field.
"""

from __future__ import annotations

import hashlib
import hmac

from exchanges.base_client import ExchangeCredentials


def build_signature(nonce: int | str, credentials: ExchangeCredentials) -> str:
    if not credentials.customer_id:
        raise ValueError("Bitstamp credentials require a customer_id")
    message = f"{nonce}{credentials.customer_id}{credentials.api_key}"
    mac = hmac.new(
        credentials.api_secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    )
    return mac.hexdigest().upper()
