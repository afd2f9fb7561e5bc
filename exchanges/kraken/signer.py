"""
Kraken private endpoint signature.

``API-Sign = base64(HMAC-SHA512(base64decode(secret), uri_path + SHA256(nonce + postdata)))``

`postdata` is the exact form-encoded body sent on the wire, which already
contains the ``nonce`` field.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac

from exchanges.base_client import ExchangeCredentials


def build_signature(uri_path: str, nonce: int | str, post_data: str, credentials: ExchangeCredentials) -> str:
    try:
        secret = base64.b64decode(credentials.api_secret, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Kraken api_secret must be base64 encoded") from exc
    body_digest = hashlib.sha256(f"{nonce}{post_data}".encode("utf-8")).digest()
    mac = hmac.new(secret, uri_path.encode("utf-8") + body_digest, hashlib.sha512)
    return base64.b64encode(mac.digest()).decode("utf-8")
