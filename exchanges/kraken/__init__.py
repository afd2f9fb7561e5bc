"""
Kraken exchange adapters.
"""

from .client import KrakenClient  # noqa: F401
from .generic import KrakenExchange  # noqa: F401
