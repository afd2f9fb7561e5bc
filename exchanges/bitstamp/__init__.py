"""
Bitstamp exchange adapters.
"""

from .client import BitstampClient  # noqa: F401
from .generic import BitstampExchange  # noqa: F401
