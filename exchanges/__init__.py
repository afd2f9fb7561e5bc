"""
Exchange integrations behind one exchange-agnostic interface.

Typical use::

    from exchanges import Exchange, ExchangeCredentials, OrderType, Pair, open_exchange

    api = open_exchange(Exchange.KRAKEN, ExchangeCredentials(api_key, api_secret))
    ticker = api.ticker(Pair.BTC_EUR)
"""

from .base_client import Exchange, ExchangeApi, ExchangeCredentials  # noqa: F401
from .errors import (  # noqa: F401
    ErrorKind,
    ExchangeClientError,
    ExchangeError,
    InvalidDataError,
    NetworkError,
    PairUnsupportedError,
)
from .factory import open_exchange, open_exchange_from_file  # noqa: F401
from .order_validation import OrderValidationError  # noqa: F401
from .schemas import Orderbook, OrderInfo, OrderType, Pair, Ticker  # noqa: F401
