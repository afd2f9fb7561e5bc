"""Kraken pair tokens, using the full names Kraken returns as result keys."""

from __future__ import annotations

from exchanges.pairs import PairRegistry
from exchanges.schemas import Pair

KRAKEN_PAIRS = PairRegistry(
    "kraken",
    {
        Pair.BTC_USD: "XXBTZUSD",
        Pair.BTC_EUR: "XXBTZEUR",
        Pair.BTC_GBP: "XXBTZGBP",
        Pair.BTC_JPY: "XXBTZJPY",
        Pair.BTC_CAD: "XXBTZCAD",
        Pair.ETH_BTC: "XETHXXBT",
        Pair.ETH_USD: "XETHZUSD",
        Pair.ETH_EUR: "XETHZEUR",
        Pair.LTC_BTC: "XLTCXXBT",
        Pair.LTC_USD: "XLTCZUSD",
        Pair.LTC_EUR: "XLTCZEUR",
        Pair.XRP_BTC: "XXRPXXBT",
        Pair.XRP_USD: "XXRPZUSD",
        Pair.XRP_EUR: "XXRPZEUR",
        Pair.BCH_BTC: "BCHXBT",
        Pair.BCH_USD: "BCHUSD",
        Pair.BCH_EUR: "BCHEUR",
        Pair.XLM_BTC: "XXLMXXBT",
        Pair.ZEC_BTC: "XZECXXBT",
        Pair.ETC_ETH: "XETCXETH",
        Pair.XMR_BTC: "XXMRXXBT",
        Pair.DOGE_BTC: "XXDGXXBT",
        Pair.USDT_USD: "USDTZUSD",
    },
)
