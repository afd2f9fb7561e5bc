"""Bitstamp v2 pair tokens."""

from __future__ import annotations

from exchanges.pairs import PairRegistry
from exchanges.schemas import Pair

BITSTAMP_PAIRS = PairRegistry(
    "bitstamp",
    {
        Pair.BTC_USD: "btcusd",
        Pair.BTC_EUR: "btceur",
        Pair.BTC_GBP: "btcgbp",
        Pair.ETH_BTC: "ethbtc",
        Pair.ETH_USD: "ethusd",
        Pair.ETH_EUR: "etheur",
        Pair.LTC_BTC: "ltcbtc",
        Pair.LTC_USD: "ltcusd",
        Pair.LTC_EUR: "ltceur",
        Pair.XRP_BTC: "xrpbtc",
        Pair.XRP_USD: "xrpusd",
        Pair.XRP_EUR: "xrpeur",
        Pair.BCH_BTC: "bchbtc",
        Pair.BCH_USD: "bchusd",
        Pair.BCH_EUR: "bcheur",
        Pair.XLM_BTC: "xlmbtc",
        Pair.USDT_USD: "usdtusd",
        Pair.EUR_USD: "eurusd",
    },
)
