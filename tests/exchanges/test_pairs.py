import pytest

from exchanges.bitstamp.pairs import BITSTAMP_PAIRS
from exchanges.errors import ErrorKind, PairUnsupportedError
from exchanges.kraken.pairs import KRAKEN_PAIRS
from exchanges.schemas import Pair


@pytest.mark.parametrize("registry", [BITSTAMP_PAIRS, KRAKEN_PAIRS], ids=lambda r: r.exchange)
def test_resolve_is_total(registry):
    """Every canonical pair resolves to a token or to None, never an error."""
    supported = set(registry.supported_pairs())
    for pair in Pair:
        token = registry.resolve(pair)
        if pair in supported:
            assert isinstance(token, str) and token
        else:
            assert token is None


@pytest.mark.parametrize("registry", [BITSTAMP_PAIRS, KRAKEN_PAIRS], ids=lambda r: r.exchange)
def test_tokens_round_trip_to_pairs(registry):
    """Each exchange token maps back to the pair it came from."""
    for pair in registry.supported_pairs():
        assert registry.pair_for(registry.resolve(pair)) is pair


def test_known_tokens():
    """Spot-check the wire tokens of both exchanges."""
    assert BITSTAMP_PAIRS.resolve(Pair.BTC_USD) == "btcusd"
    assert KRAKEN_PAIRS.resolve(Pair.BTC_EUR) == "XXBTZEUR"


def test_require_raises_for_unsupported_pair():
    """`require` raises PairUnsupported naming the pair and exchange."""
    assert Pair.BTC_JPY not in BITSTAMP_PAIRS
    with pytest.raises(PairUnsupportedError) as excinfo:
        BITSTAMP_PAIRS.require(Pair.BTC_JPY)
    assert excinfo.value.kind is ErrorKind.PAIR_UNSUPPORTED
    assert excinfo.value.exchange == "bitstamp"
    assert "BTC_JPY" in str(excinfo.value)


def test_kraken_does_not_list_eur_usd():
    """EUR/USD is not traded on Kraken here."""
    assert KRAKEN_PAIRS.resolve(Pair.EUR_USD) is None


def test_pair_parse_accepts_common_spellings():
    """Slash, dash and case variants parse to the same pair."""
    assert Pair.parse("btc/usd") is Pair.BTC_USD
    assert Pair.parse("ETH-BTC") is Pair.ETH_BTC
    assert Pair.BTC_EUR.base == "BTC"
    assert Pair.BTC_EUR.quote == "EUR"
    with pytest.raises(ValueError):
        Pair.parse("FOO_BAR")
