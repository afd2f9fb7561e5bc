from urllib.parse import parse_qs

import httpx
import pytest

from exchanges.base_client import ExchangeApi, ExchangeCredentials
from exchanges.errors import ErrorKind, ExchangeError, InvalidDataError, PairUnsupportedError
from exchanges.kraken.client import KrakenClient, parse_result
from exchanges.kraken.generic import KrakenExchange, parse_order_info, parse_orderbook, parse_ticker
from exchanges.kraken.signer import build_signature
from exchanges.schemas import OrderType, Pair
from exchanges.settings import ClientSettings
from exchanges.throttle import NonceGenerator, RateLimiter

CREDENTIALS = ExchangeCredentials(api_key="kraken-key", api_secret="a3Jha2VuLXRlc3Qtc2VjcmV0")
SETTINGS = ClientSettings(base_url="https://api.kraken.com", min_request_interval_ms=0)

TICKER_FIXTURE = {"c": ["100.5", "0"], "a": ["101.0", "0"], "b": ["100.0", "0"], "v": ["0", "50.0"]}


@pytest.fixture
def recorder():
    class Recorder:
        def __init__(self):
            self.requests = []
            self.responses = []

        def __call__(self, request):
            self.requests.append(request)
            return self.responses.pop(0)

        def reply(self, status=200, **kwargs):
            self.responses.append(httpx.Response(status, **kwargs))

    return Recorder()


@pytest.fixture
def client(recorder):
    return KrakenClient(
        CREDENTIALS,
        settings=SETTINGS,
        http_client=httpx.Client(transport=httpx.MockTransport(recorder)),
        rate_limiter=RateLimiter(0),
        nonce_generator=NonceGenerator(),
    )


@pytest.fixture
def api(client):
    return KrakenExchange(client)


def _form(request):
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


def test_exchange_satisfies_protocol(api):
    """KrakenExchange implements ExchangeApi."""
    assert isinstance(api, ExchangeApi)


def test_ticker_normalization():
    """Ticker reads last, ask, bid and 24h volume from the arrays."""
    ticker = parse_ticker({"error": [], "result": {"XXBTZUSD": TICKER_FIXTURE}}, Pair.BTC_USD, "XXBTZUSD")
    assert ticker.last_trade_price == 100.5
    assert ticker.lowest_ask == 101.0
    assert ticker.highest_bid == 100.0
    assert ticker.volume == 50.0
    assert ticker.pair is Pair.BTC_USD


def test_ticker_over_http(api, recorder):
    """Ticker is a GET on the public Ticker endpoint."""
    recorder.reply(json={"error": [], "result": {"XXBTZUSD": TICKER_FIXTURE}})

    ticker = api.ticker(Pair.BTC_USD)

    request = recorder.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/0/public/Ticker"
    assert request.url.params["pair"] == "XXBTZUSD"
    assert ticker.volume == 50.0


def test_ticker_accepts_alternate_result_key():
    """A single result entry under another key is still used."""
    ticker = parse_ticker({"error": [], "result": {"XBTUSD": TICKER_FIXTURE}}, Pair.BTC_USD, "XXBTZUSD")
    assert ticker.last_trade_price == 100.5


def test_ticker_without_volume():
    """A ticker without volume still parses."""
    fixture = {key: value for key, value in TICKER_FIXTURE.items() if key != "v"}
    ticker = parse_ticker({"error": [], "result": {"XXBTZUSD": fixture}}, Pair.BTC_USD, "XXBTZUSD")
    assert ticker.volume is None


def test_ticker_with_short_array_is_invalid():
    """Empty value arrays are InvalidData."""
    broken = dict(TICKER_FIXTURE, c=[])
    with pytest.raises(InvalidDataError):
        parse_ticker({"error": [], "result": {"XXBTZUSD": broken}}, Pair.BTC_USD, "XXBTZUSD")


def test_orderbook_keeps_exchange_order():
    """Orderbook rows keep the order Kraken sent them in."""
    payload = {
        "error": [],
        "result": {
            "XXBTZEUR": {
                "asks": [["101", "1", 1616663113], ["102", "2", 1616663113], ["103", "3", 1616663113]],
                "bids": [["99", "1", 1616663113], ["98", "2", 1616663113]],
            }
        },
    }
    book = parse_orderbook(payload, Pair.BTC_EUR, "XXBTZEUR")
    assert book.asks == ((101.0, 1.0), (102.0, 2.0), (103.0, 3.0))
    assert book.bids == ((99.0, 1.0), (98.0, 2.0))


def test_orderbook_requests_full_depth(api, recorder):
    """Orderbook asks for the full depth."""
    recorder.reply(json={"error": [], "result": {"XETHZUSD": {"asks": [], "bids": []}}})

    book = api.orderbook(Pair.ETH_USD)

    request = recorder.requests[0]
    assert request.url.path == "/0/public/Depth"
    assert request.url.params["pair"] == "XETHZUSD"
    assert request.url.params["count"] == "1000"
    assert book.asks == () and book.bids == ()


def test_add_order_collects_every_txid(api, client, recorder):
    """AddOrder is signed and every returned txid is kept."""
    recorder.reply(
        json={
            "error": [],
            "result": {"descr": {"order": "buy 1.00000000 XBTUSD @ limit 100.0"}, "txid": ["ABC123", "DEF456"]},
        }
    )

    info = api.add_order(OrderType.BUY_LIMIT, Pair.BTC_USD, 1.0, 100.0)

    assert list(info.identifier) == ["ABC123", "DEF456"]
    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.kraken.com/0/private/AddOrder"
    form = _form(request)
    assert form == {
        "nonce": form["nonce"],
        "pair": "XXBTZUSD",
        "type": "buy",
        "ordertype": "limit",
        "price": "100",
        "volume": "1",
    }
    assert request.headers["API-Key"] == "kraken-key"
    assert request.headers["API-Sign"] == build_signature(
        "/0/private/AddOrder", form["nonce"], request.content.decode(), CREDENTIALS
    )
    assert client.last_request_timestamp > 0


def test_market_order_omits_price(api, recorder):
    """Market orders send no price field."""
    recorder.reply(json={"error": [], "result": {"txid": ["OQCLML-BW3P3-BUCMWZ"]}})

    api.add_order(OrderType.SELL_MARKET, Pair.ETH_EUR, 2.5, 1800.0)

    form = _form(recorder.requests[0])
    assert form["type"] == "sell"
    assert form["ordertype"] == "market"
    assert form["volume"] == "2.5"
    assert "price" not in form


def test_nonces_increase_across_private_calls(client, recorder):
    """Each private call carries a larger nonce."""
    recorder.reply(json={"error": [], "result": {}})
    recorder.reply(json={"error": [], "result": {}})

    client.get_account_balance()
    client.get_trade_balance(asset="ZEUR")

    first, second = (int(_form(request)["nonce"]) for request in recorder.requests)
    assert second > first
    assert _form(recorder.requests[1])["asset"] == "ZEUR"


def test_error_envelope_becomes_exchange_error():
    """A non-empty error list raises ExchangeError verbatim."""
    with pytest.raises(ExchangeError) as excinfo:
        parse_order_info({"error": ["EAPI:Invalid signature"]})
    assert excinfo.value.messages == ["EAPI:Invalid signature"]
    assert excinfo.value.kind is ErrorKind.EXCHANGE


def test_error_envelope_over_http(api, recorder):
    """Error envelopes from the wire surface as ExchangeError."""
    recorder.reply(json={"error": ["EAPI:Invalid signature"]})

    with pytest.raises(ExchangeError) as excinfo:
        api.add_order(OrderType.BUY_LIMIT, Pair.BTC_USD, 1.0, 100.0)

    assert excinfo.value.messages == ["EAPI:Invalid signature"]


def test_missing_result_is_invalid_data():
    """An envelope without result is InvalidData."""
    with pytest.raises(InvalidDataError):
        parse_result({"error": []})


def test_order_without_txid_is_invalid_data():
    """An order reply without txids is InvalidData."""
    with pytest.raises(InvalidDataError):
        parse_order_info({"error": [], "result": {"descr": {"order": "x"}, "txid": []}})


def test_unsupported_pair_fails_before_any_request(api, client, recorder):
    """An unsupported pair sends nothing and uses no nonce."""
    with pytest.raises(PairUnsupportedError):
        api.add_order(OrderType.BUY_MARKET, Pair.EUR_USD, 1.0)

    assert recorder.requests == []
    assert client._nonces.last == 0
    assert client.last_request_timestamp == 0


def test_extended_order_parameters(client, recorder):
    """Optional AddOrder parameters are encoded on the form."""
    recorder.reply(json={"error": [], "result": {"descr": {"order": "validated"}}})

    client.add_standard_order(
        pair="XXBTZEUR",
        type="sell",
        ordertype="stop-loss-limit",
        volume=0.1,
        price=25000.0,
        price2=24900.0,
        oflags="post",
        validate="true",
    )

    form = _form(recorder.requests[0])
    assert form["price"] == "25000"
    assert form["price2"] == "24900"
    assert form["oflags"] == "post"
    assert form["validate"] == "true"
    assert "leverage" not in form


def test_cancel_order(client, recorder):
    """CancelOrder posts the txid."""
    recorder.reply(json={"error": [], "result": {"count": 1}})

    result = parse_result(client.cancel_open_order("OQCLML-BW3P3-BUCMWZ"))

    assert recorder.requests[0].url.path == "/0/private/CancelOrder"
    assert _form(recorder.requests[0])["txid"] == "OQCLML-BW3P3-BUCMWZ"
    assert result == {"count": 1}
