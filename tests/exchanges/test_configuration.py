import json

import httpx
import pytest

from exchanges import Exchange, ExchangeApi, ExchangeCredentials, open_exchange, open_exchange_from_file
from exchanges.bitstamp.generic import BitstampExchange
from exchanges.credentials import credentials_from_env, load_credentials
from exchanges.factory import ExchangeRegistry
from exchanges.kraken.generic import KrakenExchange
from exchanges.settings import ClientSettings

KEYS = {
    "account_kraken": {
        "exchange": "kraken",
        "api_key": "123456789ABCDEF",
        "api_secret": "a3Jha2VuLXRlc3Qtc2VjcmV0",
    },
    "account_bitstamp": {
        "exchange": "bitstamp",
        "api_key": "1234567890ABCDEF1234567890ABCDEF",
        "api_secret": "1234567890ABCDEF1234567890ABCDEF",
        "customer_id": "123456",
    },
    "account_broken": {"exchange": "bitstamp", "api_key": "only-key"},
    "account_unknown": {"exchange": "mtgox", "api_key": "a", "api_secret": "b"},
}


@pytest.fixture
def keys_file(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text(json.dumps(KEYS), encoding="utf-8")
    return path


def test_load_bitstamp_credentials(keys_file):
    """Bitstamp accounts load with their customer id."""
    exchange, credentials = load_credentials("account_bitstamp", keys_file)
    assert exchange is Exchange.BITSTAMP
    assert credentials.customer_id == "123456"
    assert credentials.api_key == "1234567890ABCDEF1234567890ABCDEF"


def test_load_kraken_credentials_without_customer_id(keys_file):
    """Kraken accounts need no customer id."""
    exchange, credentials = load_credentials("account_kraken", keys_file)
    assert exchange is Exchange.KRAKEN
    assert credentials.customer_id is None


def test_missing_account(keys_file):
    """An unknown account name raises KeyError."""
    with pytest.raises(KeyError):
        load_credentials("account_poloniex", keys_file)


@pytest.mark.parametrize("account", ["account_broken", "account_unknown"])
def test_invalid_account_entries(keys_file, account):
    """Incomplete entries and unknown exchanges are rejected."""
    with pytest.raises(ValueError):
        load_credentials(account, keys_file)


def test_unreadable_key_file(tmp_path):
    """Missing or malformed key files raise ValueError."""
    with pytest.raises(ValueError):
        load_credentials("account_kraken", tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_credentials("account_kraken", bad)


def test_credentials_repr_hides_secret():
    """The repr never shows the secret or the full key."""
    text = repr(ExchangeCredentials(api_key="abcdefgh", api_secret="top-secret"))
    assert "top-secret" not in text
    assert "efgh" not in text


def test_credentials_from_env(monkeypatch):
    """Credentials are read from prefixed environment variables."""
    monkeypatch.setenv("BITSTAMP_API_KEY", "k")
    monkeypatch.setenv("BITSTAMP_API_SECRET", "s")
    monkeypatch.setenv("BITSTAMP_CUSTOMER_ID", "42")
    credentials = credentials_from_env("bitstamp")
    assert credentials == ExchangeCredentials(api_key="k", api_secret="s", customer_id="42")


def test_credentials_from_env_reports_missing(monkeypatch):
    """The error names the missing environment variable."""
    monkeypatch.delenv("KRAKEN_API_KEY", raising=False)
    monkeypatch.delenv("KRAKEN_API_SECRET", raising=False)
    with pytest.raises(ValueError) as excinfo:
        credentials_from_env("KRAKEN")
    assert "KRAKEN_API_KEY" in str(excinfo.value)


def test_settings_defaults_come_from_config(monkeypatch):
    """Without overrides, settings come from config.py."""
    monkeypatch.delenv("COINBRIDGE_KRAKEN_API_URL", raising=False)
    monkeypatch.delenv("COINBRIDGE_KRAKEN_MIN_REQUEST_INTERVAL_MS", raising=False)
    settings = ClientSettings.from_env(Exchange.KRAKEN)
    assert settings.base_url == "https://api.kraken.com"
    assert settings.min_request_interval_ms == 2000


def test_settings_env_overrides(monkeypatch):
    """Environment variables override config.py values."""
    monkeypatch.setenv("COINBRIDGE_BITSTAMP_MIN_REQUEST_INTERVAL_MS", "250")
    monkeypatch.setenv("COINBRIDGE_BITSTAMP_API_URL", "http://localhost:9000/api/v2/")
    monkeypatch.setenv("COINBRIDGE_HTTP_TIMEOUT_SECONDS", "2.5")
    settings = ClientSettings.from_env(Exchange.BITSTAMP)
    assert settings.min_request_interval_ms == 250
    assert settings.base_url == "http://localhost:9000/api/v2/"
    assert settings.timeout == 2.5


def test_settings_reject_bad_integer(monkeypatch):
    """A non-integer interval override is rejected."""
    monkeypatch.setenv("COINBRIDGE_KRAKEN_MIN_REQUEST_INTERVAL_MS", "soon")
    with pytest.raises(ValueError):
        ClientSettings.from_env(Exchange.KRAKEN)


def test_open_exchange_dispatches_per_exchange():
    """The factory builds the right implementation for each exchange."""
    credentials = ExchangeCredentials(api_key="k", api_secret="a3Jha2VuLXRlc3Qtc2VjcmV0", customer_id="1")
    kraken = open_exchange(Exchange.KRAKEN, credentials)
    bitstamp = open_exchange("bitstamp", credentials)
    try:
        assert isinstance(kraken, KrakenExchange)
        assert isinstance(bitstamp, BitstampExchange)
        assert isinstance(kraken, ExchangeApi)
        assert isinstance(bitstamp, ExchangeApi)
    finally:
        kraken.close()
        bitstamp.close()


def test_open_exchange_from_file_passes_client_options(keys_file):
    """Client keyword options reach the underlying client."""
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"error": [], "result": {}}))
    settings = ClientSettings(base_url="https://api.kraken.com", min_request_interval_ms=0)

    api = open_exchange_from_file(
        "account_kraken",
        keys_file,
        settings=settings,
        http_client=httpx.Client(transport=transport),
    )

    assert isinstance(api, KrakenExchange)
    assert api.client.settings is settings
    assert api.client.credentials.api_key == "123456789ABCDEF"


def test_unknown_exchange_name():
    """Unlisted exchange names are rejected."""
    with pytest.raises(ValueError):
        open_exchange("poloniex", ExchangeCredentials(api_key="k", api_secret="s"))


def test_registry_refuses_duplicates():
    """Duplicate registration needs an explicit overwrite."""
    registry = ExchangeRegistry()
    registry.register(Exchange.KRAKEN, KrakenExchange.connect)
    with pytest.raises(KeyError):
        registry.register(Exchange.KRAKEN, KrakenExchange.connect)
    with pytest.raises(KeyError):
        registry.get(Exchange.BITSTAMP)
    registry.register(Exchange.KRAKEN, KrakenExchange.connect, overwrite=True)
    assert list(registry.list()) == [Exchange.KRAKEN]
