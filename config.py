"""
Local configuration for exchange endpoints and request pacing.

Environment variables prefixed with ``COINBRIDGE_`` override these values
(see ``exchanges.settings``). Keep API keys in the key file, not here.
"""

BITSTAMP_API_URL = "https://www.bitstamp.net/api/v2/"
KRAKEN_API_URL = "https://api.kraken.com"

# Bitstamp allows 600 requests per 10 minutes.
BITSTAMP_MIN_REQUEST_INTERVAL_MS = 1000
# Kraken private endpoints decay one call counter every 2 seconds.
KRAKEN_MIN_REQUEST_INTERVAL_MS = 2000

HTTP_TIMEOUT_SECONDS = 10.0

# JSON file holding named accounts, e.g.
# {"account_kraken": {"exchange": "kraken", "api_key": "...", "api_secret": "..."}}
KEYS_FILE = "keys_real.json"
