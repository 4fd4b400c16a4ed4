"""Configuration constants for the Google Flights scraper"""

# Endpoint configuration
FLIGHTS_URL = "https://www.google.com/travel/flights"
DEFAULT_LOCALE = "en"
TFU_PARAM = "EgQIABABIgA"  # Fixed technical constant sent by the web front end
DEFAULT_CURRENCY = "USD"

# Headers mimicking a desktop Chrome browser. The consent cookie keeps Google
# from serving the consent interstitial instead of results.
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate, br",
    "Cookie": "CONSENT=PENDING+987; SOCS=CAESHAgBEhJnd3NfMjAyMzA4MTAtMF9SQzIaAmRlIAEaBgiAo_CmBg",
}

# curl_cffi TLS fingerprint, matches the User-Agent above
IMPERSONATE = "chrome131"

# Rate limiting
MIN_REQUEST_INTERVAL = 1.5  # Seconds between outbound requests

# Timeouts
DEFAULT_REQUEST_TIMEOUT = 30.0  # Seconds

# Embedded data
DS1_MARKER = "AF_initDataCallback({key: 'ds:1'"
DATA_KEY = "data:"

# Substrings that identify an anti-automation page
BLOCK_MARKERS = (
    "unusual traffic",
    "Please show you&#39;re not a robot",
    "sorry/index",
)
BLOCK_RECOMMENDED_WAIT_MINUTES = 5

# Date grid
DEFAULT_ANCHOR_DAYS_AHEAD = 7

# Airport lookup
AIRPORT_CONTEXT_BEFORE = 500  # Chars scanned before a callback match
AIRPORT_CONTEXT_AFTER = 500
DATA_CODE_CONTEXT_BEFORE = 200
DATA_CODE_CONTEXT_AFTER = 500
FALLBACK_ORIGIN = "SFO"
FALLBACK_DESTINATION = "LAX"
FALLBACK_DAYS_AHEAD = 30

# Relevance scoring for airport results
SCORE_EXACT_CODE = 100
SCORE_CODE_SUBSTRING = 50
SCORE_NAME_SUBSTRING = 30
SCORE_CITY_SUBSTRING = 40
SCORE_COUNTRY_SUBSTRING = 10

# Request limits
MAX_PASSENGERS_PER_TYPE = 9
MIN_RESULTS_PER_PAGE = 1
MAX_RESULTS_PER_PAGE = 50
DEFAULT_MAX_RESULTS = 20
