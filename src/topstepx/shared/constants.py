"""Gateway constants shared across modules"""

from datetime import timedelta

DEFAULT_BASE_URL = "https://api.topstepx.com/api"
DEFAULT_TIMEOUT_SECONDS = 30

# Sessions last 24h; validate every 23h and treat the final hour as expiring
SESSION_LIFETIME = timedelta(hours=24)
VALIDATION_INTERVAL = timedelta(hours=23)
EXPIRY_MARGIN = timedelta(hours=1)

DEFAULT_HEADERS = {
    "Accept": "text/plain",
    "Content-Type": "application/json",
}

# Endpoint paths (relative to base URL)
LOGIN_PATH = "/Auth/loginKey"
VALIDATE_PATH = "/Auth/validate"
HISTORY_PATH = "/History/retrieveBars"
ACCOUNT_SEARCH_PATH = "/Account/search"
CONTRACT_SEARCH_PATH = "/Contract/search"
ORDER_PLACE_PATH = "/Order/place"
LIVE_PATH = "/live"

DEFAULT_SYMBOLS = ("MNQ", "NQ", "MES", "ES", "MGC", "GC")

# Related-but-wrong instruments that share a root with the requested symbol
EXCLUDE_PATTERNS = frozenset({"NQG", "NQM", "ESG", "ESM", "GCG", "GCM"})

# Full-size root -> micro contract that must not satisfy it
MICRO_SYMBOLS = {
    "NQ": "MNQ",
    "ES": "MES",
    "GC": "MGC",
}
