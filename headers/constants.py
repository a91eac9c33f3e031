"""Wire constants shared by the dispatcher and the refresh call"""

from typing import Dict

# Versioned prefix every backend path lives under
API_PREFIX = "/api/v1"

# Paths under this prefix never trigger an automatic token refresh
AUTH_PATH_PREFIX = "/auth/"

# Refresh endpoint, relative to API_PREFIX
REFRESH_PATH = "/auth/refresh"

# Default JSON content negotiation
DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# Keys the credential pair is persisted under
ACCESS_TOKEN_KEY = "lux_access_token"
REFRESH_TOKEN_KEY = "lux_refresh_token"
