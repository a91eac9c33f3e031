from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Backend configuration
API_BASE_URL = config.get("LUX_API_URL", "http://localhost:8088")

# Timeout configuration
# Total time allowed for one request (including reading the body), in milliseconds
REQUEST_TIMEOUT_MS = config.get("LUX_REQUEST_TIMEOUT_MS", 30000, minimum=1)

# Token storage
# Backend for the credential store: "file" (persistent), "memory" or "none"
CREDENTIAL_BACKEND = config.get("LUX_CREDENTIAL_BACKEND", "file", choices=("file", "memory", "none"))
TOKEN_FILE = config.get("LUX_TOKEN_FILE", "~/.lux/tokens.json")

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "info", choices=("debug", "info", "warning", "error", "critical"))
DEBUG_LOG_FILE = config.get("LUX_DEBUG_LOG_FILE", "lux_debug.log")
