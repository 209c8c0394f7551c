# storefront/config.py
import os

# Public address of the API (used in the MCP info document)
BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")

# Frontend origins allowed to send cookies, comma separated
CLIENT_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CLIENT_ORIGIN", "http://localhost:5173").split(",")
    if origin.strip()
]

# Signed cookie session
SESSION_SECRET = os.getenv("SESSION_SECRET", "dev-secret")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 7)))
HTTPS_ONLY = (os.getenv("APP_ENV") or os.getenv("NODE_ENV", "development")) == "production"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Listing pagination
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

# Cart owner for the MCP agent tools
AGENT_USER_ID = os.getenv("AGENT_USER_ID", "mcp-agent")

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")
