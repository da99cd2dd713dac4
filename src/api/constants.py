"""API-related constants."""

API_PREFIX = "/api"

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
LOCATION_HEADER = "Location"

# Request logging
MAX_USER_AGENT_LENGTH = 200
