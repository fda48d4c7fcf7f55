"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Create limiter instance
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage,
    strategy="fixed-window",
)

# Specific rate limits for different endpoint types
RATE_LIMITS = {
    # Authentication - stricter limits to prevent brute force
    "auth_login": "5/minute",

    # Price/external API calls (to respect external rate limits)
    "price_fetch": "10/minute",
}
