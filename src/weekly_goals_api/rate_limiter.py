"""
Rate limiting middleware for API protection
"""

import logging

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

# In-memory storage; one process serves the whole dashboard
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per minute"],
    headers_enabled=False,
    storage_uri=None,
)

HEALTH_RATE_LIMIT = "1000 per minute"
GENERATION_RATE_LIMIT = "30 per minute"


def configure_rate_limiting(app):
    """
    Configure rate limiting for the FastAPI application
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    logger.info(
        f"✅ Rate limiting configured (health: {HEALTH_RATE_LIMIT}, "
        f"week generation: {GENERATION_RATE_LIMIT})"
    )
    return limiter
