from fastapi import FastAPI
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import Settings

# Shared by the route decorators; configured per application
limiter = Limiter(key_func=get_remote_address)

_request_limit = Settings.model_fields["rate_limit"].default


def request_limit() -> str:
    """Current limit for the decrypt and crack routes."""
    return _request_limit


def configure_rate_limiting(app: FastAPI, settings: Settings) -> None:
    """Apply the configured limit, reset counters and install the 429 handler."""
    global _request_limit
    _request_limit = settings.rate_limit

    limiter.enabled = settings.rate_limit_enabled
    limiter.reset()

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
