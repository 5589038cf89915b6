"""
Shared Flask extension instances.

The limiter lives here so route modules can decorate endpoints without
importing the app factory. create_app() binds it to the app and its RATELIMIT_*
settings.
"""

from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Keyed by client address; protects the provider quota from a single noisy caller.
limiter = Limiter(key_func=get_remote_address)


def advice_rate_limit() -> str:
    """Advice endpoint limit, read at request time so config changes apply."""
    return current_app.config.get("RATELIMIT_ADVICE", "10 per minute; 300 per day")
