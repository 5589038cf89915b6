"""
Centralized configuration for all environments.

Select a config by setting:
  APP_CONFIG=farmassist.config.DevConfig      # local dev
  APP_CONFIG=farmassist.config.ProdConfig     # production (default if unset)
  APP_CONFIG=farmassist.config.TestConfig     # pytest

Notes:
- SECRET_KEY is read from FLASK_SECRET_KEY
- Rate limiting uses Flask-Limiter v3 keys (RATELIMIT_*).
- Advice provider keys are read once when the app is created; restart the
  process (or run `flask check-provider`) after changing them.
"""

from __future__ import annotations
import os
import secrets


class BaseConfig:
    # Random key when FLASK_SECRET_KEY is missing (sessions are not used)
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY") or secrets.token_hex(32)
    DEBUG = False
    TESTING = False

    # Feature flags
    ADMIN_ENDPOINTS_ENABLED = os.getenv("ADMIN_ENDPOINTS_ENABLED", "false").lower() == "true"

    # Third-party keys
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")

    # Advice provider (LiteLLM model id)
    ADVICE_MODEL = os.getenv("ADVICE_MODEL", "gemini/gemini-1.5-pro")
    ADVICE_TEMPERATURE = 0.2
    ADVICE_TOP_P = 0.95
    ADVICE_MAX_OUTPUT_TOKENS = 1000
    ADVICE_MAX_RETRIES = int(os.getenv("ADVICE_MAX_RETRIES", "2"))  # 3 attempts total
    ADVICE_BACKOFF_BASE_SECONDS = float(os.getenv("ADVICE_BACKOFF_BASE_SECONDS", "1.0"))
    ADVICE_REQUEST_TIMEOUT = int(os.getenv("ADVICE_REQUEST_TIMEOUT", "30"))
    ADVICE_PROBE_ON_STARTUP = os.getenv("ADVICE_PROBE_ON_STARTUP", "false").lower() == "true"

    # Weather enrichment
    WEATHER_TIMEOUT_SECONDS = 5
    WEATHER_CACHE_TTL = 600  # 10 minutes
    DEFAULT_LOCATION = os.getenv("DEFAULT_LOCATION", "Delhi, India")

    # Logging (optional rotating file in addition to the default handler)
    LOG_FILE = os.getenv("LOG_FILE", "")

    # Flask-Limiter v3
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "60 per minute; 2000 per day")
    RATELIMIT_ADVICE = os.getenv("RATELIMIT_ADVICE", "10 per minute; 300 per day")

    # Request bodies are small JSON documents
    MAX_CONTENT_LENGTH = 64 * 1024


class ProdConfig(BaseConfig):
    """Production settings (selected by default if APP_CONFIG is unset)."""
    pass


class DevConfig(BaseConfig):
    """Developer-friendly settings."""
    DEBUG = True
    ADMIN_ENDPOINTS_ENABLED = True


class TestConfig(BaseConfig):
    """CI/pytest settings."""
    TESTING = True
    DEBUG = True
    # Usually disable the limiter in tests to avoid flakiness
    RATELIMIT_ENABLED = False
    # Never talk to real providers from tests
    GEMINI_API_KEY = ""
    OPENWEATHER_API_KEY = ""
    ADVICE_PROBE_ON_STARTUP = False
    ADMIN_ENDPOINTS_ENABLED = True
    LOG_FILE = ""
