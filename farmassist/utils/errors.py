"""
Client-safe error messages and structured log lines for the JSON routes.

Routes never echo exception text back to callers: provider errors can carry
request ids or fragments of credentials, and weather failures leak upstream
URLs. sanitize_error() logs the detail and hands back a fixed message.
"""

from __future__ import annotations
from flask import current_app

GENERIC_MESSAGES = {
    "server": "Something went wrong while preparing your advice. Please try again.",
    "not_found": "No such endpoint.",
    "weather": "Weather data is currently unavailable for that location.",
}

# Caller mistakes are routine; everything else deserves a stack trace
_EXPECTED = frozenset({"not_found", "weather"})


def sanitize_error(error: Exception, error_type: str = "server", log_prefix: str = "") -> str:
    """
    Log ``error`` and return the generic message for ``error_type``.

    Example:
        >>> try:
        ...     report = provider.fetch_current_and_forecast(location)
        ... except Exception as e:
        ...     return jsonify({"success": False, "error": sanitize_error(e, "weather")}), 503
    """
    detail = f"{type(error).__name__}: {error}"
    if log_prefix:
        detail = f"{log_prefix} ({detail})"

    if error_type in _EXPECTED:
        current_app.logger.info(f"[{error_type}] {detail}")
    else:
        current_app.logger.error(f"[{error_type}] {detail}", exc_info=True)

    return GENERIC_MESSAGES.get(error_type, GENERIC_MESSAGES["server"])


def log_info(message: str, **context) -> None:
    """Info line with ``key=value`` context, e.g. log_info("Advice served", source="local")."""
    if context:
        message = f"{message} | " + " ".join(f"{k}={v}" for k, v in context.items())
    current_app.logger.info(message)
