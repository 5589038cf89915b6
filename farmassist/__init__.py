"""
Application factory and global configuration.

Creates the Flask app, configures rate limiting and logging, builds the
advice pipeline once per process (provider client, availability gate, weather
collaborator) and registers blueprints and CLI commands. Startup/config
concerns stay here; domain logic lives in services/.
"""

from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, Response
from dotenv import load_dotenv  # <-- ensure .env is loaded for local dev
from .extensions import limiter
from .routes.api import api_bp
from .routes.web import web_bp
from .services.ai import EXTENSION_KEY, build_advice_service


def _configure_logging(app: Flask) -> None:
    """Add a rotating file handler when LOG_FILE is set; INFO level outside debug."""
    log_file = app.config.get("LOG_FILE")
    level = logging.DEBUG if app.debug else logging.INFO

    pkg_logger = logging.getLogger(__name__)
    pkg_logger.setLevel(level)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
        pkg_logger.addHandler(handler)
        app.logger.addHandler(handler)


def create_app(config_object: str | None = None) -> Flask:
    # Load .env early (for local dev)
    # override=False so production env vars are not overwritten by a stale .env file
    load_dotenv(override=False)

    app = Flask(__name__)

    # --- Load central config.py first ---
    # Allow APP_CONFIG to override (e.g., farmassist.config.DevConfig)
    cfg_path = config_object or os.getenv("APP_CONFIG", "farmassist.config.ProdConfig")
    try:
        app.config.from_object(cfg_path)
    except (ImportError, AttributeError) as e:
        app.logger.warning(f"Could not load config object {cfg_path}: {e}")

    _configure_logging(app)

    limiter.init_app(app)

    if not app.config.get("RATELIMIT_ENABLED", True):
        limiter.enabled = False

    # --- Advice pipeline (one gate + one provider client per process) ---
    service = build_advice_service(app.config)
    app.extensions[EXTENSION_KEY] = service

    if not app.config.get("GEMINI_API_KEY"):
        app.logger.warning("[Advice] GEMINI_API_KEY not configured; serving local advice only")
    elif app.config.get("ADVICE_PROBE_ON_STARTUP", False):
        ok = service.revalidate()
        app.logger.info(f"[Advice] Startup provider probe {'succeeded' if ok else 'failed'}")

    @app.after_request
    def apply_security_headers(resp: Response) -> Response:
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        resp.headers["X-Frame-Options"] = "DENY"
        return resp

    # Blueprints
    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp, url_prefix="/api/v1")

    # Register CLI commands
    from farmassist.cli import ask_command, check_provider_command, list_models_command
    app.cli.add_command(check_provider_command)
    app.cli.add_command(list_models_command)
    app.cli.add_command(ask_command)

    return app
