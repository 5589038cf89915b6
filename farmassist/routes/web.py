"""
Service-level routes: health check and a short index of the API.
"""

from flask import Blueprint, jsonify
from ..extensions import limiter

web_bp = Blueprint("web", __name__)


@limiter.exempt
@web_bp.route("/healthz")
def healthz():
    """Simple health endpoint to verify the server responds."""
    return "OK", 200


@web_bp.route("/")
def index():
    return jsonify({
        "service": "farmassist",
        "endpoints": [
            "POST /api/v1/advice",
            "GET /api/v1/advice/status",
            "POST /api/v1/crop-recommendations",
            "GET /api/v1/weather?location=<name>",
        ],
    })
