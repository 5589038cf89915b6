"""
Defines JSON endpoints used by the front end.

Endpoints:
- /advice: farming advice (remote model with local fallback)
- /advice/status: advice provider availability
- /advice/revalidate: re-probe a disabled provider (admin endpoints only)
- /crop-recommendations: rule-based crop suggestions
- /weather: current conditions and short forecast for a location
"""

from flask import Blueprint, request, jsonify, current_app
from ..extensions import limiter, advice_rate_limit
from ..services.ai import AdviceValidationError, get_advice_service
from ..services.recommendations import recommend_crops
from ..utils.errors import sanitize_error, log_info, GENERIC_MESSAGES
from ..utils.validation import validate_advice_payload, validate_location


api_bp = Blueprint("api", __name__)


@api_bp.route("/advice", methods=["POST"])
@limiter.limit(advice_rate_limit)
def farming_advice():
    """
    Get farming advice for a question.

    Request body (JSON):
        {
            "query": "What pesticide should I use for rice blast?",
            "weather": {"condition": {"text": "..."}, "temp_c": 31, ...},  (optional)
            "location": "Pune" | {"name": "Pune", "country": "IN"},        (optional)
            "crop": "rice"                                                 (optional)
        }

    Returns:
        200: {"advice", "source": "remote"|"local", "model", "language", "topics", "error"?}
             Degraded (local fallback) answers are still 200.
        400: {"success": false, "error": "..."} when the query is missing/empty
    """
    payload, error = validate_advice_payload(request.get_json(silent=True))
    if error:
        return jsonify({"success": False, "error": error}), 400

    try:
        result = get_advice_service().get_advice(payload["query"], payload["context"])
    except AdviceValidationError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        sanitized_msg = sanitize_error(e, "server", "Advice request failed")
        return jsonify({"success": False, "error": sanitized_msg}), 500

    log_info("Advice served", source=result.source.value, model=result.model)
    return jsonify(result.to_dict()), 200


@api_bp.route("/advice/status", methods=["GET"])
@limiter.exempt
def advice_status():
    """Provider availability snapshot: {"available", "checked_at", "reason", "model"}."""
    return jsonify(get_advice_service().status()), 200


@api_bp.route("/advice/revalidate", methods=["POST"])
def revalidate_provider():
    """
    Re-probe the advice provider and re-enable it on success.

    Only available when ADMIN_ENDPOINTS_ENABLED is set.
    """
    if not current_app.config.get("ADMIN_ENDPOINTS_ENABLED", False):
        return jsonify({"success": False, "error": GENERIC_MESSAGES["not_found"]}), 404

    service = get_advice_service()
    ok = service.revalidate()
    return jsonify({"success": ok, **service.status()}), (200 if ok else 503)


@api_bp.route("/crop-recommendations", methods=["POST"])
def crop_recommendations():
    """
    Request body (JSON):
        {
            "soilData": {"ph": 6.5},
            "weatherData": {"temp_c": 24} | {"current": {"temp_c": 24}},
            "locationData": {"country": "India"}   (optional)
        }
    """
    data = request.get_json(silent=True) or {}
    soil = data.get("soilData")
    weather = data.get("weatherData")
    location = data.get("locationData")

    if not isinstance(soil, dict) or not isinstance(weather, dict):
        return jsonify({"success": False, "error": "Soil and weather data are required"}), 400

    return jsonify(recommend_crops(soil, weather, location if isinstance(location, dict) else None)), 200


@api_bp.route("/weather", methods=["GET"])
def weather():
    """Current weather and forecast for ?location=..., defaulting to DEFAULT_LOCATION."""
    location = validate_location(request.args.get("location", type=str)) or current_app.config.get(
        "DEFAULT_LOCATION", "Delhi, India"
    )

    provider = get_advice_service().enricher.weather_provider
    try:
        report = provider.fetch_current_and_forecast(location)
    except Exception as e:
        return jsonify({"success": False, "error": sanitize_error(e, "weather", "Weather lookup failed")}), 503

    if report is None:
        return jsonify({"success": False, "error": GENERIC_MESSAGES["weather"]}), 503
    return jsonify({"success": True, "weather": report.to_dict()}), 200
