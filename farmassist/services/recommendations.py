"""
Rule-based crop recommendations from soil pH, temperature and country.

No external calls; suitable as a quick first suggestion before a farmer asks
the advice engine for details.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional


def _num(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _temperature(weather: Mapping[str, Any]) -> Optional[float]:
    # Accept {"temp_c": ..} or {"current": {"temp_c": ..}}
    current = weather.get("current")
    if isinstance(current, Mapping) and "temp_c" in current:
        return _num(current.get("temp_c"))
    return _num(weather.get("temp_c"))


def analyze_soil(ph: Optional[float]) -> Dict[str, str]:
    if ph is None:
        return {"quality": "Unknown", "recommendations": "Get a soil test to measure pH"}
    quality = "Good" if 5.5 < ph < 7.5 else "Needs amendment"
    if ph < 5.5:
        advice = "Add lime to increase pH"
    elif ph > 7.5:
        advice = "Add sulfur to decrease pH"
    else:
        advice = "Soil pH is in a good range"
    return {"quality": quality, "recommendations": advice}


def recommend_crops(
    soil: Mapping[str, Any],
    weather: Mapping[str, Any],
    location: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Suggest crops for the given conditions.

    Returns:
        {
            "recommendations": [{"crop", "confidence", "reasoning"}, ...],
            "soilAnalysis": {"quality", "recommendations"}
        }
    """
    ph = _num(soil.get("ph"))
    temp_c = _temperature(weather)
    country = ((location or {}).get("country") or "").strip().lower()

    recs: List[Dict[str, Any]] = []

    if ph is not None and temp_c is not None:
        if 6.0 <= ph <= 7.5:
            if 20 <= temp_c <= 30:
                recs.append({
                    "crop": "Rice",
                    "confidence": 0.85,
                    "reasoning": "Suitable pH and temperature range for rice cultivation",
                })
            if 18 <= temp_c <= 27:
                recs.append({
                    "crop": "Wheat",
                    "confidence": 0.8,
                    "reasoning": "Good temperature range and soil pH for wheat",
                })
        if 5.5 <= ph <= 7.0 and 15 <= temp_c <= 25:
            recs.append({
                "crop": "Potatoes",
                "confidence": 0.75,
                "reasoning": "Potatoes thrive in slightly acidic soil with moderate temperatures",
            })

    if country in ("india", "in"):
        recs.append({
            "crop": "Sugarcane",
            "confidence": 0.7,
            "reasoning": "Popular crop in India with good market value",
        })

    if not recs:
        recs = [
            {"crop": "Maize", "confidence": 0.6, "reasoning": "Adaptable to various conditions"},
            {"crop": "Soybean", "confidence": 0.55, "reasoning": "Nitrogen-fixing crop good for soil health"},
        ]

    return {"recommendations": recs, "soilAnalysis": analyze_soil(ph)}
