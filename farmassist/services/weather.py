"""
Weather service helpers (OpenWeather).

OpenWeatherProvider.fetch_current_and_forecast(location) returns current
conditions plus a short daily forecast built from the 3-hourly API.

Notes:
- Uses metric units from the API; wind is converted to km/h.
- Best-effort: returns None on failure so callers can carry on without
  weather data. A failed forecast still returns current conditions.
- Results are cached per location for OPENWEATHER_CACHE_TTL seconds;
  failures are never cached.
"""

from __future__ import annotations
import logging
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import requests

from ..models import ForecastDay, WeatherReport, WeatherSnapshot
from ..utils.cache import LockedTTLCache

logger = logging.getLogger(__name__)

# ============================================================================
# OPENWEATHER API RATE LIMITS & CACHING
# ============================================================================
# Free tier limit: 60 requests per minute (rpm)
# Caching strategy: 10-minute TTL per location keeps us well under the limit

OPENWEATHER_CACHE_TTL = 600
OPENWEATHER_CACHE_MAX_LOCATIONS = 64
OPENWEATHER_CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
OPENWEATHER_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
FORECAST_DAYS = 5


def _num(value) -> Optional[float]:
    return float(value) if isinstance(value, (int, float)) else None


def parse_current(data: Dict, fallback_name: str) -> Optional[Tuple[WeatherSnapshot, str, str]]:
    """Turn a /weather payload into (snapshot, location name, country)."""
    main = data.get("main") or {}
    temp_c = _num(main.get("temp"))
    if temp_c is None:
        return None

    wdesc = (data.get("weather") or [{}])[0].get("description", "") or "unknown"
    wind_mps = _num((data.get("wind") or {}).get("speed"))
    rain = data.get("rain") or {}

    snapshot = WeatherSnapshot(
        condition=wdesc,
        temp_c=temp_c,
        humidity=_num(main.get("humidity")),
        wind_kph=round(wind_mps * 3.6, 1) if wind_mps is not None else None,
        precip_mm=_num(rain.get("1h")) or 0.0,
    )
    country = (data.get("sys") or {}).get("country", "") or ""
    return snapshot, data.get("name") or fallback_name, country


def parse_forecast(data: Dict, days: int = FORECAST_DAYS) -> Tuple[ForecastDay, ...]:
    """
    Group 3-hourly forecast items by (UTC) date.

    Each day gets the min/max temperature, the most common description and
    the average probability of precipitation as a whole percentage.
    """
    by_date: Dict[str, List[Dict]] = defaultdict(list)
    for it in data.get("list") or []:
        try:
            date_str = datetime.fromtimestamp(it["dt"], tz=timezone.utc).strftime("%Y-%m-%d")
        except (KeyError, TypeError, ValueError, OverflowError):
            continue
        by_date[date_str].append(it)

    daily = []
    for date_str, bucket in sorted(by_date.items()):
        highs = [_num((x.get("main") or {}).get("temp_max")) for x in bucket]
        lows = [_num((x.get("main") or {}).get("temp_min")) for x in bucket]
        highs = [t for t in highs if t is not None]
        lows = [t for t in lows if t is not None]
        if not highs or not lows:
            continue

        descs = Counter(
            (x.get("weather") or [{}])[0].get("description", "") for x in bucket
        )
        descs.pop("", None)
        top_desc = descs.most_common(1)[0][0] if descs else "clear sky"

        pops = [_num(x.get("pop")) for x in bucket]
        pops = [p for p in pops if p is not None]
        chance = round(sum(pops) / len(pops) * 100) if pops else 0

        daily.append(ForecastDay(
            date=date_str,
            max_temp_c=round(max(highs), 1),
            min_temp_c=round(min(lows), 1),
            condition=top_desc,
            chance_of_rain=chance,
        ))

    return tuple(daily[:days])


class OpenWeatherProvider:
    """Weather collaborator consumed by the advice enricher and /api/v1/weather."""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 5.0,
        cache_ttl: float = OPENWEATHER_CACHE_TTL,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or None
        self.timeout = timeout
        self._session = session or requests.Session()
        self._cache = LockedTTLCache(ttl=cache_ttl, maxsize=OPENWEATHER_CACHE_MAX_LOCATIONS)

    def clear_cache(self) -> None:
        """Clear cached reports. Useful for testing."""
        self._cache.clear()

    def _get(self, url: str, location: str) -> Dict:
        r = self._session.get(
            url,
            params={"q": location, "appid": self.api_key, "units": "metric"},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json()

    def fetch_current_and_forecast(self, location: Optional[str]) -> Optional[WeatherReport]:
        location = (location or "").strip()
        if not location or not self.api_key:
            return None

        cache_key = location.lower()
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            parsed = parse_current(self._get(OPENWEATHER_CURRENT_URL, location), location)
        except (requests.RequestException, ValueError) as e:
            logger.info("Weather lookup failed for %s: %s", location, type(e).__name__)
            return None
        if parsed is None:
            return None
        snapshot, name, country = parsed

        try:
            forecast = parse_forecast(self._get(OPENWEATHER_FORECAST_URL, location))
        except (requests.RequestException, ValueError) as e:
            logger.info("Forecast lookup failed for %s: %s", location, type(e).__name__)
            forecast = ()

        report = WeatherReport(location=name, country=country, current=snapshot, forecast=forecast)
        self._cache.set(cache_key, report)
        return report
