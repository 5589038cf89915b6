"""
Best-effort weather enrichment for advice requests.

When a question is about the weather and the caller did not send weather
data, look it up for the farmer's location so the prompt can mention real
conditions. Never raises: any failure leaves the request as it was.
"""

from __future__ import annotations
import dataclasses
import logging
import re
from typing import Iterable, Optional

from ..models import AdviceRequest, Topic

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Delhi, India"

# Last in/at/for before the end: "forecast for next week in pune?" -> "pune"
_LOCATION_PHRASE = re.compile(r".*\b(?:in|at|for)\s+([a-z]+(?:\s+[a-z]+)*)\s*\??\s*$", re.DOTALL)


def extract_location(query: str) -> Optional[str]:
    """
    Phrase after a trailing in/at/for, if any.

    Examples:
        >>> extract_location("What is the weather forecast for pune?")
        'pune'
        >>> extract_location("Will it rain tomorrow?") is None
        True
    """
    m = _LOCATION_PHRASE.match((query or "").lower().strip())
    if not m:
        return None
    return m.group(1).strip() or None


def resolve_location(request: AdviceRequest, default_location: str = DEFAULT_LOCATION) -> str:
    """Explicit context location, else a phrase from the query, else the default."""
    return (
        (request.context.location or "").strip()
        or extract_location(request.query)
        or default_location
    )


class ContextEnricher:
    def __init__(self, weather_provider, default_location: str = DEFAULT_LOCATION):
        self.weather_provider = weather_provider
        self.default_location = default_location

    def needs_weather(self, request: AdviceRequest, topics: Iterable[Topic]) -> bool:
        return Topic.WEATHER in set(topics) and request.context.weather is None

    def enrich(self, request: AdviceRequest, topics: Iterable[Topic]) -> AdviceRequest:
        if self.weather_provider is None or not self.needs_weather(request, topics):
            return request

        location = resolve_location(request, self.default_location)
        try:
            report = self.weather_provider.fetch_current_and_forecast(location)
        except Exception as e:
            logger.info("Weather enrichment skipped for %s: %s", location, type(e).__name__)
            return request

        if report is None:
            logger.info("No weather available for %s; continuing without it", location)
            return request

        ctx = dataclasses.replace(
            request.context,
            weather=report.current,
            forecast=report.forecast,
            location=request.context.location or report.location,
            country=request.context.country or report.country or None,
        )
        return dataclasses.replace(request, context=ctx)
