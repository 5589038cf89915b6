"""
Advice engine (AI-first with safe fallback).

Detects the question's language and topics, fills in weather when the farmer
asks about it, then asks the generative provider when it is available;
otherwise (or when the provider fails) falls back to the local rule set.
Provider failures never break the request flow: the caller always gets advice
text, and `source`/`error` say where it came from.
"""

from __future__ import annotations
import logging
from typing import Any, Iterable, List, Mapping, Optional

from flask import current_app

from ..models import (
    AdviceContext,
    AdviceRequest,
    AdviceResult,
    AdviceSource,
    GenerationConfig,
    Language,
    Topic,
)
from .availability import ProviderAvailability
from .detection import detect
from .enrichment import DEFAULT_LOCATION, ContextEnricher
from .local_advisor import LocalAdvisor
from .provider import DEFAULT_MODEL, AdvicePrompt, LiteLLMAdviceProvider, ProviderError
from .remote import RemoteAdviceClient
from .weather import OpenWeatherProvider

logger = logging.getLogger(__name__)

EXTENSION_KEY = "advice_service"

_TOPIC_LABELS = {
    Topic.PESTS: "pests and diseases",
    Topic.WATER: "water management",
    Topic.FERTILIZER: "fertilizers",
    Topic.WEATHER: "weather forecast",
    Topic.MARKET: "market prices",
}


class AdviceValidationError(ValueError):
    """Raised for an empty question; the only error callers ever see."""


def _summarize(text: str, limit: int = 120) -> str:
    text = " ".join((text or "").split())
    return text if len(text) <= limit else f"{text[:limit]}..."


def build_prompt(request: AdviceRequest, topics: Iterable[Topic], language: Language) -> AdvicePrompt:
    """
    Build the provider prompt from context, topics and language.

    The system part sets persona and answer language; the user part carries
    context lines and the literal question.
    """
    hindi = language == Language.HINDI
    system = (
        "You are KrishiSahaay, an agricultural expert helping farmers. "
        "Be specific, structured, and educational. Give practical steps a farmer can act on. "
        "If you are uncertain, say so honestly. "
        + ("Respond in HINDI using correct agricultural terms." if hindi else "Respond in clear English.")
    )

    ctx = request.context
    lines: List[str] = []

    labels = [_TOPIC_LABELS[t] for t in topics]
    if labels:
        lines.append(f"Topics: {', '.join(labels)}")

    w = ctx.weather
    if w is not None:
        parts = [w.condition, f"{w.temp_c:.0f}°C"]
        if w.humidity is not None:
            parts.append(f"humidity {w.humidity:.0f}%")
        if w.wind_kph is not None:
            parts.append(f"wind {w.wind_kph} km/h")
        if w.precip_mm:
            parts.append(f"rain {w.precip_mm} mm")
        lines.append(f"Weather: {', '.join(parts)}")

    if ctx.forecast:
        days = [
            f"{d.date}: {d.condition}, {d.min_temp_c:.0f}-{d.max_temp_c:.0f}°C, {d.chance_of_rain}% rain"
            for d in ctx.forecast[:3]
        ]
        lines.append("Forecast: " + "; ".join(days))

    if ctx.location:
        loc = ctx.location if not ctx.country else f"{ctx.location}, {ctx.country}"
        lines.append(f"Location: {loc}")

    if ctx.crop:
        lines.append(f"Crop: {ctx.crop}")

    user = ""
    if lines:
        user = "\n".join(lines) + "\n\n"
    user += f"Farmer's question: {request.query.strip()}\n\n"
    user += "उत्तर हिंदी में दें:" if hindi else "Answer in English:"

    return AdvicePrompt(system=system, user=user)


class AdviceService:
    """
    Orchestrates a single advice call: detect -> enrich -> gate -> remote or local.

    Every collaborator is injected so tests can pass fakes and a fresh
    availability gate.
    """

    def __init__(
        self,
        remote: RemoteAdviceClient,
        local: LocalAdvisor,
        enricher: ContextEnricher,
        availability: ProviderAvailability,
    ):
        self.remote = remote
        self.local = local
        self.enricher = enricher
        self.availability = availability

    @property
    def model_name(self) -> str:
        return getattr(self.remote.provider, "model", DEFAULT_MODEL)

    def _local_result(
        self,
        query: str,
        language: Language,
        topics: List[Topic],
        error: Optional[str] = None,
    ) -> AdviceResult:
        local = self.local.respond(query, language)
        return AdviceResult(
            advice=local.text,
            source=AdviceSource.LOCAL,
            model=self.local.model_name,
            language=language,
            topics=topics,
            error=error,
        )

    def get_advice(self, query: str, context: Optional[AdviceContext] = None) -> AdviceResult:
        if not query or not query.strip():
            raise AdviceValidationError("Query is required")

        request = AdviceRequest(query=query, context=context or AdviceContext())
        topics, language = detect(query)
        logger.info(
            "Advice query received: %r (topics=%s, language=%s)",
            _summarize(query), [t.value for t in topics], language.value,
        )

        request = self.enricher.enrich(request, topics)

        if not self.availability.is_available():
            logger.info("Advice provider unavailable, using local fallback")
            return self._local_result(query, language, topics)

        prompt = build_prompt(request, topics, language)
        try:
            reply = self.remote.generate(prompt)
        except ProviderError as e:
            logger.warning("Advice provider failed, falling back to local advice: %s", e)
            return self._local_result(query, language, topics, error=str(e))

        return AdviceResult(
            advice=reply.text,
            source=AdviceSource.REMOTE,
            model=reply.model,
            language=language,
            topics=topics,
        )

    def revalidate(self) -> bool:
        return self.remote.revalidate()

    def status(self) -> dict:
        snap = self.availability.snapshot()
        snap["model"] = self.model_name
        return snap


def _cfg(config: Mapping[str, Any], key: str, default: Any) -> Any:
    value = config.get(key)
    return default if value in (None, "") else value


def build_advice_service(config: Mapping[str, Any], sleep=None, rng=None) -> AdviceService:
    """
    Assemble the advice pipeline from a config mapping (e.g. app.config).

    One gate and one provider client are created here and shared by
    reference for the lifetime of the returned service.
    """
    api_key = _cfg(config, "GEMINI_API_KEY", None)
    provider = LiteLLMAdviceProvider(
        api_key=api_key,
        model=_cfg(config, "ADVICE_MODEL", DEFAULT_MODEL),
        timeout=float(_cfg(config, "ADVICE_REQUEST_TIMEOUT", 30)),
    )
    availability = ProviderAvailability.from_credentials(api_key)

    generation = GenerationConfig(
        temperature=float(_cfg(config, "ADVICE_TEMPERATURE", 0.2)),
        top_p=float(_cfg(config, "ADVICE_TOP_P", 0.95)),
        max_output_tokens=int(_cfg(config, "ADVICE_MAX_OUTPUT_TOKENS", 1000)),
    )
    remote_kwargs = {}
    if sleep is not None:
        remote_kwargs["sleep"] = sleep
    remote = RemoteAdviceClient(
        provider,
        availability,
        config=generation,
        max_retries=int(_cfg(config, "ADVICE_MAX_RETRIES", 2)),
        backoff_base=float(_cfg(config, "ADVICE_BACKOFF_BASE_SECONDS", 1.0)),
        **remote_kwargs,
    )

    weather = OpenWeatherProvider(
        api_key=_cfg(config, "OPENWEATHER_API_KEY", None),
        timeout=float(_cfg(config, "WEATHER_TIMEOUT_SECONDS", 5)),
        cache_ttl=float(_cfg(config, "WEATHER_CACHE_TTL", 600)),
    )
    enricher = ContextEnricher(weather, default_location=_cfg(config, "DEFAULT_LOCATION", DEFAULT_LOCATION))

    return AdviceService(remote, LocalAdvisor(rng), enricher, availability)


def get_advice_service() -> AdviceService:
    """The application's advice service (requires an app context)."""
    return current_app.extensions[EXTENSION_KEY]
