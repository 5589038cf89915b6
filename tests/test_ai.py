import pytest
import requests

from farmassist.models import AdviceContext, AdviceSource, Language, Topic, WeatherSnapshot
from farmassist.services.ai import AdviceValidationError, build_advice_service, build_prompt
from farmassist.models import AdviceRequest
from farmassist.services.availability import ProviderAvailability
from farmassist.services.local_advisor import RESPONSES
from farmassist.services.provider import ProviderQuotaError, ProviderTransientError

from fakes import FakeProvider, FakeWeather, sample_report

RICE_BLAST = "What pesticide should I use for rice blast?"


def test_remote_advice_end_to_end(service, provider):
    result = service.get_advice(RICE_BLAST)
    assert result.advice == "Use X fungicide"
    assert result.source == AdviceSource.REMOTE
    assert result.topics == [Topic.PESTS]
    assert result.language == Language.ENGLISH
    assert result.error is None
    assert len(provider.calls) == 1


def test_unavailable_gate_uses_local_pests_pool(make_service, provider):
    service = make_service(provider, ProviderAvailability(False, reason="quota"))
    result = service.get_advice(RICE_BLAST)
    assert result.source == AdviceSource.LOCAL
    assert result.model == "local-rules"
    assert result.advice in RESPONSES["pests"][Language.ENGLISH]
    assert provider.calls == []


@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_query_raises_without_network(make_service, query):
    provider = FakeProvider()
    weather = FakeWeather(report=sample_report())
    service = make_service(provider, ProviderAvailability(True), weather)
    with pytest.raises(AdviceValidationError):
        service.get_advice(query)
    assert provider.calls == []
    assert weather.calls == []


def test_quota_flips_gate_for_later_calls(service, provider, gate):
    provider.outcomes = [ProviderQuotaError("quota exceeded", 429)]

    first = service.get_advice(RICE_BLAST)
    assert first.source == AdviceSource.LOCAL
    assert "quota" in first.error
    assert not gate.is_available()

    second = service.get_advice("How much water does cotton need?")
    assert second.source == AdviceSource.LOCAL
    assert second.error is None
    assert len(provider.calls) == 1


def test_transient_failures_retry_then_fall_back(service, provider, gate, sleeper):
    provider.outcomes = [ProviderTransientError("timeout")] * 3
    result = service.get_advice(RICE_BLAST)
    assert result.source == AdviceSource.LOCAL
    assert result.advice
    assert "transient" in result.error
    assert len(provider.calls) == 3
    assert sleeper.delays == [1.0, 2.0]
    assert gate.is_available()


def test_weather_query_enriches_prompt(service, provider, weather):
    service.get_advice("What is the weather forecast for Pune?")
    assert weather.calls == ["pune"]
    prompt = provider.calls[0].user
    assert "Weather: light rain, 28°C" in prompt
    assert "Location: Pune, IN" in prompt
    assert "Forecast: 2026-10-18" in prompt


def test_failed_enrichment_leaves_no_error(make_service, provider, gate):
    weather = FakeWeather(error=requests.ConnectionError("down"))
    result = make_service(provider, gate, weather).get_advice("Will it rain this week?")
    assert len(weather.calls) == 1
    assert result.source == AdviceSource.REMOTE
    assert result.error is None


def test_hindi_question_gets_hindi_prompt(service, provider):
    result = service.get_advice("गेहूं में कौन सा खाद डालें?")
    assert result.language == Language.HINDI
    assert provider.calls[0].user.endswith("उत्तर हिंदी में दें:")
    assert "HINDI" in provider.calls[0].system


@pytest.mark.parametrize(
    "query",
    ["hello", "Best mandi price for onion", "pani kab dena hai", "कीट", "?", "x" * 500],
)
def test_advice_is_never_empty(make_service, query):
    for gate in (ProviderAvailability(True), ProviderAvailability(False)):
        provider = FakeProvider([ProviderTransientError("down")] * 3)
        result = make_service(provider, gate).get_advice(query)
        assert result.advice.strip()


def test_build_prompt_includes_context_lines():
    ctx = AdviceContext(
        weather=WeatherSnapshot(condition="sunny", temp_c=33.2, humidity=40),
        location="Nagpur",
        crop="cotton",
    )
    prompt = build_prompt(AdviceRequest("When to irrigate?", ctx), [Topic.WATER], Language.ENGLISH)
    assert "Topics: water management" in prompt.user
    assert "Weather: sunny, 33°C, humidity 40%" in prompt.user
    assert "Location: Nagpur" in prompt.user
    assert "Crop: cotton" in prompt.user
    assert "Farmer's question: When to irrigate?" in prompt.user
    assert prompt.user.endswith("Answer in English:")


def test_status_reports_model(service):
    status = service.status()
    assert status["available"] is True
    assert status["model"] == FakeProvider.model


def test_build_advice_service_without_key_starts_unavailable():
    service = build_advice_service({"GEMINI_API_KEY": "", "ADVICE_MAX_RETRIES": 4})
    assert service.status()["available"] is False
    assert service.remote.max_retries == 4
    result = service.get_advice(RICE_BLAST)
    assert result.source == AdviceSource.LOCAL
