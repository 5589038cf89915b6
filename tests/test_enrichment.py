import requests

from farmassist.models import AdviceContext, AdviceRequest, Topic, WeatherSnapshot
from farmassist.services.enrichment import ContextEnricher, extract_location, resolve_location

from fakes import FakeWeather, sample_report


def test_extract_location_from_trailing_phrase():
    assert extract_location("What is the weather forecast for Pune?") == "pune"
    assert extract_location("will it rain in navi mumbai") == "navi mumbai"
    assert extract_location("Will it rain tomorrow?") is None


def test_location_precedence():
    explicit = AdviceRequest("Weather in Nashik?", AdviceContext(location="Pune"))
    assert resolve_location(explicit, "Delhi, India") == "Pune"
    assert resolve_location(AdviceRequest("Weather in Nashik?"), "Delhi, India") == "nashik"
    assert resolve_location(AdviceRequest("Weather this week?"), "Delhi, India") == "Delhi, India"


def test_weather_query_triggers_exactly_one_fetch():
    weather = FakeWeather(report=sample_report("Pune"))
    enricher = ContextEnricher(weather, default_location="Delhi, India")

    enriched = enricher.enrich(AdviceRequest("Weather forecast for pune?"), [Topic.WEATHER])

    assert weather.calls == ["pune"]
    assert enriched.context.weather.condition == "light rain"
    assert enriched.context.location == "Pune"
    assert enriched.context.country == "IN"
    assert len(enriched.context.forecast) == 1


def test_non_weather_topics_skip_fetch():
    weather = FakeWeather(report=sample_report())
    request = AdviceRequest("Best fertilizer for maize")
    assert ContextEnricher(weather).enrich(request, [Topic.FERTILIZER]) is request
    assert weather.calls == []


def test_supplied_weather_is_kept():
    weather = FakeWeather(report=sample_report())
    supplied = WeatherSnapshot(condition="sunny", temp_c=35)
    request = AdviceRequest("Will the weather hold?", AdviceContext(weather=supplied))
    assert ContextEnricher(weather).enrich(request, [Topic.WEATHER]) is request
    assert weather.calls == []


def test_fetch_failure_is_swallowed():
    weather = FakeWeather(error=requests.Timeout("slow"))
    request = AdviceRequest("Weather this week?")
    assert ContextEnricher(weather).enrich(request, [Topic.WEATHER]) is request
    assert len(weather.calls) == 1


def test_missing_report_leaves_request_unchanged():
    request = AdviceRequest("Weather this week?")
    assert ContextEnricher(FakeWeather(report=None)).enrich(request, [Topic.WEATHER]) is request


def test_explicit_location_is_not_overwritten():
    weather = FakeWeather(report=sample_report("Pune"))
    request = AdviceRequest("Weather this week?", AdviceContext(location="Baramati"))
    enriched = ContextEnricher(weather).enrich(request, [Topic.WEATHER])
    assert weather.calls == ["Baramati"]
    assert enriched.context.location == "Baramati"


def test_extract_location_uses_last_preposition():
    assert extract_location("What is the weather forecast for next week in Pune?") == "pune"
    assert extract_location("Will it rain at night for my farm in Nashik?") == "nashik"
    assert extract_location("Any rain expected\nfor the coming days at Satara") == "satara"


def test_mid_sentence_phrase_resolves_to_trailing_place():
    assert resolve_location(AdviceRequest("Weather for tomorrow in Pune?"), "Delhi, India") == "pune"
