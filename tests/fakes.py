"""Test doubles for the advice pipeline collaborators."""

from farmassist.models import ForecastDay, WeatherReport, WeatherSnapshot
from farmassist.services.provider import ProviderReply


class FakeProvider:
    """Scripted provider: each generate() pops the next outcome (text or exception)."""

    model = "gemini/gemini-1.5-pro"

    def __init__(self, outcomes=None, default="Use X fungicide", ping_error=None):
        self.outcomes = list(outcomes or [])
        self.default = default
        self.ping_error = ping_error
        self.calls = []
        self.pings = 0

    def generate(self, prompt, config):
        self.calls.append(prompt)
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, BaseException):
            raise outcome
        return ProviderReply(text=outcome, model=self.model)

    def ping(self):
        self.pings += 1
        if self.ping_error is not None:
            raise self.ping_error

    def list_models(self):
        return ["gemini-1.5-pro", "gemini-1.5-flash"]


class FakeWeather:
    def __init__(self, report=None, error=None):
        self.report = report
        self.error = error
        self.calls = []

    def fetch_current_and_forecast(self, location):
        self.calls.append(location)
        if self.error is not None:
            raise self.error
        return self.report


class FakeSleep:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


def sample_report(location="Pune"):
    return WeatherReport(
        location=location,
        country="IN",
        current=WeatherSnapshot(condition="light rain", temp_c=27.5, humidity=82, wind_kph=11.2, precip_mm=1.4),
        forecast=(
            ForecastDay(date="2026-10-18", max_temp_c=30.1, min_temp_c=22.4, condition="light rain", chance_of_rain=70),
        ),
    )


