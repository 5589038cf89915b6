import os

# Keep LiteLLM from fetching its remote model cost map on import
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")
os.environ["APP_CONFIG"] = "farmassist.config.TestConfig"

import random

import pytest

from farmassist import create_app
from farmassist.services.ai import EXTENSION_KEY, AdviceService
from farmassist.services.availability import ProviderAvailability
from farmassist.services.enrichment import ContextEnricher
from farmassist.services.local_advisor import LocalAdvisor
from farmassist.services.remote import RemoteAdviceClient

from fakes import FakeProvider, FakeSleep, FakeWeather, sample_report


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def weather():
    return FakeWeather(report=sample_report())


@pytest.fixture
def gate():
    return ProviderAvailability(True)


@pytest.fixture
def sleeper():
    return FakeSleep()


@pytest.fixture
def make_service(sleeper):
    def _make(provider, gate, weather=None, max_retries=2, seed=7):
        remote = RemoteAdviceClient(provider, gate, max_retries=max_retries, backoff_base=1.0, sleep=sleeper)
        enricher = ContextEnricher(weather, default_location="Delhi, India")
        return AdviceService(remote, LocalAdvisor(random.Random(seed)), enricher, gate)
    return _make


@pytest.fixture
def service(make_service, provider, gate, weather):
    return make_service(provider, gate, weather)


@pytest.fixture
def app(service):
    app = create_app("farmassist.config.TestConfig")
    app.extensions[EXTENSION_KEY] = service
    return app


@pytest.fixture
def client(app):
    return app.test_client()
