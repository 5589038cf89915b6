import pytest

from farmassist.services.availability import ProviderAvailability
from farmassist.services.provider import (
    AdvicePrompt,
    ProviderAuthError,
    ProviderQuotaError,
    ProviderTransientError,
)
from farmassist.services.remote import RemoteAdviceClient

from fakes import FakeProvider

PROMPT = AdvicePrompt(system="sys", user="Farmer's question: hi")


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


def _client(provider, gate, sleeper, max_retries=2):
    return RemoteAdviceClient(provider, gate, max_retries=max_retries, backoff_base=1.0, sleep=sleeper)


def test_success_on_first_attempt(gate, sleeper):
    provider = FakeProvider(["Irrigate at dawn"])
    reply = _client(provider, gate, sleeper).generate(PROMPT)
    assert reply.text == "Irrigate at dawn"
    assert reply.model == provider.model
    assert sleeper.delays == []


def test_transient_failures_retried_with_backoff(gate, sleeper):
    provider = FakeProvider([ProviderTransientError("timeout")] * 3)
    with pytest.raises(ProviderTransientError):
        _client(provider, gate, sleeper).generate(PROMPT)
    assert len(provider.calls) == 3
    assert sleeper.delays == [1.0, 2.0]
    assert gate.is_available()


def test_backoff_doubles_per_attempt(gate, sleeper):
    provider = FakeProvider([ProviderTransientError("503")] * 4)
    with pytest.raises(ProviderTransientError):
        _client(provider, gate, sleeper, max_retries=3).generate(PROMPT)
    assert sleeper.delays == [1.0, 2.0, 4.0]


def test_recovers_after_transient_failure(gate, sleeper):
    provider = FakeProvider([ProviderTransientError("timeout"), "Apply neem oil"])
    reply = _client(provider, gate, sleeper).generate(PROMPT)
    assert reply.text == "Apply neem oil"
    assert sleeper.delays == [1.0]


@pytest.mark.parametrize("error", [ProviderQuotaError("quota exceeded", 429), ProviderAuthError("bad key", 401)])
def test_definitive_failure_stops_and_disables(gate, sleeper, error):
    provider = FakeProvider([error, "never reached"])
    with pytest.raises(type(error)):
        _client(provider, gate, sleeper).generate(PROMPT)
    assert len(provider.calls) == 1
    assert sleeper.delays == []
    assert not gate.is_available()


def test_unclassified_exception_with_429_is_quota(gate, sleeper):
    provider = FakeProvider([StatusError("Resource has been exhausted", 429)])
    with pytest.raises(ProviderQuotaError):
        _client(provider, gate, sleeper).generate(PROMPT)
    assert not gate.is_available()


def test_unclassified_exception_is_transient(gate, sleeper):
    provider = FakeProvider([RuntimeError("connection reset")] * 3)
    with pytest.raises(ProviderTransientError):
        _client(provider, gate, sleeper).generate(PROMPT)
    assert len(provider.calls) == 3
    assert gate.is_available()


def test_revalidate_restores_gate(sleeper):
    gate = ProviderAvailability(False, reason="quota")
    provider = FakeProvider()
    assert _client(provider, gate, sleeper).revalidate() is True
    assert provider.pings == 1
    assert gate.is_available()


def test_failed_revalidation_disables_gate(gate, sleeper):
    provider = FakeProvider(ping_error=ProviderAuthError("API key not valid", 400))
    assert _client(provider, gate, sleeper).revalidate() is False
    assert not gate.is_available()
    assert "auth" in gate.snapshot()["reason"]
