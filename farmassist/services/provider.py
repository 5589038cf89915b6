"""
Generative advice provider (Gemini through LiteLLM).

The provider makes exactly one call per generate() and reports every failure
as a classified ProviderError. Retries and availability bookkeeping live in
the remote client; this module only decides what kind of failure happened.

Classification contract:
  - auth:      HTTP 401/403 or LiteLLM AuthenticationError/PermissionDeniedError
  - quota:     HTTP 429 or LiteLLM RateLimitError
  - transient: everything else (timeouts, 5xx, connection errors, empty output)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import requests

from ..models import GenerationConfig
from ..utils.sanitize import one_line, redact

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini/gemini-1.5-pro"
GEMINI_MODELS_URL = "https://generativelanguage.googleapis.com/v1beta/models"

_AUTH_STATUS = frozenset({401, 403})
_QUOTA_STATUS = frozenset({429})


class ProviderError(Exception):
    """A classified provider failure. kind is 'auth', 'quota' or 'transient'."""

    kind = "transient"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def definitive(self) -> bool:
        return self.kind in ("auth", "quota")

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class ProviderAuthError(ProviderError):
    kind = "auth"


class ProviderQuotaError(ProviderError):
    kind = "quota"


class ProviderTransientError(ProviderError):
    kind = "transient"


@dataclass(frozen=True)
class AdvicePrompt:
    system: str
    user: str


@dataclass(frozen=True)
class ProviderReply:
    text: str
    model: str


def _error_for_status(message: str, status: Optional[int]) -> Optional[ProviderError]:
    if status in _AUTH_STATUS:
        return ProviderAuthError(message, status)
    if status in _QUOTA_STATUS:
        return ProviderQuotaError(message, status)
    return None


def classify_provider_error(exc: BaseException, secrets: Iterable[Optional[str]] = ()) -> ProviderError:
    """Map any exception raised by a provider call onto the error taxonomy."""
    if isinstance(exc, ProviderError):
        return exc

    import litellm

    status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        status = None
    message = one_line(redact(str(exc), secrets), 200) or type(exc).__name__

    err = _error_for_status(message, status)
    if err is not None:
        return err
    if isinstance(exc, (litellm.AuthenticationError, litellm.PermissionDeniedError)):
        return ProviderAuthError(message, status)
    if isinstance(exc, litellm.RateLimitError):
        return ProviderQuotaError(message, status)
    return ProviderTransientError(message, status)


class LiteLLMAdviceProvider:
    """
    Holds the provider credentials and model id. Construct one per app and
    pass it down; nothing here is initialised at import time.
    """

    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL, timeout: float = 30):
        self.api_key = api_key or None
        self.model = model
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _completion(self, messages: List[dict], **params):
        if not self.api_key:
            raise ProviderAuthError("Provider API key is not configured")

        import litellm

        try:
            return litellm.completion(
                model=self.model,
                messages=messages,
                api_key=self.api_key,
                timeout=self.timeout,
                num_retries=0,
                **params,
            )
        except Exception as e:
            raise classify_provider_error(e, secrets=(self.api_key,)) from None

    def generate(self, prompt: AdvicePrompt, config: GenerationConfig) -> ProviderReply:
        resp = self._completion(
            [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            temperature=config.temperature,
            top_p=config.top_p,
            max_tokens=config.max_output_tokens,
        )
        try:
            text = (resp.choices[0].message.content or "").strip()
        except (AttributeError, IndexError):
            text = ""
        if not text:
            raise ProviderTransientError("Empty response from advice provider")

        return ProviderReply(text=text, model=getattr(resp, "model", None) or self.model)

    def ping(self) -> None:
        """Lightweight connectivity check; raises a classified ProviderError on failure."""
        self._completion([{"role": "user", "content": "Test"}], max_tokens=1)

    def list_models(self) -> List[str]:
        """Gemini model names that support content generation."""
        if not self.api_key:
            raise ProviderAuthError("Provider API key is not configured")
        try:
            r = requests.get(GEMINI_MODELS_URL, params={"key": self.api_key}, timeout=10)
            r.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            message = f"Model listing failed (HTTP {status})"
            raise (_error_for_status(message, status) or ProviderTransientError(message, status)) from None
        except requests.RequestException as e:
            raise ProviderTransientError(
                one_line(redact(str(e), (self.api_key,)), 200) or "Model listing failed"
            ) from None

        names = []
        for m in r.json().get("models") or []:
            if "generateContent" in (m.get("supportedGenerationMethods") or []):
                names.append((m.get("name") or "").replace("models/", "", 1))
        return [n for n in names if n]
