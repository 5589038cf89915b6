"""
Remote advice client: bounded, sequential retries around the provider.

Transient failures are retried with exponential backoff (base, 2*base,
4*base, ...). Auth/quota failures disable the provider through the shared
availability gate and stop immediately. The sleep function is injectable so
tests never wait.
"""

from __future__ import annotations
import logging
import time
from typing import Callable, Optional

from ..models import GenerationConfig
from .availability import ProviderAvailability
from .provider import AdvicePrompt, ProviderError, ProviderReply, classify_provider_error

logger = logging.getLogger(__name__)


class RemoteAdviceClient:
    def __init__(
        self,
        provider,
        availability: ProviderAvailability,
        config: Optional[GenerationConfig] = None,
        max_retries: int = 2,
        backoff_base: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.provider = provider
        self.availability = availability
        self.config = config or GenerationConfig()
        self.max_retries = max(0, int(max_retries))
        self.backoff_base = backoff_base
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the retry that follows the given 0-based attempt."""
        return self.backoff_base * (2 ** attempt)

    def generate(self, prompt: AdvicePrompt) -> ProviderReply:
        """
        Return the provider reply or raise the last classified ProviderError.

        At most max_retries + 1 attempts are made.
        """
        attempts = self.max_retries + 1
        for attempt in range(attempts):
            try:
                return self.provider.generate(prompt, self.config)
            except Exception as e:
                err = classify_provider_error(e)

            logger.info("Advice generation attempt %d/%d failed (%s)", attempt + 1, attempts, err)

            if err.definitive:
                self.availability.mark_unavailable(str(err))
                raise err

            if attempt + 1 >= attempts:
                raise err

            self._sleep(self.backoff_delay(attempt))

        raise ProviderError("Advice retries exhausted")

    def revalidate(self) -> bool:
        """Probe the provider and record the outcome on the availability gate."""
        try:
            self.provider.ping()
        except Exception as e:
            err = classify_provider_error(e)
            self.availability.record_probe(False, str(err))
            return False
        self.availability.record_probe(True)
        return True
