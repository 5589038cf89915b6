"""
Process-wide availability flag for the generative advice provider.

One instance is created per application and shared by reference with the
remote client (the only writer) and the advice orchestrator (reader). A
definitive failure (bad key, exhausted quota, failed probe) flips it to
unavailable for the rest of the process; only a successful explicit probe
turns it back on.
"""

from __future__ import annotations
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ProviderAvailability:
    def __init__(self, available: bool, reason: Optional[str] = None):
        self._lock = threading.Lock()
        self._available = bool(available)
        self._reason = reason
        self._checked_at = datetime.now(timezone.utc)

    @classmethod
    def from_credentials(cls, api_key: Optional[str]) -> "ProviderAvailability":
        """Optimistically available when a key is configured."""
        if api_key:
            return cls(True)
        return cls(False, reason="No provider API key configured")

    def is_available(self) -> bool:
        with self._lock:
            return self._available

    def mark_unavailable(self, reason: str) -> None:
        with self._lock:
            was_available = self._available
            self._available = False
            self._reason = reason
            self._checked_at = datetime.now(timezone.utc)
        if was_available:
            logger.warning("Advice provider disabled until revalidated: %s", reason)

    def record_probe(self, ok: bool, reason: Optional[str] = None) -> None:
        """Apply the outcome of an explicit connectivity probe."""
        if not ok:
            self.mark_unavailable(reason or "Provider probe failed")
            return
        with self._lock:
            self._available = True
            self._reason = None
            self._checked_at = datetime.now(timezone.utc)
        logger.info("Advice provider probe succeeded; provider enabled")

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "available": self._available,
                "checked_at": self._checked_at.isoformat(),
                "reason": self._reason,
            }
