"""
Data sanitization helpers for privacy-safe logging and responses.

Functions here strip or mask provider credentials so error text can be
written to logs or returned to clients without leaking them.
"""

from __future__ import annotations
from typing import Iterable, Optional


def mask_secret(secret: Optional[str], visible: int = 5) -> str:
    """Mask an API key for display (e.g., 'AIzaS***').

    Keeps only the first few characters so operators can tell which key is
    loaded without exposing it.
    """
    if not secret:
        return "***"
    if len(secret) <= visible:
        return "***"
    return f"{secret[:visible]}***"


def redact(text: str, secrets: Iterable[Optional[str]] = ()) -> str:
    """Replace every occurrence of each non-empty secret with '***'."""
    out = text or ""
    for s in secrets:
        if s:
            out = out.replace(s, "***")
    return out


def one_line(text: str, limit: int = 300) -> str:
    """First non-empty line of text, bounded to limit characters."""
    for line in (text or "").splitlines():
        line = line.strip()
        if line:
            return (line[:limit] + "…") if len(line) > limit else line
    return ""
