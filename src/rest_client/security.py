"""Base URL checks and header redaction."""

from __future__ import annotations

from typing import Mapping
from urllib.parse import urlparse


SENSITIVE_HEADERS = {
    "authentication",
    "authorization",
    "cookie",
    "proxy-authorization",
    "x-api-key",
}


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return headers with credential values redacted for logging."""
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def validate_base_url(url: str) -> None:
    """Reject base URLs that cannot anchor relative request paths."""
    if "\x00" in url:
        raise ValueError("Invalid base_url")
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("base_url must include scheme and host")
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported base_url scheme: {parsed.scheme}")
