"""
Settings and configuration for the Netlify Blobs client.

Centralizes client tuning values (API endpoint, timeouts, retry policy) and
validates them with fail-fast behavior. Loaded from environment variables
at store construction time when no explicit Settings are supplied.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass

__all__ = ["Settings", "create_settings_from_env", "DEFAULT_API_URL", "USER_AGENT"]

DEFAULT_API_URL = "https://api.netlify.com"
USER_AGENT = "netlify-blobs-python/0.1.0"


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for Netlify Blobs stores.

    Attributes:
        api_url: Base URL of the management API used in API mode
        http_timeout_s: HTTP request timeout in seconds (default client only)
        retry_attempts: Total attempts for a storage request, including the first
        retry_delay_s: Base delay of the exponential backoff, and the lower bound
            of rate-limit waits
        retry_max_delay_s: Upper bound for any single wait between attempts
        user_agent: User-Agent sent by the default HTTP client
    """
    api_url: str = DEFAULT_API_URL
    http_timeout_s: float = 30.0
    retry_attempts: int = 5
    retry_delay_s: float = 1.0
    retry_max_delay_s: float = 20.0
    user_agent: str = USER_AGENT

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.api_url:
            raise ValueError("api_url is required")

        url_pattern = r"^https?://[a-zA-Z0-9.-]+(?::[0-9]+)?/?$"
        if not re.match(url_pattern, self.api_url):
            raise ValueError(f"Invalid api_url format: {self.api_url}")

        if self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

        if self.retry_attempts < 1:
            raise ValueError(f"retry_attempts must be at least 1, got {self.retry_attempts}")

        if self.retry_delay_s < 0:
            raise ValueError(f"retry_delay_s must be non-negative, got {self.retry_delay_s}")

        if self.retry_max_delay_s < self.retry_delay_s:
            raise ValueError(
                f"retry_max_delay_s ({self.retry_max_delay_s}) must not be lower than "
                f"retry_delay_s ({self.retry_delay_s})"
            )


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - NETLIFY_BLOBS_API_URL (default: https://api.netlify.com)
        - NETLIFY_BLOBS_HTTP_TIMEOUT (default: 30.0)
        - NETLIFY_BLOBS_RETRY_ATTEMPTS (default: 5)
        - NETLIFY_BLOBS_RETRY_DELAY (default: 1.0)
        - NETLIFY_BLOBS_RETRY_MAX_DELAY (default: 20.0)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If a value cannot be parsed or fails validation

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    return Settings(
        api_url=os.getenv("NETLIFY_BLOBS_API_URL") or DEFAULT_API_URL,
        http_timeout_s=get_float("NETLIFY_BLOBS_HTTP_TIMEOUT", 30.0),
        retry_attempts=get_int("NETLIFY_BLOBS_RETRY_ATTEMPTS", 5),
        retry_delay_s=get_float("NETLIFY_BLOBS_RETRY_DELAY", 1.0),
        retry_max_delay_s=get_float("NETLIFY_BLOBS_RETRY_MAX_DELAY", 20.0),
    )
