"""
tuteliq/config.py
==================
Client Configuration — Tuteliq Python SDK

Responsibility:
    - Hold the connection settings shared by the HTTP and streaming paths
    - Validate the API key shape before any network call
    - Load settings from the environment (and a local .env file)

Environment variables (all optional except the key):
    TUTELIQ_API_KEY, TUTELIQ_BASE_URL, TUTELIQ_TIMEOUT,
    TUTELIQ_MAX_RETRIES, TUTELIQ_RETRY_DELAY, TUTELIQ_STREAM_URL
"""

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL = "https://api.tuteliq.ai"
DEFAULT_STREAM_URL = "wss://api.tuteliq.ai/voice/stream"
DEFAULT_TIMEOUT: float = 30.0        # seconds per HTTP attempt
DEFAULT_MAX_RETRIES: int = 3         # total attempts, not extra retries
DEFAULT_RETRY_DELAY: float = 1.0     # seconds, first back-off delay
DEFAULT_CONNECT_TIMEOUT: float = 30.0

MIN_API_KEY_LENGTH = 10


@dataclass(frozen=True)
class TuteliqConfig:
    """Immutable client settings."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    stream_url: str = DEFAULT_STREAM_URL
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def __post_init__(self) -> None:
        validate_api_key(self.api_key)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def __repr__(self) -> str:
        # Never echo the key itself.
        return (
            f"TuteliqConfig(base_url={self.base_url!r}, timeout={self.timeout}, "
            f"max_retries={self.max_retries}, retry_delay={self.retry_delay}, "
            f"stream_url={self.stream_url!r})"
        )

    def with_overrides(self, **overrides) -> "TuteliqConfig":
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, **overrides) -> "TuteliqConfig":
        """
        Build a config from TUTELIQ_* environment variables.

        A ``.env`` file in the working directory is loaded first. Keyword
        overrides win over the environment.

        Raises:
            ValueError: If no API key is available or a numeric variable
                        cannot be parsed.
        """
        load_dotenv()

        settings: dict = {
            "api_key": os.environ.get("TUTELIQ_API_KEY", ""),
            "base_url": os.environ.get("TUTELIQ_BASE_URL", DEFAULT_BASE_URL),
            "stream_url": os.environ.get("TUTELIQ_STREAM_URL", DEFAULT_STREAM_URL),
        }

        timeout = os.environ.get("TUTELIQ_TIMEOUT")
        if timeout:
            settings["timeout"] = float(timeout)
        max_retries = os.environ.get("TUTELIQ_MAX_RETRIES")
        if max_retries:
            settings["max_retries"] = int(max_retries)
        retry_delay = os.environ.get("TUTELIQ_RETRY_DELAY")
        if retry_delay:
            settings["retry_delay"] = float(retry_delay)

        settings.update(overrides)
        if not settings["api_key"]:
            raise ValueError("TUTELIQ_API_KEY environment variable is not set.")
        return cls(**settings)


def validate_api_key(api_key: str) -> None:
    """
    Reject obviously unusable API keys.

    Raises:
        ValueError: If the key is empty or too short to be real.
    """
    if not api_key:
        raise ValueError("API key is required")
    if len(api_key) < MIN_API_KEY_LENGTH:
        raise ValueError("API key appears to be invalid")
