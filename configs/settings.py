from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Central configuration for the health dialogue bot.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # OpenAI / model configuration
        self._openai_api_key = os.getenv("OPENAI_API_KEY")
        self._openai_base_url = os.getenv("OPENAI_BASE_URL") or None
        self._openai_model = os.getenv("HEALTHBOT_OPENAI_MODEL", "gpt-4.1-mini")
        self._temperature = _env_float("HEALTHBOT_TEMPERATURE", 0.7)
        self._max_output_tokens = _env_int("HEALTHBOT_MAX_OUTPUT_TOKENS", 1024)

        # Runtime data paths
        self._runtime_data_dir = Path(
            os.getenv("HEALTHBOT_RUNTIME_DATA_DIR", "runtime/data")
        )
        self._persist = _env_bool("HEALTHBOT_PERSIST", True)

        # Dialogue behaviour
        self._session_ttl_hours = _env_float("HEALTHBOT_SESSION_TTL_HOURS", 24.0)
        self._context_window = _env_int("HEALTHBOT_CONTEXT_WINDOW", 5)
        self._default_language = os.getenv("HEALTHBOT_DEFAULT_LANGUAGE", "en")
        self._emergency_number = os.getenv("HEALTHBOT_EMERGENCY_NUMBER", "108")

        # Oracle retry policy
        self._max_retries = _env_int("HEALTHBOT_MAX_RETRIES", 3)
        self._retry_delay_seconds = _env_float("HEALTHBOT_RETRY_DELAY_SECONDS", 2.0)
        self._retry_backoff = os.getenv("HEALTHBOT_RETRY_BACKOFF", "fixed").lower()
        self._turn_timeout_seconds = _env_float("HEALTHBOT_TURN_TIMEOUT_SECONDS", 30.0)

        self._log_level = os.getenv("HEALTHBOT_LOG_LEVEL", "INFO").upper()

        if self._max_retries < 1:
            raise ValueError("HEALTHBOT_MAX_RETRIES must be at least 1")
        if self._context_window < 0:
            raise ValueError("HEALTHBOT_CONTEXT_WINDOW must not be negative")
        if self._retry_backoff not in ("fixed", "exponential"):
            raise ValueError(
                "HEALTHBOT_RETRY_BACKOFF must be 'fixed' or 'exponential', "
                f"got {self._retry_backoff!r}"
            )

    # ------------------------------------------------------------------
    # OpenAI / model settings
    # ------------------------------------------------------------------

    @property
    def openai_api_key(self) -> str:
        if not self._openai_api_key:
            raise RuntimeError(
                "OPENAI_API_KEY is not set. Please export it in your environment "
                "or define it in a .env file."
            )
        return self._openai_api_key

    @property
    def has_openai_api_key(self) -> bool:
        return bool(self._openai_api_key)

    @property
    def openai_base_url(self) -> Optional[str]:
        return self._openai_base_url

    @property
    def openai_model(self) -> str:
        return self._openai_model

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def max_output_tokens(self) -> int:
        return self._max_output_tokens

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def runtime_data_dir(self) -> Path:
        return self._runtime_data_dir

    @property
    def persist(self) -> bool:
        return self._persist

    # ------------------------------------------------------------------
    # Dialogue
    # ------------------------------------------------------------------

    @property
    def session_ttl_hours(self) -> float:
        return self._session_ttl_hours

    @property
    def context_window(self) -> int:
        return self._context_window

    @property
    def default_language(self) -> str:
        return self._default_language

    @property
    def emergency_number(self) -> str:
        return self._emergency_number

    # ------------------------------------------------------------------
    # Retry policy
    # ------------------------------------------------------------------

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def retry_delay_seconds(self) -> float:
        return self._retry_delay_seconds

    @property
    def retry_backoff(self) -> str:
        return self._retry_backoff

    @property
    def turn_timeout_seconds(self) -> float:
        return self._turn_timeout_seconds

    @property
    def log_level(self) -> str:
        return self._log_level


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the server and the CLI."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


settings = Settings()
