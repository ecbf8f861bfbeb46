"""Environment-driven settings for the quiz."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger("config")

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MIN_DURATION_MS = 3000
DEFAULT_GENERATION_TIMEOUT_MS = 30_000


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={value!r}, using {default}")
        return default


@dataclass
class Settings:
    model: str = DEFAULT_MODEL
    chart_min_duration_ms: int = DEFAULT_MIN_DURATION_MS
    accuracy_min_duration_ms: int = DEFAULT_MIN_DURATION_MS
    palm_min_duration_ms: int = DEFAULT_MIN_DURATION_MS
    generation_timeout_ms: int | None = DEFAULT_GENERATION_TIMEOUT_MS
    reset_clears_profile: bool = False
    use_fallback_readings: bool = True
    geocode_api_key: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment, loading .env.local first."""
        load_dotenv(".env.local")

        # 0 disables the timeout
        timeout = _env_int("GENERATION_TIMEOUT_MS", DEFAULT_GENERATION_TIMEOUT_MS)

        return cls(
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            chart_min_duration_ms=_env_int(
                "CHART_MIN_DURATION_MS", DEFAULT_MIN_DURATION_MS
            ),
            accuracy_min_duration_ms=_env_int(
                "ACCURACY_MIN_DURATION_MS", DEFAULT_MIN_DURATION_MS
            ),
            palm_min_duration_ms=_env_int(
                "PALM_MIN_DURATION_MS", DEFAULT_MIN_DURATION_MS
            ),
            generation_timeout_ms=timeout or None,
            reset_clears_profile=_env_bool("RESET_CLEARS_PROFILE", False),
            use_fallback_readings=_env_bool("USE_FALLBACK_READINGS", True),
            geocode_api_key=os.getenv("GOOGLE_GEOCODE_API_KEY") or None,
        )
