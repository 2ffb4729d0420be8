"""
Configuration for the HomeCost application.

Values are read from the environment (and a local .env file, if present)
once at import time. Anything that talks to the outside world, such as the
remote cost estimator, receives these values explicitly from a Settings
instance instead of reading the environment itself.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    # --------------------------------------------------
    # Database
    # --------------------------------------------------
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./homecost.db")

    # --------------------------------------------------
    # Logging
    # --------------------------------------------------
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --------------------------------------------------
    # Location cost estimation
    # --------------------------------------------------
    # "heuristic" (no external calls) or "remote" (OpenAI-compatible service)
    ESTIMATION_STRATEGY = os.getenv("ESTIMATION_STRATEGY", "heuristic").strip().lower()
    # When false, a failed remote call raises instead of using heuristic values
    ESTIMATION_FALLBACK = _env_bool("ESTIMATION_FALLBACK", True)
    ESTIMATION_TIMEOUT_SECONDS = _env_float("ESTIMATION_TIMEOUT_SECONDS", 20.0)
    ESTIMATION_MODEL = os.getenv("ESTIMATION_MODEL", "gpt-4o-mini")

    # Env vars pasted into dashboards sometimes carry a trailing newline
    OPENAI_API_KEY = (os.getenv("OPENAI_API_KEY") or "").strip()
    OPENAI_BASE_URL = (os.getenv("OPENAI_BASE_URL") or "").strip() or None


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
