import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv, find_dotenv

# Load environment from a shared .env (prefer project root), without overriding existing env
_ENV_PATH = find_dotenv(usecwd=True)
if _ENV_PATH:
    load_dotenv(_ENV_PATH, override=False)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_API_URL = "http://localhost:8000/generate-words"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        logger.warning("[Config] %s is not an integer; using %s", name, default)
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        logger.warning("[Config] %s is not a number; using %s", name, default)
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout_s: float
    default_count: int
    max_count: int
    strict_count: bool
    app_env: str

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


def get_settings() -> Settings:
    """Read settings from the environment.

    Called per request so a credential added after startup is picked up and a
    missing one surfaces as an error on the request that needs it.
    """
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip() or None
    return Settings(
        api_key=api_key,
        base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
        temperature=_env_float("LLM_TEMPERATURE", 0.7),
        max_tokens=_env_int("LLM_MAX_TOKENS", 800),
        timeout_s=_env_float("LLM_TIMEOUT_S", 60.0),
        default_count=_env_int("DEFAULT_WORD_COUNT", 6),
        max_count=_env_int("MAX_WORD_COUNT", 20),
        strict_count=_env_flag("STRICT_WORD_COUNT", False),
        app_env=os.getenv("APP_ENV", "production").strip().lower(),
    )


def get_api_url() -> str:
    """Endpoint the flashcard UI posts to."""
    return os.getenv("POLYPATH_API_URL", DEFAULT_API_URL)
