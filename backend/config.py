"""Settings loaded from environment variables (+ optional .env)."""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "claude-sonnet-4-5"
DEFAULT_CORS_ORIGINS = ["http://localhost:5173"]
PLACEHOLDER_API_KEY = "your-api-key-here"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


def normalize_api_key(key: Optional[str]) -> Optional[str]:
    """Blank keys and the .env placeholder both mean "no key"."""
    if key is None:
        return None
    key = key.strip()
    if not key or key == PLACEHOLDER_API_KEY:
        return None
    return key


@dataclass(frozen=True)
class AIConfig:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    max_tokens: int = 1000

    @property
    def has_key(self) -> bool:
        return self.api_key is not None


@dataclass(frozen=True)
class Settings:
    ai: AIConfig = field(default_factory=AIConfig)
    seed_sample_tasks: bool = True
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv(override=False)

    api_key = normalize_api_key(os.getenv("TASKFLOW_AI_API_KEY") or os.getenv("ANTHROPIC_API_KEY"))
    ai = AIConfig(
        api_key=api_key,
        model=os.getenv("TASKFLOW_AI_MODEL") or DEFAULT_MODEL,
        base_url=os.getenv("TASKFLOW_AI_BASE_URL") or None,
    )
    return Settings(
        ai=ai,
        seed_sample_tasks=_env_bool("TASKFLOW_SEED_SAMPLE_TASKS", True),
        cors_origins=_env_list("TASKFLOW_CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        log_level=(os.getenv("TASKFLOW_LOG_LEVEL") or "INFO").upper(),
    )
