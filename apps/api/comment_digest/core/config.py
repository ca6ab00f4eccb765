from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# The upstream model is pinned; it is reported by /health and not read from the environment.
GEMINI_MODEL = "gemini-1.5-flash"

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    APP_NAME: str = "comment-digest-api"
    ENV: str = "dev"
    LOG_LEVEL: LogLevel = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]
    MAX_BODY_BYTES: int = 2 * 1024 * 1024

    GEMINI_API_KEY: Optional[str] = None
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_SAFETY_THRESHOLD: str = "BLOCK_MEDIUM_AND_ABOVE"
    LLM_TIMEOUT_SECONDS: float = 30.0

    MAX_REQUEST_COMMENTS: int = 200
    MIN_PROCESSED_COMMENTS: int = 3
    COMMENT_MIN_CHARS: int = 10
    COMMENT_MAX_CHARS: int = 800
    COMMENT_LIMIT: int = 120  # token budget per prompt
    DETAILED_ANALYSIS_THRESHOLD: int = 20

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
    return Settings()
