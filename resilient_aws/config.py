"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Credentials come from environment variables or the boto3 credential chain (never hardcoded)
    - get_settings() is cached (lru_cache), one instance per process
    - retry_* settings are the only source of RetryPolicy defaults for clients built from settings
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # AWS
    aws_region: str = "us-east-1"
    aws_profile: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None
    # Local emulators (e.g. localstack) only
    aws_endpoint_url: str | None = None
    # Recorded for callers that assume roles themselves; not used for signing
    aws_role: str | None = None

    # Retry
    retry_max_attempts: int = 10
    retry_min_delay_ms: int = 100
    retry_max_delay_ms: int = 10_000
    retry_jitter: bool = True
    retry_attempt_timeout_seconds: float | None = None
    retry_overall_timeout_seconds: float | None = None

    @field_validator("retry_max_attempts")
    @classmethod
    def check_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retry_max_attempts must be >= 1")
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
