"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from quickask.errors import ConfigError
from quickask.providers.retry import RetryPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    anthropic_api_key: str = Field(alias="ANTHROPIC_API_KEY", default="")
    anthropic_base_url: str = Field(
        alias="ANTHROPIC_BASE_URL", default="https://api.anthropic.com/v1"
    )
    anthropic_version: str = Field(alias="ANTHROPIC_VERSION", default="2023-06-01")
    anthropic_model: str = Field(alias="ANTHROPIC_MODEL", default="claude-3-5-sonnet-20240620")
    anthropic_max_tokens: int = Field(alias="ANTHROPIC_MAX_TOKENS", default=8192)
    anthropic_temperature: float = Field(alias="ANTHROPIC_TEMPERATURE", default=0.1)
    anthropic_timeout_seconds: float = Field(alias="ANTHROPIC_TIMEOUT_SECONDS", default=120.0)

    retry_max_attempts: int = Field(alias="RETRY_MAX_ATTEMPTS", default=10)
    retry_initial_delay_seconds: float = Field(alias="RETRY_INITIAL_DELAY_SECONDS", default=1.0)
    retry_max_delay_seconds: float = Field(alias="RETRY_MAX_DELAY_SECONDS", default=60.0)
    # Comma-separated HTTP statuses that are surfaced immediately instead of retried.
    non_retryable_status_codes: str = Field(alias="NON_RETRYABLE_STATUS_CODES", default="")

    answer_path: str = Field(alias="ANSWER_PATH", default="answer.txt")

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            initial_delay=self.retry_initial_delay_seconds,
            max_delay=self.retry_max_delay_seconds,
        )

    def non_retryable_statuses(self) -> frozenset[int]:
        codes: set[int] = set()
        for raw in self.non_retryable_status_codes.split(","):
            item = raw.strip()
            if not item:
                continue
            try:
                codes.add(int(item))
            except ValueError as exc:
                raise ConfigError(
                    f"invalid status code in NON_RETRYABLE_STATUS_CODES: {item}"
                ) from exc
        return frozenset(codes)


def validate_settings(settings: Settings) -> None:
    """Raise ConfigError listing every problem found in ``settings``."""
    problems: list[str] = []
    if not settings.anthropic_api_key.strip():
        problems.append("ANTHROPIC_API_KEY is not set")
    if not settings.anthropic_base_url.strip():
        problems.append("ANTHROPIC_BASE_URL is empty")
    if settings.anthropic_max_tokens <= 0:
        problems.append("ANTHROPIC_MAX_TOKENS must be > 0")
    if settings.anthropic_timeout_seconds <= 0:
        problems.append("ANTHROPIC_TIMEOUT_SECONDS must be > 0")
    try:
        settings.retry_policy()
    except ValueError as exc:
        problems.append(str(exc))
    try:
        settings.non_retryable_statuses()
    except ConfigError as exc:
        problems.append(str(exc))

    if problems:
        raise ConfigError(f"invalid configuration: {'; '.join(problems)}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
