import logging

import pytest
import structlog

from quickask.config import get_settings

_ENV_KEYS = (
    "APP_ENV",
    "LOG_LEVEL",
    "ANTHROPIC_BASE_URL",
    "ANTHROPIC_VERSION",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_MAX_TOKENS",
    "ANTHROPIC_TEMPERATURE",
    "ANTHROPIC_TIMEOUT_SECONDS",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_INITIAL_DELAY_SECONDS",
    "RETRY_MAX_DELAY_SECONDS",
    "NON_RETRYABLE_STATUS_CODES",
)


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    monkeypatch.setenv("ANSWER_PATH", str(tmp_path / "answer.txt"))
    get_settings.cache_clear()

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    get_settings.cache_clear()
