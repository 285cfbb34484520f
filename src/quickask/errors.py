"""quickask exception hierarchy.

All quickask-specific exceptions inherit from QuickAskError. The retry
orchestrator only retries errors whose ``retryable`` flag is set.
"""


class QuickAskError(Exception):
    """Base exception for all quickask errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ConfigError(QuickAskError):
    """Invalid or missing configuration."""


class TransportError(QuickAskError):
    """Non-2xx response or network fault talking to the Messages API."""

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        body: str | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.status_code = status_code
        self.body = body


class RetriesExhaustedError(QuickAskError):
    """Attempt budget spent without a successful call."""

    def __init__(self, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__(f"Max attempts ({attempts}) reached. Giving up.")
        self.attempts = attempts
        self.last_error = last_error


class ExtractionError(QuickAskError):
    """Response was received but holds no usable text content."""


class CanceledError(QuickAskError):
    """Call aborted through its cancellation event."""
