"""structlog-backed logging setup for the CLI."""

import logging
import sys
from typing import TextIO

import structlog

# httpx logs every request at INFO; retries are already reported by the orchestrator.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    level: str,
    json_output: bool | None = None,
    *,
    app_env: str = "dev",
    stream: TextIO | None = None,
) -> None:
    """Route stdlib logging through structlog.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output. If None, JSON only when ``app_env`` is prod.
        app_env: Deployment environment name.
        stream: Destination stream, stderr by default.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if json_output is None:
        json_output = app_env == "prod"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
