"""Click CLI: ask a single question and save the answer."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from quickask.config import get_settings, validate_settings
from quickask.errors import QuickAskError
from quickask.logging import configure_logging
from quickask.providers.client import AnthropicClient

DEFAULT_PROMPT = "What is the capital of Peru?"


def report_error(exc: BaseException) -> None:
    click.echo(f"An error occurred: {exc}")
    cause = exc.__cause__
    if cause is not None:
        click.echo(f"Inner exception: {cause}")


@click.group()
def cli() -> None:
    """quickask: one question to the Anthropic Messages API."""


@cli.command()
@click.argument("prompt", required=False, default=DEFAULT_PROMPT)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Answer file path (default: ANSWER_PATH).",
)
@click.option("--max-attempts", type=int, default=None, help="Override RETRY_MAX_ATTEMPTS.")
@click.option(
    "--initial-delay", type=float, default=None, help="Override RETRY_INITIAL_DELAY_SECONDS."
)
@click.option("--max-delay", type=float, default=None, help="Override RETRY_MAX_DELAY_SECONDS.")
@click.option("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
def ask(
    prompt: str,
    output: Path | None,
    max_attempts: int | None,
    initial_delay: float | None,
    max_delay: float | None,
    log_level: str | None,
) -> None:
    """Ask PROMPT, print the answer and write it to the answer file."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, app_env=settings.app_env)

    overrides = {
        "retry_max_attempts": max_attempts,
        "retry_initial_delay_seconds": initial_delay,
        "retry_max_delay_seconds": max_delay,
    }
    settings = settings.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    try:
        validate_settings(settings)
    except QuickAskError as exc:
        report_error(exc)
        sys.exit(1)

    client = AnthropicClient.from_settings(settings)
    target = output or Path(settings.answer_path)

    click.echo(f"Asking: {prompt}")
    try:
        answer = asyncio.run(client.perform_query(prompt))
        target.write_text(answer, encoding="utf-8")
    except (QuickAskError, ValueError, OSError) as exc:
        report_error(exc)
        sys.exit(1)
    click.echo(f"Answer: {answer}")
