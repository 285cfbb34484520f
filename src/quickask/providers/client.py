"""Anthropic client: request building, retrying transport, answer extraction."""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

import httpx

from quickask.config import Settings, get_settings
from quickask.errors import ConfigError
from quickask.providers.base import Message, MessageRequest
from quickask.providers.extract import extract_text
from quickask.providers.retry import RetryPolicy, retry_call
from quickask.providers.transport import MessagesTransport

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant who is excellent at planning tasks and executing the plan "
    "in the correct order. If you don't know how to do something, answer "
    '"I don\'t know how to do that."'
)

ANSWER_INSTRUCTIONS = (
    "\nAnswer this question completely, but as concisely as possible. "
    "Do not include additional text except for the answer to the question "
    "(e.g. 'Certainly ...').\n"
)


def wrap_prompt(prompt: str) -> str:
    return f"{ANSWER_INSTRUCTIONS}{prompt}"


class AnthropicClient:
    def __init__(
        self,
        api_key: str,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        policy: RetryPolicy | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigError("The ANTHROPIC_API_KEY environment variable is not set.")
        self.settings = settings or get_settings()
        self.policy = policy or self.settings.retry_policy()
        self._rng = rng
        self._transport = MessagesTransport(
            api_key,
            base_url=self.settings.anthropic_base_url,
            api_version=self.settings.anthropic_version,
            timeout_seconds=self.settings.anthropic_timeout_seconds,
            non_retryable_statuses=self.settings.non_retryable_statuses(),
            transport=transport,
            client=http_client,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "AnthropicClient":
        settings = settings or get_settings()
        return cls(
            settings.anthropic_api_key,
            settings,
            transport=transport,
            http_client=http_client,
        )

    def build_request(self, prompt: str) -> MessageRequest:
        if not prompt.strip():
            raise ValueError("prompt must not be empty")
        return MessageRequest(
            model=self.settings.anthropic_model,
            max_tokens=self.settings.anthropic_max_tokens,
            temperature=self.settings.anthropic_temperature,
            system=SYSTEM_PROMPT,
            messages=(Message.user_text(wrap_prompt(prompt)),),
        )

    async def retry_messages(
        self,
        request: MessageRequest,
        *,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Send ``request`` with retries and return the raw response payload."""
        return await retry_call(
            lambda: self._transport.send(request),
            policy or self.policy,
            sleep=sleep,
            rng=self._rng,
            cancel_event=cancel_event,
        )

    async def perform_query(
        self,
        prompt: str,
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        request = self.build_request(prompt)
        payload = await self.retry_messages(request, sleep=sleep, cancel_event=cancel_event)
        answer = extract_text(payload)
        logger.debug("Extracted answer of %d characters", len(answer))
        return answer
