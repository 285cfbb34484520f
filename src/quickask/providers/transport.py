"""Single-shot HTTP transport for the Anthropic Messages API."""

import httpx

from quickask.errors import ConfigError, TransportError
from quickask.providers.base import MessageRequest

DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
DEFAULT_API_VERSION = "2023-06-01"


class MessagesTransport:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = 120.0,
        non_retryable_statuses: frozenset[int] = frozenset(),
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigError("api key is required")
        self._api_key = api_key
        self.endpoint = f"{base_url.rstrip('/')}/messages"
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self.non_retryable_statuses = non_retryable_statuses
        self._transport = transport
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }

    async def _post(self, client: httpx.AsyncClient, body: str) -> httpx.Response:
        return await client.post(self.endpoint, content=body, headers=self._headers())

    async def send(self, request: MessageRequest) -> str:
        """POST ``request`` once and return the raw response text.

        Raises TransportError for non-2xx statuses and network faults.
        """
        body = request.to_json()
        try:
            if self._client is not None:
                response = await self._post(self._client, body)
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout_seconds, transport=self._transport
                ) as client:
                    response = await self._post(client, body)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"API request failed: {type(exc).__name__}: {exc}"
            ) from exc

        if not response.is_success:
            status = response.status_code
            raise TransportError(
                f"API request failed with status code {status}. "
                f"Response content: {response.text}",
                status_code=status,
                body=response.text,
                retryable=status not in self.non_retryable_statuses,
            )
        return response.text
