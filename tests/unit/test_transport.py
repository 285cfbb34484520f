import json

import httpx
import pytest

from quickask.errors import ConfigError, TransportError
from quickask.providers.base import Message, MessageRequest
from quickask.providers.transport import MessagesTransport


def _request() -> MessageRequest:
    return MessageRequest(
        model="claude-test",
        max_tokens=32,
        temperature=0.1,
        system="sys",
        messages=(Message.user_text("ping"),),
    )


def test_empty_api_key_fails_fast() -> None:
    with pytest.raises(ConfigError):
        MessagesTransport("")
    with pytest.raises(ConfigError):
        MessagesTransport("   ")


@pytest.mark.asyncio
async def test_send_posts_headers_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text='{"content": []}')

    transport = MessagesTransport(
        "secret",
        base_url="https://api.test/v1/",
        transport=httpx.MockTransport(handler),
    )
    payload = await transport.send(_request())

    assert payload == '{"content": []}'
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.test/v1/messages"
    assert request.headers["x-api-key"] == "secret"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert request.headers["content-type"] == "application/json"
    body = json.loads(request.content.decode("utf-8"))
    assert body["messages"][0]["content"][0]["text"] == "ping"


@pytest.mark.asyncio
async def test_non_2xx_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(529, text='{"error": "overloaded"}')

    transport = MessagesTransport("secret", transport=httpx.MockTransport(handler))
    with pytest.raises(TransportError) as excinfo:
        await transport.send(_request())

    err = excinfo.value
    assert err.retryable is True
    assert err.status_code == 529
    assert err.body == '{"error": "overloaded"}'
    assert "529" in str(err)
    assert "overloaded" in str(err)


@pytest.mark.asyncio
async def test_network_fault_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = MessagesTransport("secret", transport=httpx.MockTransport(handler))
    with pytest.raises(TransportError) as excinfo:
        await transport.send(_request())

    assert excinfo.value.status_code is None
    assert excinfo.value.retryable is True
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_configured_status_is_not_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="bad request")

    transport = MessagesTransport(
        "secret",
        non_retryable_statuses=frozenset({400}),
        transport=httpx.MockTransport(handler),
    )
    with pytest.raises(TransportError) as excinfo:
        await transport.send(_request())
    assert excinfo.value.retryable is False


@pytest.mark.asyncio
async def test_shared_client_is_reused() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, text="ok")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = MessagesTransport("secret", client=client)
        assert await transport.send(_request()) == "ok"
        assert await transport.send(_request()) == "ok"
        assert not client.is_closed
    assert calls == 2
