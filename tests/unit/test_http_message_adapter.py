import json

import httpx
import pytest

from app.domain.ports.message_port import MessageType
from app.infrastructure.messaging.http_message_adapter import (
    HttpMessageAdapter,
    MessageDeliveryError,
)


def _adapter(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpMessageAdapter(base_url="http://mail-relay:8025/", client=client, **kwargs), client


async def test_send_posts_the_message():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["json"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(202, text="Accepted")

    adapter, client = _adapter(handler)
    await adapter.send(
        recipient="a@a.com",
        category=MessageType.CREATE_ACCOUNT_CONFIRMATION,
        subject="Hi",
        content="Hello",
    )

    assert seen["url"] == "http://mail-relay:8025/send"
    assert seen["json"] == {
        "to": "a@a.com",
        "category": "create_account_confirmation",
        "subject": "Hi",
        "body": "Hello",
    }
    await client.aclose()


async def test_custom_send_path():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        return httpx.Response(200, json={"ok": True})

    adapter, client = _adapter(handler, send_path="api/v2/messages")
    await adapter.send(
        recipient="b@a.com",
        category=MessageType.PASSWORD_RESET,
        subject="Reset",
        content="Body",
    )
    assert seen["path"] == "/api/v2/messages"
    await client.aclose()


async def test_non_2xx_raises_delivery_error():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(422, text="nope")

    adapter, client = _adapter(handler)
    with pytest.raises(MessageDeliveryError) as ei:
        await adapter.send(
            recipient="x@y.com",
            category=MessageType.PASSWORD_RESET,
            subject="S",
            content="B",
        )

    msg = str(ei.value)
    assert "mail relay responded 422" in msg
    assert "nope" in msg
    await client.aclose()


async def test_network_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    adapter, client = _adapter(handler)
    with pytest.raises(MessageDeliveryError) as ei:
        await adapter.send(
            recipient="x@y.com",
            category=MessageType.PASSWORD_RESET,
            subject="S",
            content="B",
        )
    assert "mail relay HTTP error:" in str(ei.value)
    assert isinstance(ei.value.__cause__, httpx.ConnectError)
    await client.aclose()


async def test_aclose_closes_owned_client_only():
    owned = HttpMessageAdapter(base_url="http://mail-relay:8025")
    await owned.aclose()
    assert owned._client.is_closed  # type: ignore[attr-defined]

    shared_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _: httpx.Response(200))
    )
    not_owned = HttpMessageAdapter(base_url="http://mail-relay:8025", client=shared_client)

    await not_owned.aclose()
    assert shared_client.is_closed is False
    await shared_client.aclose()
