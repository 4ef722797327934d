from __future__ import annotations

from typing import Optional

import httpx

from app.domain.ports.message_port import MessagePort, MessageType


class MessageDeliveryError(RuntimeError):
    pass


class HttpMessageAdapter(MessagePort):
    """Hands messages to the mail relay over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        *,
        recipient: str,
        category: MessageType,
        subject: str,
        content: str,
    ) -> None:
        url = f"{self._base_url}{self._send_path}"
        payload = {
            "to": recipient,
            "category": MessageType(category).value,
            "subject": subject,
            "body": content,
        }

        try:
            resp = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise MessageDeliveryError(f"mail relay HTTP error: {e}") from e
        if not (200 <= resp.status_code < 300):
            raise MessageDeliveryError(
                f"mail relay responded {resp.status_code}: {resp.text[:200]}"
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
