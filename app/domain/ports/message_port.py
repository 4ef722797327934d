from __future__ import annotations

from enum import Enum
from typing import Protocol


class MessageType(str, Enum):
    CREATE_ACCOUNT_CONFIRMATION = "create_account_confirmation"
    PASSWORD_RESET = "password_reset"


class MessagePort(Protocol):
    async def send(
        self,
        *,
        recipient: str,
        category: MessageType,
        subject: str,
        content: str,
    ) -> None:
        """Deliver a message. Raises on transport failure."""
