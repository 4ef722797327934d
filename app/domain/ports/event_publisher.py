from __future__ import annotations

from typing import Protocol

from app.schemas.events import AccountEvent


class AccountEventPublisherPort(Protocol):
    async def publish(self, event: AccountEvent) -> None:
        """Best-effort notification to interested listeners."""
