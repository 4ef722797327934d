from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from app.domain.entities import ActionCode


class ActionCodeStorePort(Protocol):
    async def generate(
        self,
        data: bytes,
        expires_at: datetime,
        *,
        subject: str | None = None,
        scope: str | None = None,
    ) -> ActionCode:
        """
        Create a fresh code bound to `data`, unusable at or after `expires_at`.
        When subject/scope are given the code becomes the latest one for that pair.
        Raises TransientStorageError if the store is unavailable.
        """

    async def retrieve(self, code: str) -> Optional[ActionCode]:
        """
        Atomically read and delete the code. None if it never existed,
        expired, or was already retrieved.
        """

    async def retrieve_latest(self, subject: str, scope: str) -> Optional[ActionCode]:
        """Most recent live code for (subject, scope), without consuming it."""
