from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AccountEvent(BaseModel):
    type: str
    zone_id: str
    occurred_at: datetime = Field(default_factory=_now)


class PasswordResetRequested(AccountEvent):
    type: Literal["password_reset_requested"] = "password_reset_requested"
    subject: str
    user_id: str
    code: str
