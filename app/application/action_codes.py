from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Type

from app.domain.entities import ActionCode, IdentityZone
from app.domain.errors import InvalidCode
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.schemas.code_payloads import CodePayload, P, decode_payload


async def issue_code(
    code_store: ActionCodeStorePort,
    payload: CodePayload,
    ttl_seconds: int,
    *,
    subject: str | None = None,
    scope: str | None = None,
) -> ActionCode:
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
    return await code_store.generate(
        payload.encode(), expires_at, subject=subject, scope=scope
    )


async def consume_code(
    code_store: ActionCodeStorePort,
    code: str,
    model: Type[P],
    zone: IdentityZone,
) -> P:
    """
    Single-use redemption. Unknown, expired and used codes all raise
    InvalidCode; so does a code issued in another zone.
    """
    found = await code_store.retrieve(code)
    if found is None:
        raise InvalidCode()
    payload = decode_payload(model, found.data)
    if payload.zone_id != zone.id:
        raise InvalidCode()
    return payload
