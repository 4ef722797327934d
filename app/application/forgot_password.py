import logging
from dataclasses import dataclass
from typing import Optional

from app.application.action_codes import issue_code
from app.application.provisioning import AccountProvisioner
from app.domain.entities import ActionCode, IdentityZone, Origin, normalize_username
from app.domain.errors import AccountNotFound, ResetConflict
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.event_publisher import AccountEventPublisherPort
from app.schemas.code_payloads import ResetPayload
from app.schemas.events import PasswordResetRequested

logger = logging.getLogger(__name__)

RESET_CODE_TTL_SECONDS = 30 * 60


@dataclass(frozen=True)
class ForgotPasswordInfo:
    user_id: str
    email: str
    code: ActionCode


async def forgot_password(
    provisioner: AccountProvisioner,
    code_store: ActionCodeStorePort,
    zone: IdentityZone,
    email: str,
    events: Optional[AccountEventPublisherPort] = None,
    code_ttl_seconds: int = RESET_CODE_TTL_SECONDS,
) -> ForgotPasswordInfo:
    """
    Issue a reset code for the locally managed account owning `email`.

    Raises AccountNotFound when nobody has that username, and ResetConflict
    when the username only exists under another origin (its password is
    not ours to reset).
    """
    normalized_email = normalize_username(email)
    accounts = await provisioner.find(normalized_email, Origin.UAA, zone)
    if not accounts:
        elsewhere = await provisioner.find_any_origin(normalized_email, zone)
        if elsewhere:
            raise ResetConflict(elsewhere[0].id)
        raise AccountNotFound(normalized_email)

    account = accounts[0]
    issued = await issue_code(
        code_store,
        ResetPayload(zone_id=zone.id, user_id=account.id),
        code_ttl_seconds,
    )
    logger.info(
        "password reset code issued", extra={"user_id": account.id, "zone_id": zone.id}
    )

    if events is not None:
        event = PasswordResetRequested(
            zone_id=zone.id,
            subject=normalized_email,
            user_id=account.id,
            code=issued.code,
        )
        try:
            await events.publish(event)
        except Exception:  # noqa: BLE001
            logger.warning(
                "reset event not published",
                extra={"user_id": account.id, "zone_id": zone.id},
                exc_info=True,
            )

    return ForgotPasswordInfo(user_id=account.id, email=account.email, code=issued)
