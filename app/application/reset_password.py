import logging

from app.application.action_codes import consume_code
from app.application.provisioning import AccountProvisioner
from app.domain.entities import Account, IdentityZone
from app.domain.errors import PasswordReuse
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.password_policy import PasswordPolicyPort
from app.schemas.code_payloads import ResetPayload

logger = logging.getLogger(__name__)


async def reset_password(
    provisioner: AccountProvisioner,
    code_store: ActionCodeStorePort,
    password_policy: PasswordPolicyPort,
    zone: IdentityZone,
    code: str,
    new_password: str,
) -> Account:
    # policy first: a rejected password must not burn the code
    password_policy.validate(new_password)

    payload = await consume_code(code_store, code, ResetPayload, zone)
    account = await provisioner.retrieve(payload.user_id, zone)

    if await provisioner.password_matches(account.id, new_password, zone):
        raise PasswordReuse()

    updated = await provisioner.change_password(account.id, new_password, zone)
    logger.info("password reset", extra={"user_id": updated.id, "zone_id": zone.id})
    return updated
