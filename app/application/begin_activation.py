import logging

from app.application.action_codes import issue_code
from app.application.messages import MessageBranding, activation_message, deliver
from app.application.provisioning import AccountProvisioner
from app.domain.entities import Account, IdentityZone, Origin, normalize_username
from app.domain.errors import AccountAlreadyExists, TransientStorageError
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.message_port import MessagePort, MessageType
from app.domain.ports.password_policy import PasswordPolicyPort
from app.schemas.code_payloads import ActivationPayload

logger = logging.getLogger(__name__)

ACTIVATION_CODE_TTL_SECONDS = 60 * 60
CREATE_ATTEMPTS = 2


async def send_activation_code(
    code_store: ActionCodeStorePort,
    messages: MessagePort,
    branding: MessageBranding,
    zone: IdentityZone,
    account: Account,
    client_id: str | None,
    redirect_uri: str | None,
    code_ttl_seconds: int = ACTIVATION_CODE_TTL_SECONDS,
) -> bool:
    """
    Mint a fresh activation code and mail it. Issuance failures propagate,
    delivery failures are logged; returns whether the message went out.
    """
    payload = ActivationPayload(
        zone_id=zone.id,
        user_id=account.id,
        client_id=client_id,
        redirect_uri=redirect_uri,
    )
    try:
        issued = await issue_code(
            code_store,
            payload,
            code_ttl_seconds,
            subject=account.email,
            scope=client_id or "",
        )
    except TransientStorageError:
        logger.error(
            "activation code issuance failed",
            extra={"user_id": account.id, "zone_id": zone.id},
        )
        raise

    subject, content = activation_message(branding, zone, account.email, issued.code)
    return await deliver(
        messages,
        recipient=account.email,
        category=MessageType.CREATE_ACCOUNT_CONFIRMATION,
        subject=subject,
        content=content,
    )


async def _create_or_find_unverified(
    provisioner: AccountProvisioner, email: str, password: str, zone: IdentityZone
) -> Account:
    """
    Create the account, or fall back to the existing unverified one. The
    duplicate may vanish between the insert and the lookup, so the create is
    tried one more time before AccountAlreadyExists is surfaced.
    """
    for attempt in range(CREATE_ATTEMPTS):
        try:
            account = await provisioner.create_or_get(email, password, Origin.UAA, zone)
        except AccountAlreadyExists:
            existing = await provisioner.find(email, Origin.UAA, zone)
            if not existing:
                logger.warning(
                    "duplicate account vanished before lookup",
                    extra={"zone_id": zone.id, "attempt": attempt + 1},
                )
                continue
            account = existing[0]
            # verified accounts raise AccountAlreadyActive; no code is issued
            account.ensure_unverified()
            logger.info(
                "re-sending activation for unverified account",
                extra={"user_id": account.id, "zone_id": zone.id},
            )
            return account
        logger.info(
            "account created", extra={"user_id": account.id, "zone_id": zone.id}
        )
        return account
    raise AccountAlreadyExists(email)


async def begin_activation(
    provisioner: AccountProvisioner,
    code_store: ActionCodeStorePort,
    messages: MessagePort,
    password_policy: PasswordPolicyPort,
    zone: IdentityZone,
    email: str,
    password: str,
    client_id: str | None = None,
    redirect_uri: str | None = None,
    branding: MessageBranding = MessageBranding(),
    code_ttl_seconds: int = ACTIVATION_CODE_TTL_SECONDS,
) -> Account:
    password_policy.validate(password)
    normalized_email = normalize_username(email)

    account = await _create_or_find_unverified(
        provisioner, normalized_email, password, zone
    )

    await send_activation_code(
        code_store,
        messages,
        branding,
        zone,
        account,
        client_id,
        redirect_uri,
        code_ttl_seconds,
    )
    return account
