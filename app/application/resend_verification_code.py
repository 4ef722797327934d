import logging

from app.application.begin_activation import (
    ACTIVATION_CODE_TTL_SECONDS,
    send_activation_code,
)
from app.application.messages import MessageBranding
from app.application.provisioning import AccountProvisioner
from app.domain.entities import IdentityZone, Origin, normalize_username
from app.domain.errors import AccountNotFound, MalformedCodePayload
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.message_port import MessagePort
from app.schemas.code_payloads import ActivationPayload, decode_payload

logger = logging.getLogger(__name__)


async def previous_redirect_uri(
    code_store: ActionCodeStorePort, email: str, client_id: str | None
) -> str:
    """Redirect the user asked for last time, or "" if nothing usable is left."""
    previous = await code_store.retrieve_latest(email, client_id or "")
    if previous is None:
        return ""
    try:
        return decode_payload(ActivationPayload, previous.data).redirect_uri or ""
    except MalformedCodePayload:
        logger.warning("ignoring undecodable previous activation code")
        return ""


async def resend_verification_code(
    provisioner: AccountProvisioner,
    code_store: ActionCodeStorePort,
    messages: MessagePort,
    zone: IdentityZone,
    email: str,
    client_id: str | None = None,
    branding: MessageBranding = MessageBranding(),
    code_ttl_seconds: int = ACTIVATION_CODE_TTL_SECONDS,
) -> None:
    normalized_email = normalize_username(email)
    accounts = await provisioner.find(normalized_email, Origin.UAA, zone)
    if not accounts:
        raise AccountNotFound(normalized_email)
    account = accounts[0]
    account.ensure_unverified()

    redirect_uri = await previous_redirect_uri(code_store, normalized_email, client_id)
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
