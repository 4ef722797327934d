import logging
from dataclasses import dataclass

from app.application.action_codes import consume_code
from app.application.provisioning import AccountProvisioner
from app.domain.entities import IdentityZone
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.client_registry import ClientRegistryPort
from app.domain.redirects import RedirectResolver
from app.schemas.code_payloads import ActivationPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountCreationResult:
    user_id: str
    username: str
    email: str
    redirect_location: str


async def complete_activation(
    provisioner: AccountProvisioner,
    code_store: ActionCodeStorePort,
    client_registry: ClientRegistryPort,
    redirects: RedirectResolver,
    zone: IdentityZone,
    code: str,
) -> AccountCreationResult:
    payload = await consume_code(code_store, code, ActivationPayload, zone)

    account = await provisioner.retrieve(payload.user_id, zone)
    account.ensure_unverified()
    account = await provisioner.verify(account.id, account.version, zone)
    logger.info("account verified", extra={"user_id": account.id, "zone_id": zone.id})

    registration = None
    if payload.client_id:
        registration = await client_registry.lookup(payload.client_id, zone.id)
        if registration is None:
            logger.info(
                "unknown client on activation; using default redirect",
                extra={"client_id": payload.client_id, "zone_id": zone.id},
            )
    redirect_location = redirects.resolve(payload.redirect_uri or "", registration)

    return AccountCreationResult(
        user_id=account.id,
        username=account.username,
        email=account.email,
        redirect_location=redirect_location,
    )
