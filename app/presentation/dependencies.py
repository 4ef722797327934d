from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from app.application.messages import MessageBranding
from app.application.provisioning import AccountProvisioner
from app.domain.entities import DEFAULT_ZONE_ID, IdentityZone
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.client_registry import ClientRegistryPort
from app.domain.ports.event_publisher import AccountEventPublisherPort
from app.domain.ports.identity_store import IdentityStorePort
from app.domain.ports.message_port import MessagePort
from app.domain.ports.password_policy import PasswordPolicyPort
from app.domain.redirects import RedirectResolver
from app.infrastructure.db.client_registry import PgClientRegistry
from app.infrastructure.db.identity_store import PgIdentityStore
from app.infrastructure.db.pool import get_pool
from app.infrastructure.redis_cache.action_code_store import RedisActionCodeStore
from app.infrastructure.redis_cache.event_publisher import RedisAccountEventPublisher
from app.infrastructure.redis_cache.pool import get_redis
from app.infrastructure.security.password import hash_password, verify_password
from app.settings import get_settings


def get_zone(
    x_identity_zone_id: Annotated[Optional[str], Header()] = None,
) -> IdentityZone:
    if not x_identity_zone_id or x_identity_zone_id == DEFAULT_ZONE_ID:
        return IdentityZone.default(get_settings().default_zone_name)
    return IdentityZone(id=x_identity_zone_id, name=x_identity_zone_id)


def get_identity_store() -> IdentityStorePort:
    return PgIdentityStore(
        get_pool(), hash_password=hash_password, verify_password=verify_password
    )


def get_provisioner(
    store: Annotated[IdentityStorePort, Depends(get_identity_store)],
) -> AccountProvisioner:
    return AccountProvisioner(store)


def get_code_store() -> ActionCodeStorePort:
    return RedisActionCodeStore(get_redis(), key_prefix=get_settings().code_key_prefix)


def get_client_registry() -> ClientRegistryPort:
    return PgClientRegistry(get_pool())


def get_password_policy() -> PasswordPolicyPort:
    return get_settings().password_policy()


def get_redirect_resolver() -> RedirectResolver:
    return RedirectResolver(get_settings().default_redirect_url)


def get_event_publisher() -> AccountEventPublisherPort:
    return RedisAccountEventPublisher(
        get_redis(), channel=get_settings().account_events_channel
    )


def get_branding() -> MessageBranding:
    settings = get_settings()
    return MessageBranding(
        service_name=settings.service_name, base_url=settings.public_base_url
    )


def get_activation_code_ttl_seconds() -> int:
    return get_settings().activation_code_ttl_seconds


def get_reset_code_ttl_seconds() -> int:
    return get_settings().reset_code_ttl_seconds


def get_message_port(request: Request) -> MessagePort:
    # This is set in app.main lifespan()
    return request.app.state.message_adapter
