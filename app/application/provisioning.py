from __future__ import annotations

import logging

from app.domain.entities import Account, IdentityZone, Origin, normalize_username
from app.domain.errors import DomainError, ProvisioningError
from app.domain.ports.identity_store import IdentityStorePort

logger = logging.getLogger(__name__)


class AccountProvisioner:
    """
    Creates accounts idempotently per (username, origin) and fronts the
    identity store for the activation and reset use cases.
    """

    def __init__(self, identity_store: IdentityStorePort) -> None:
        self._store = identity_store

    async def create_or_get(
        self, username: str, password: str, origin: str, zone: IdentityZone
    ) -> Account:
        """
        Accounts from the external "unknown" origin are re-used when exactly one
        already exists. Otherwise an insert is attempted: a duplicate raises
        AccountAlreadyExists unchanged, any non-domain failure is wrapped in
        ProvisioningError.
        """
        username = normalize_username(username)
        if origin == Origin.UNKNOWN:
            existing = await self._store.find_by_username_and_origin(
                username, origin, zone.id
            )
            if len(existing) == 1:
                return existing[0]

        candidate = Account(
            username=username, email=username, origin=origin, zone_id=zone.id
        )
        try:
            return await self._store.create_user(candidate, password)
        except DomainError:
            # AccountAlreadyExists, TransientStorageError: callers branch on these
            raise
        except Exception as e:
            logger.error(
                "account creation failed",
                extra={"origin": origin, "zone_id": zone.id},
                exc_info=True,
            )
            raise ProvisioningError(f"Couldn't create user: {username}") from e

    async def find(
        self, username: str, origin: str, zone: IdentityZone
    ) -> list[Account]:
        return await self._store.find_by_username_and_origin(
            normalize_username(username), origin, zone.id
        )

    async def find_any_origin(self, username: str, zone: IdentityZone) -> list[Account]:
        return await self._store.find_by_username(normalize_username(username), zone.id)

    async def retrieve(self, user_id: str, zone: IdentityZone) -> Account:
        return await self._store.retrieve(user_id, zone.id)

    async def verify(self, user_id: str, version: int, zone: IdentityZone) -> Account:
        return await self._store.verify(user_id, version, zone.id)

    async def password_matches(
        self, user_id: str, candidate: str, zone: IdentityZone
    ) -> bool:
        return await self._store.check_password_matches(user_id, candidate, zone.id)

    async def change_password(
        self, user_id: str, new_password: str, zone: IdentityZone
    ) -> Account:
        return await self._store.change_password(user_id, new_password, zone.id)
