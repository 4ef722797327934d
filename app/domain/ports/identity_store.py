from __future__ import annotations

from typing import Protocol

from app.domain.entities import Account


class IdentityStorePort(Protocol):
    async def find_by_username_and_origin(
        self, username: str, origin: str, zone_id: str
    ) -> list[Account]:
        """Accounts matching (username, origin) in the zone."""

    async def find_by_username(self, username: str, zone_id: str) -> list[Account]:
        """Accounts with this username in the zone, any origin."""

    async def create_user(self, account: Account, password: str) -> Account:
        """
        Insert an unverified account.
        Raise AccountAlreadyExists on a (zone, username, origin) uniqueness violation.
        """

    async def retrieve(self, user_id: str, zone_id: str) -> Account:
        """Raise AccountNotFound if missing."""

    async def verify(self, user_id: str, version: int, zone_id: str) -> Account:
        """
        Mark verified if the stored version still equals `version`.
        Raise StaleAccountVersion otherwise.
        """

    async def check_password_matches(
        self, user_id: str, candidate: str, zone_id: str
    ) -> bool:
        """True if `candidate` is the account's current password."""

    async def change_password(
        self, user_id: str, new_password: str, zone_id: str
    ) -> Account:
        """Store the new password and bump the version."""
