from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import psycopg
from psycopg import errors as pg_errors
from psycopg_pool import AsyncConnectionPool

from app.domain.entities import Account
from app.domain.errors import (
    AccountAlreadyExists,
    AccountNotFound,
    StaleAccountVersion,
    TransientStorageError,
)
from app.domain.ports.identity_store import IdentityStorePort

logger = logging.getLogger(__name__)

_COLUMNS = "id, username, email, origin, zone_id, verified, version"


def _row_to_account(row) -> Account:
    id_, username, email, origin, zone_id, verified, version = row
    return Account(
        id=str(id_),
        username=str(username),
        email=str(email),
        origin=str(origin),
        zone_id=str(zone_id),
        verified=bool(verified),
        version=int(version),
    )


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except psycopg.OperationalError as e:
        logger.warning("identity store unavailable", extra={"error": str(e)})
        raise TransientStorageError("identity store unavailable") from e


class PgIdentityStore(IdentityStorePort):
    """
    Postgres implementation of IdentityStorePort.

    NOTE:
    - Every call borrows its own connection; the pool commits on clean exit.
    - Uniqueness of (zone_id, username, origin) is the table's constraint,
      so concurrent signups are resolved by the insert itself.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        *,
        hash_password: Callable[[str], str],
        verify_password: Callable[[str, str], bool],
    ) -> None:
        self._pool = pool
        self._hash_password = hash_password
        self._verify_password = verify_password

    async def _fetch_all(self, sql: str, params: tuple) -> list[Account]:
        with _storage_errors():
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(sql, params)
                    rows = await cur.fetchall()
        return [_row_to_account(r) for r in rows or ()]

    async def _fetch_one(self, sql: str, params: tuple) -> Optional[Account]:
        rows = await self._fetch_all(sql, params)
        return rows[0] if rows else None

    async def find_by_username_and_origin(
        self, username: str, origin: str, zone_id: str
    ) -> list[Account]:
        sql = f"""
        SELECT {_COLUMNS}
        FROM accounts
        WHERE username = LOWER(TRIM(%s)) AND origin = %s AND zone_id = %s
        ORDER BY created_at
        """
        return await self._fetch_all(sql, (username, origin, zone_id))

    async def find_by_username(self, username: str, zone_id: str) -> list[Account]:
        sql = f"""
        SELECT {_COLUMNS}
        FROM accounts
        WHERE username = LOWER(TRIM(%s)) AND zone_id = %s
        ORDER BY created_at
        """
        return await self._fetch_all(sql, (username, zone_id))

    async def create_user(self, account: Account, password: str) -> Account:
        sql = f"""
        INSERT INTO accounts (username, email, origin, zone_id, password_hash, verified)
        VALUES (%s, %s, %s, %s, %s, false)
        RETURNING {_COLUMNS}
        """
        params = (
            account.username,
            account.email,
            account.origin,
            account.zone_id,
            self._hash_password(password),
        )
        try:
            created = await self._fetch_one(sql, params)
        except pg_errors.UniqueViolation as e:
            raise AccountAlreadyExists(
                f"{account.username} already exists for origin {account.origin}"
            ) from e
        if created is None:
            raise RuntimeError("create_user returned no row")
        return created

    async def retrieve(self, user_id: str, zone_id: str) -> Account:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE id = %s AND zone_id = %s"
        found = await self._fetch_one(sql, (user_id, zone_id))
        if found is None:
            raise AccountNotFound(user_id)
        return found

    async def verify(self, user_id: str, version: int, zone_id: str) -> Account:
        sql = f"""
        UPDATE accounts
        SET verified = true, version = version + 1, updated_at = NOW()
        WHERE id = %s AND zone_id = %s AND version = %s
        RETURNING {_COLUMNS}
        """
        updated = await self._fetch_one(sql, (user_id, zone_id, version))
        if updated is None:
            # distinguishes a vanished row from a version race
            await self.retrieve(user_id, zone_id)
            raise StaleAccountVersion(user_id, version)
        return updated

    async def check_password_matches(
        self, user_id: str, candidate: str, zone_id: str
    ) -> bool:
        sql = "SELECT password_hash FROM accounts WHERE id = %s AND zone_id = %s"
        with _storage_errors():
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(sql, (user_id, zone_id))
                    row = await cur.fetchone()
        if not row:
            raise AccountNotFound(user_id)
        if not row[0]:
            return False
        return self._verify_password(candidate, row[0])

    async def change_password(
        self, user_id: str, new_password: str, zone_id: str
    ) -> Account:
        sql = f"""
        UPDATE accounts
        SET password_hash = %s,
            version = version + 1,
            password_changed_at = NOW(),
            updated_at = NOW()
        WHERE id = %s AND zone_id = %s
        RETURNING {_COLUMNS}
        """
        updated = await self._fetch_one(
            sql, (self._hash_password(new_password), user_id, zone_id)
        )
        if updated is None:
            raise AccountNotFound(user_id)
        return updated
