from __future__ import annotations

from typing import Optional

import psycopg
from psycopg_pool import AsyncConnectionPool

from app.domain.entities import RedirectRegistration
from app.domain.errors import TransientStorageError
from app.domain.ports.client_registry import ClientRegistryPort


class PgClientRegistry(ClientRegistryPort):
    """Read-only view over registered OAuth clients' redirect settings."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def lookup(
        self, client_id: str, zone_id: str
    ) -> Optional[RedirectRegistration]:
        sql = """
        SELECT client_id, redirect_uris, signup_redirect_url
        FROM oauth_clients
        WHERE client_id = %s AND zone_id = %s
        """
        try:
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(sql, (client_id, zone_id))
                    row = await cur.fetchone()
        except psycopg.OperationalError as e:
            raise TransientStorageError("client registry unavailable") from e

        if not row:
            return None
        cid, redirect_uris, signup_redirect_url = row
        return RedirectRegistration(
            client_id=str(cid),
            redirect_uris=tuple(redirect_uris or ()),
            signup_redirect_url=signup_redirect_url,
        )
