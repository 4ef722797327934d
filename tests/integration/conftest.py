import os

import psycopg
import pytest
import pytest_asyncio
from redis.asyncio import Redis

from app.infrastructure.db import migrate
from app.infrastructure.db.pool import close_pool, open_pool

REDIS_URL = os.environ.get("REDIS_URL")
DATABASE_URL = os.environ.get("DATABASE_URL")


@pytest_asyncio.fixture
async def redis_client():
    r = Redis.from_url(REDIS_URL, encoding="utf-8", decode_responses=True)
    try:
        yield r
    finally:
        await r.aclose()


@pytest.fixture(scope="session")
def migrated_database():
    """Bring the schema up to date once per run."""
    with psycopg.connect(DATABASE_URL) as conn:
        applied = migrate.applied_versions(conn)
        for path in migrate.pending(migrate.list_migrations(), applied):
            migrate.apply_one(conn, path)


@pytest_asyncio.fixture
async def pool(migrated_database):
    p = await open_pool()
    async with p.connection() as conn:
        await conn.execute("TRUNCATE accounts, oauth_clients;")
    try:
        yield p
    finally:
        await close_pool()
